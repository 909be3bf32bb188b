"""Result values returned by catalogue operations.

Operations never raise for expected failures (unknown ids, wrong borrower
and so on).  They return an ``Outcome`` carrying the human readable message
and, on failure, a ``Reason`` callers can branch on.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class Reason(str, Enum):
    NOT_FOUND = "not_found"
    INVALID_STATE = "invalid_state"
    MISMATCH = "mismatch"
    INVALID_PARAMETER = "invalid_parameter"


@dataclass(frozen=True)
class Outcome:
    ok: bool
    message: str
    reason: Optional[Reason] = None

    @classmethod
    def success(cls, message: str) -> "Outcome":
        return cls(ok=True, message=message)

    @classmethod
    def failure(cls, reason: Reason, message: str) -> "Outcome":
        return cls(ok=False, message=message, reason=reason)

    def __bool__(self) -> bool:
        return self.ok

    def __str__(self) -> str:
        return self.message

    def to_dict(self) -> dict:
        return {
            "ok": self.ok,
            "message": self.message,
            "reason": self.reason.value if self.reason else None,
        }
