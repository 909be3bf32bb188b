"""Borrower records and their loans.

A ``User`` is keyed by name and is created the first time that name borrows
a book.  Active loans sit in ``current_borrowed`` in the order they were
taken out; once returned they move to ``borrow_history`` with their return
timestamp filled in.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional


@dataclass
class Loan:
    """A single borrowing of one book by one user."""
    book_id: int
    borrow_date: datetime
    due_date: datetime
    return_date: Optional[datetime] = None

    @property
    def status(self) -> str:
        """Human readable status: BORROWED or RETURNED."""
        return "RETURNED" if self.return_date is not None else "BORROWED"

    def to_dict(self) -> dict:
        return {
            "book_id": self.book_id,
            "borrow_date": self.borrow_date.isoformat(),
            "due_date": self.due_date.isoformat(),
            "return_date": self.return_date.isoformat() if self.return_date else None,
        }


@dataclass
class User:
    name: str
    current_borrowed: List[Loan] = field(default_factory=list)
    borrow_history: List[Loan] = field(default_factory=list)
    penalty_points: int = 0

    def find_active_loan(self, book_id: int) -> Optional[Loan]:
        for loan in self.current_borrowed:
            if loan.book_id == book_id:
                return loan
        return None

    def all_loans(self) -> List[Loan]:
        """Active loans first, then history, each in insertion order."""
        return [*self.current_borrowed, *self.borrow_history]

    def borrowed_book_ids(self) -> set[int]:
        return {loan.book_id for loan in self.all_loans()}

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "current_borrowed": [loan.to_dict() for loan in self.current_borrowed],
            "borrow_history": [loan.to_dict() for loan in self.borrow_history],
            "penalty_points": self.penalty_points,
        }
