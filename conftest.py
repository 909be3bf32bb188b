from datetime import datetime, timedelta

import pytest

from library import Library
from sample_data import build_sample_library


class FakeClock:
    """Callable clock that only moves when a test advances it."""

    def __init__(self, start: datetime):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


@pytest.fixture
def clock():
    return FakeClock(datetime(2024, 3, 1, 10, 30))

@pytest.fixture
def lib(clock):
    # Each test gets its own empty catalogue on a controllable clock
    return Library(clock=clock, loan_days=14, recommendation_limit=5)

@pytest.fixture
def seeded(clock):
    return build_sample_library(clock=clock)
