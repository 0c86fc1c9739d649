"""
Shared fixtures: a controllable clock and rate entry factory.
"""

from datetime import UTC, datetime, timedelta
from decimal import Decimal

import pytest

from domain.models.swap import RateEntry

START = datetime(2025, 11, 5, 10, 0, 0, tzinfo=UTC)


class FakeClock:
    def __init__(self, now: datetime = START):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def make_entry():
    def _make(code: str = 'RUB', rate: str = '7.5', source: str = 'database') -> RateEntry:
        return RateEntry(code=code, rate=Decimal(rate), fetched_at=START, source=source)

    return _make
