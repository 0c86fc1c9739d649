from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal


@dataclass(frozen=True)
class RateEntry:
    code: str
    rate: Decimal
    fetched_at: datetime
    source: str


@dataclass(frozen=True)
class CacheRecord:
    key: str
    value: RateEntry
    expires_at: datetime

    def is_expired(self, now: datetime) -> bool:
        return now >= self.expires_at


@dataclass(frozen=True)
class NotFound:
    """Returned when no cache entry or source has a rate for ``code``."""

    code: str

    def __bool__(self) -> bool:
        return False
