from datetime import datetime

from domain.models.swap import CacheRecord, RateEntry
from domain.utils.time import utc_now
from infrastructure.cache.base import Clock, SwapCache


class InMemorySwapCache(SwapCache):
	def __init__(self, clock: Clock = utc_now):
		super().__init__(clock)
		self._records: dict[str, CacheRecord] = {}

	async def get(self, key: str) -> RateEntry | None:
		record = self._records.get(key)
		if record is None:
			return None

		if record.is_expired(self.clock()):
			# Only drop the record we looked at; a concurrent set may have replaced it.
			if self._records.get(key) is record:
				del self._records[key]
			return None

		return record.value

	async def set(self, key: str, value: RateEntry, expires_at: datetime) -> None:
		self._records[key] = CacheRecord(key=key, value=value, expires_at=expires_at)

	async def delete(self, key: str) -> None:
		self._records.pop(key, None)

	async def clear(self) -> None:
		self._records.clear()

	def __len__(self) -> int:
		return len(self._records)
