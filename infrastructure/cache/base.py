from abc import ABC, abstractmethod
from collections.abc import Callable
from datetime import datetime

from domain.models.swap import RateEntry
from domain.utils.time import utc_now

Clock = Callable[[], datetime]


class SwapCache(ABC):
	"""Key-value store for rate entries with an absolute expiry per key.

	``get`` never returns a value whose expiry has passed according to the
	cache's clock; expired records are evicted when they are read.
	"""

	def __init__(self, clock: Clock = utc_now):
		self.clock = clock

	@abstractmethod
	async def get(self, key: str) -> RateEntry | None: ...

	@abstractmethod
	async def set(self, key: str, value: RateEntry, expires_at: datetime) -> None: ...

	@abstractmethod
	async def delete(self, key: str) -> None: ...

	@abstractmethod
	async def clear(self) -> None: ...

	async def close(self) -> None:
		return None
