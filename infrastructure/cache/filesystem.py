import asyncio
import logging
import sqlite3
from datetime import datetime
from pathlib import Path

import diskcache as dc

from domain.exceptions.swap import CacheError
from domain.models.swap import CacheRecord, RateEntry
from domain.utils.time import utc_now
from infrastructure.cache.base import Clock, SwapCache
from infrastructure.cache.codec import dump_record, load_record

logger = logging.getLogger(__name__)

DISK_ERRORS = (OSError, sqlite3.Error, dc.Timeout)


class FilesystemSwapCache(SwapCache):
	"""Swap rates kept in a diskcache directory.

	diskcache expires entries on wall-clock time; the stored expiry is checked
	again against this cache's clock on every read.
	"""

	def __init__(self, directory: str | Path, clock: Clock = utc_now, timeout: float = 1):
		super().__init__(clock)
		self.directory = Path(directory)
		try:
			self._cache = dc.Cache(str(self.directory), timeout=timeout)
		except DISK_ERRORS as e:
			raise CacheError(f'Failed to open disk cache at {self.directory}: {e}') from e

	def _read(self, key: str) -> CacheRecord | None:
		try:
			data = self._cache.get(key, default=None)
		except DISK_ERRORS as e:
			raise CacheError(f'Disk cache get failed for {key}: {e}') from e

		if data is None:
			return None

		try:
			return load_record(data)
		except CacheError as e:
			logger.warning(f'Discarding corrupt disk cache entry {key}: {e}')
			self._remove(key)
			return None

	def _write(self, record: CacheRecord) -> None:
		ttl = (record.expires_at - self.clock()).total_seconds()
		if ttl <= 0:
			self._remove(record.key)
			return
		try:
			self._cache.set(record.key, dump_record(record), expire=ttl)
		except DISK_ERRORS as e:
			raise CacheError(f'Disk cache set failed for {record.key}: {e}') from e

	def _remove(self, key: str) -> None:
		try:
			self._cache.delete(key)
		except DISK_ERRORS as e:
			raise CacheError(f'Disk cache delete failed for {key}: {e}') from e

	def _clear(self) -> None:
		try:
			self._cache.clear()
		except DISK_ERRORS as e:
			raise CacheError(f'Disk cache clear failed: {e}') from e

	async def get(self, key: str) -> RateEntry | None:
		record = await asyncio.to_thread(self._read, key)
		if record is None:
			return None

		if record.is_expired(self.clock()):
			await asyncio.to_thread(self._remove, key)
			return None

		return record.value

	async def set(self, key: str, value: RateEntry, expires_at: datetime) -> None:
		record = CacheRecord(key=key, value=value, expires_at=expires_at)
		await asyncio.to_thread(self._write, record)

	async def delete(self, key: str) -> None:
		await asyncio.to_thread(self._remove, key)

	async def clear(self) -> None:
		await asyncio.to_thread(self._clear)

	async def close(self) -> None:
		self._cache.close()

	def __contains__(self, key: str) -> bool:
		return key in self._cache
