from datetime import datetime

from redis import asyncio as redis
from redis.exceptions import RedisError

from domain.exceptions.swap import CacheError
from domain.models.swap import CacheRecord, RateEntry
from domain.utils.time import utc_now
from infrastructure.cache.base import Clock, SwapCache
from infrastructure.cache.codec import dump_record, load_record


class RedisSwapCache(SwapCache):
    """Cache shared by every worker process on a host, kept in redis.

    Redis expires keys on its own clock (PXAT); the stored expiry is checked
    again on read so a skewed redis clock never serves a stale rate.
    """

    def __init__(self, redis_client: redis.Redis, key_prefix: str = "swap", clock: Clock = utc_now):
        super().__init__(clock)
        self.redis = redis_client
        self.key_prefix = key_prefix

    @classmethod
    def from_url(cls, redis_url: str, key_prefix: str = "swap", clock: Clock = utc_now) -> "RedisSwapCache":
        return cls(redis.Redis.from_url(redis_url, decode_responses=True), key_prefix, clock)

    def _make_key(self, key: str) -> str:
        return f"{self.key_prefix}:{key}"

    async def get(self, key: str) -> RateEntry | None:
        redis_key = self._make_key(key)
        try:
            data = await self.redis.get(redis_key)
        except RedisError as e:
            raise CacheError(f"Redis get failed for {redis_key}: {e}") from e

        if not data:
            return None

        record = load_record(data)
        if record.is_expired(self.clock()):
            await self.delete(key)
            return None
        return record.value

    async def set(self, key: str, value: RateEntry, expires_at: datetime) -> None:
        redis_key = self._make_key(key)
        payload = dump_record(CacheRecord(key=key, value=value, expires_at=expires_at))
        try:
            await self.redis.set(redis_key, payload, pxat=int(expires_at.timestamp() * 1000))
        except RedisError as e:
            raise CacheError(f"Redis set failed for {redis_key}: {e}") from e

    async def delete(self, key: str) -> None:
        try:
            await self.redis.delete(self._make_key(key))
        except RedisError as e:
            raise CacheError(f"Redis delete failed for {key}: {e}") from e

    async def clear(self) -> None:
        try:
            keys = [k async for k in self.redis.scan_iter(match=f"{self.key_prefix}:*")]
            if keys:
                await self.redis.delete(*keys)
        except RedisError as e:
            raise CacheError(f"Redis clear failed: {e}") from e

    async def close(self) -> None:
        await self.redis.aclose()
