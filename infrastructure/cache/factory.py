import logging
import os
from collections.abc import Callable, Mapping
from enum import Enum
from pathlib import Path
from typing import Any

import redis
from pydantic import BaseModel, ConfigDict, ValidationError
from redis.exceptions import RedisError

from domain.exceptions.swap import CacheError, ConfigurationError
from domain.utils.time import utc_now
from infrastructure.cache.base import Clock, SwapCache
from infrastructure.cache.filesystem import FilesystemSwapCache
from infrastructure.cache.memory import InMemorySwapCache
from infrastructure.cache.redis_cache import RedisSwapCache

logger = logging.getLogger(__name__)

REDIS_PING_TIMEOUT = 2


class CacheType(str, Enum):
	MEMORY = 'memory'
	PROCESS_LOCAL_SHARED = 'processLocalShared'
	FILESYSTEM = 'filesystem'


class CacheConfig(BaseModel):
	type: CacheType
	directory: str | None = None
	redis_url: str | None = None
	key_prefix: str = 'swap'

	model_config = ConfigDict(extra='forbid')


def _build_memory(config: CacheConfig, clock: Clock) -> SwapCache:
	return InMemorySwapCache(clock=clock)


def _build_filesystem(config: CacheConfig, clock: Clock) -> SwapCache:
	if not config.directory:
		raise ConfigurationError("Cache type 'filesystem' requires a directory")

	directory = Path(config.directory)
	try:
		directory.mkdir(parents=True, exist_ok=True)
	except OSError as e:
		raise ConfigurationError(
			f"Cache type 'filesystem' unavailable: cannot create {directory}: {e}"
		) from e
	if not os.access(directory, os.W_OK):
		raise ConfigurationError(f"Cache type 'filesystem' unavailable: {directory} is not writable")

	try:
		return FilesystemSwapCache(directory, clock=clock)
	except CacheError as e:
		raise ConfigurationError(f"Cache type 'filesystem' unavailable: {e}") from e


def _ping_redis(redis_url: str) -> None:
	client = redis.Redis.from_url(redis_url, socket_connect_timeout=REDIS_PING_TIMEOUT)
	try:
		client.ping()
	except RedisError as e:
		raise ConfigurationError(
			f"Cache type 'processLocalShared' unavailable: redis at {redis_url} did not answer: {e}"
		) from e
	finally:
		client.close()


def _build_process_local_shared(config: CacheConfig, clock: Clock) -> SwapCache:
	if not config.redis_url:
		raise ConfigurationError(
			"Cache type 'processLocalShared' unavailable: no redis url configured"
		)
	_ping_redis(config.redis_url)
	return RedisSwapCache.from_url(config.redis_url, key_prefix=config.key_prefix, clock=clock)


_BACKENDS: dict[CacheType, Callable[[CacheConfig, Clock], SwapCache]] = {
	CacheType.MEMORY: _build_memory,
	CacheType.PROCESS_LOCAL_SHARED: _build_process_local_shared,
	CacheType.FILESYSTEM: _build_filesystem,
}

_missing = [t.value for t in CacheType if t not in _BACKENDS]
if _missing:
	raise RuntimeError(f'No cache backend registered for: {", ".join(_missing)}')


def _parse_config(config: CacheConfig | Mapping[str, Any]) -> CacheConfig:
	if isinstance(config, CacheConfig):
		return config
	if not isinstance(config, Mapping):
		raise ConfigurationError(f'Cache config must be a mapping, got {type(config).__name__}')

	cache_type = config.get('type')
	if not cache_type:
		raise ConfigurationError('Cache type is missing')

	try:
		CacheType(cache_type)
	except ValueError as e:
		raise ConfigurationError(f'Unexpected swap cache type {cache_type!r}') from e

	try:
		return CacheConfig.model_validate(dict(config))
	except ValidationError as e:
		raise ConfigurationError(f'Invalid cache config for type {cache_type!r}: {e}') from e


def build_cache(config: CacheConfig | Mapping[str, Any], *, clock: Clock = utc_now) -> SwapCache:
	"""Build the cache backend selected by ``config.type``.

	Raises ConfigurationError for a missing or unknown type, for extra keys,
	and when the selected backend cannot be used in this runtime.
	"""
	cache_config = _parse_config(config)
	cache = _BACKENDS[cache_config.type](cache_config, clock)
	logger.info(f'Swap cache backend: {cache_config.type.value} ({type(cache).__name__})')
	return cache
