import logging
import re
from contextlib import AsyncExitStack
from datetime import timedelta

from tenacity import AsyncRetrying, retry_if_exception_type, stop_after_attempt, wait_exponential

from domain.exceptions.swap import CacheError, InvalidCurrencyError, SourceUnavailableError
from domain.models.swap import NotFound, RateEntry
from domain.utils.time import utc_now
from infrastructure.cache.base import Clock, SwapCache
from infrastructure.sources.base import RateSource

logger = logging.getLogger(__name__)

CODE_PATTERN = re.compile(r'^[A-Z]{3,5}$')
DEFAULT_EXPIRATION = timedelta(hours=1)


class CachedSwapService:
    """Cache-first rate lookup over an ordered chain of sources.

    A cache hit is returned as is. On a miss the primary source is asked
    first, then each fallback in order; the first rate found is written to
    the cache with ``now + expiration`` and returned. When no source has a
    rate the cache is left untouched and ``NotFound`` is returned.
    """

    def __init__(
        self,
        cache: SwapCache,
        primary_source: RateSource,
        fallback_sources: list[RateSource],
        expiration: timedelta = DEFAULT_EXPIRATION,
        clock: Clock = utc_now,
        propagate_source_errors: bool = False,
        retry_attempts: int = 1,
        retry_max_wait: float = 2.0,
    ):
        if expiration <= timedelta(0):
            raise ValueError('expiration must be positive')
        if retry_attempts < 1:
            raise ValueError('retry_attempts must be at least 1')

        self.cache = cache
        self.primary_source = primary_source
        self.fallback_sources = fallback_sources
        self.expiration = expiration
        self.clock = clock
        self.propagate_source_errors = propagate_source_errors
        self.retry_attempts = retry_attempts
        self.retry_max_wait = retry_max_wait

    @property
    def sources(self) -> list[RateSource]:
        return [self.primary_source] + self.fallback_sources

    @staticmethod
    def normalize_code(code: str) -> str:
        normalized = (code or '').strip().upper()
        if not CODE_PATTERN.match(normalized):
            raise InvalidCurrencyError(f'Invalid currency code: {code!r}')
        return normalized

    async def get_rate(self, code: str) -> RateEntry | NotFound:
        code = self.normalize_code(code)

        cached = await self._read_cache(code)
        if cached is not None:
            logger.debug(f'Cache hit for {code}')
            return cached
        logger.debug(f'Cache miss for {code}')

        for source in self.sources:
            entry = await self._fetch_from_source(source, code)
            if entry is None:
                continue

            await self._write_cache(code, entry)
            logger.info(f'Resolved {code} from {source.name}: {entry.rate}')
            return entry

        logger.info(f'No source has a rate for {code}')
        return NotFound(code=code)

    async def invalidate(self, code: str) -> None:
        code = self.normalize_code(code)
        await self.cache.delete(code)
        logger.info(f'Invalidated cached rate for {code}')

    async def close(self) -> None:
        # cache first, then sources in chain order; a failing close does not skip the rest
        async with AsyncExitStack() as stack:
            for source in reversed(self.sources):
                stack.push_async_callback(source.close)
            stack.push_async_callback(self.cache.close)

    async def _fetch_from_source(self, source: RateSource, code: str) -> RateEntry | None:
        retrying = AsyncRetrying(
            stop=stop_after_attempt(self.retry_attempts),
            wait=wait_exponential(multiplier=0.1, max=self.retry_max_wait),
            retry=retry_if_exception_type(SourceUnavailableError),
            reraise=True,
        )
        try:
            async for attempt in retrying:
                with attempt:
                    return await source.get_rate(code)
        except SourceUnavailableError as e:
            if self.propagate_source_errors:
                raise
            logger.warning(f'Source {source.name} unavailable for {code}, skipping: {e}')
        return None

    async def _read_cache(self, code: str) -> RateEntry | None:
        try:
            return await self.cache.get(code)
        except CacheError as e:
            logger.warning(f'Cache read failed for {code}, treating as miss: {e}')
            return None

    async def _write_cache(self, code: str, entry: RateEntry) -> None:
        expires_at = self.clock() + self.expiration
        try:
            await self.cache.set(code, entry, expires_at)
        except CacheError as e:
            logger.warning(f'Cache write failed for {code}: {e}')
