import logging
from datetime import timedelta

from application.services import CachedSwapService
from config.settings import Settings, get_settings
from infrastructure.cache.factory import build_cache
from infrastructure.persistence.database import Database
from infrastructure.sources import DatabaseRateSource, HttpRateSource

logger = logging.getLogger(__name__)


class AppDependencies:
	"""Container for application-wide singleton dependencies."""

	db: Database | None = None
	swap_service: CachedSwapService | None = None


deps = AppDependencies()


def build_swap_service(settings: Settings, db: Database) -> CachedSwapService:
	"""Compose the lookup service from explicitly passed collaborators."""
	cache = build_cache(settings.cache_config())
	primary = DatabaseRateSource(db)
	fallback = HttpRateSource(
		settings.SWAP_HTTP_BASE_URL,
		base_currency=settings.SWAP_BASE_CURRENCY,
		api_key=settings.SWAP_HTTP_API_KEY,
		timeout=settings.SWAP_HTTP_TIMEOUT,
	)
	return CachedSwapService(
		cache=cache,
		primary_source=primary,
		fallback_sources=[fallback],
		expiration=timedelta(seconds=settings.SWAP_CACHE_EXPIRATION_SECONDS),
		propagate_source_errors=settings.PROPAGATE_SOURCE_ERRORS,
		retry_attempts=settings.SOURCE_RETRY_ATTEMPTS,
	)


async def init_dependencies(settings: Settings | None = None) -> None:
	"""Initialize all singleton dependencies. Called at app startup."""
	logger.info('Initializing dependencies...')
	settings = settings or get_settings()

	deps.db = Database(settings.DATABASE_URL)
	await deps.db.create_tables()
	logger.info('Database tables created')

	deps.swap_service = build_swap_service(settings, deps.db)
	logger.info('Dependencies initialized')


async def cleanup_dependencies() -> None:
	logger.info('Cleaning up dependencies...')

	if deps.swap_service:
		await deps.swap_service.close()
		deps.swap_service = None
	if deps.db:
		await deps.db.close()
		deps.db = None

	logger.info('Cleanup complete')


def get_swap_service() -> CachedSwapService:
	if deps.swap_service is None:
		raise RuntimeError('Swap service not initialized')
	return deps.swap_service
