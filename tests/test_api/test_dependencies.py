from datetime import timedelta

import pytest

from api import dependencies
from api.dependencies import build_swap_service, cleanup_dependencies, get_swap_service, init_dependencies
from config.settings import Settings
from domain.exceptions.swap import ConfigurationError
from infrastructure.cache.filesystem import FilesystemSwapCache
from infrastructure.cache.memory import InMemorySwapCache
from infrastructure.persistence.database import Database
from infrastructure.sources import DatabaseRateSource, HttpRateSource


def make_settings(tmp_path, **overrides) -> Settings:
    values = {
        'DATABASE_URL': f'sqlite+aiosqlite:///{tmp_path / "swaps.db"}',
        'SWAP_CACHE_DIR': str(tmp_path / 'cache'),
        'REDIS_URL': '',
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


def test_build_swap_service_composes_chain(tmp_path):
    settings = make_settings(tmp_path, SWAP_CACHE_EXPIRATION_SECONDS=600, SOURCE_RETRY_ATTEMPTS=2)

    service = build_swap_service(settings, Database(settings.DATABASE_URL))

    assert isinstance(service.cache, InMemorySwapCache)
    assert isinstance(service.primary_source, DatabaseRateSource)
    assert [type(s) for s in service.fallback_sources] == [HttpRateSource]
    assert service.expiration == timedelta(seconds=600)
    assert service.retry_attempts == 2


def test_build_swap_service_with_filesystem_cache(tmp_path):
    settings = make_settings(tmp_path, SWAP_CACHE_TYPE='filesystem')

    service = build_swap_service(settings, Database(settings.DATABASE_URL))

    assert isinstance(service.cache, FilesystemSwapCache)


def test_build_swap_service_with_bogus_cache_type_fails(tmp_path):
    settings = make_settings(tmp_path, SWAP_CACHE_TYPE='bogus')

    with pytest.raises(ConfigurationError) as exc_info:
        build_swap_service(settings, Database(settings.DATABASE_URL))

    assert 'bogus' in str(exc_info.value)


def test_get_swap_service_before_init_raises():
    dependencies.deps.swap_service = None

    with pytest.raises(RuntimeError):
        get_swap_service()


@pytest.mark.asyncio
async def test_init_and_cleanup_dependencies(tmp_path):
    await init_dependencies(make_settings(tmp_path))
    try:
        service = get_swap_service()
        assert isinstance(service.primary_source, DatabaseRateSource)
        assert await service.primary_source.get_rate('RUB') is None
    finally:
        await cleanup_dependencies()

    assert dependencies.deps.swap_service is None
    assert dependencies.deps.db is None
