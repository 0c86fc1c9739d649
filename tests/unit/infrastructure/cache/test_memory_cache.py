# nosec B101

from datetime import timedelta

import pytest

from infrastructure.cache.memory import InMemorySwapCache


@pytest.mark.asyncio
async def test_set_then_get_before_expiry_returns_value(clock, make_entry):
    cache = InMemorySwapCache(clock=clock)
    entry = make_entry()

    await cache.set('RUB', entry, clock() + timedelta(hours=1))
    clock.advance(minutes=59, seconds=59)

    assert await cache.get('RUB') == entry


@pytest.mark.asyncio
async def test_get_at_expiry_returns_none_and_evicts(clock, make_entry):
    cache = InMemorySwapCache(clock=clock)
    await cache.set('RUB', make_entry(), clock() + timedelta(hours=1))

    clock.advance(hours=1)

    assert await cache.get('RUB') is None
    assert len(cache) == 0


@pytest.mark.asyncio
async def test_get_unknown_key_returns_none(clock):
    cache = InMemorySwapCache(clock=clock)
    assert await cache.get('EUR') is None


@pytest.mark.asyncio
async def test_set_overwrites_value_and_expiry(clock, make_entry):
    cache = InMemorySwapCache(clock=clock)
    await cache.set('RUB', make_entry(rate='7.5'), clock() + timedelta(minutes=1))
    await cache.set('RUB', make_entry(rate='8.0'), clock() + timedelta(hours=1))

    clock.advance(minutes=5)
    result = await cache.get('RUB')

    assert result is not None
    assert str(result.rate) == '8.0'


@pytest.mark.asyncio
async def test_delete_and_clear(clock, make_entry):
    cache = InMemorySwapCache(clock=clock)
    expires_at = clock() + timedelta(hours=1)
    await cache.set('RUB', make_entry('RUB'), expires_at)
    await cache.set('EUR', make_entry('EUR'), expires_at)

    await cache.delete('RUB')
    await cache.delete('missing')
    assert await cache.get('RUB') is None
    assert await cache.get('EUR') is not None

    await cache.clear()
    assert len(cache) == 0
