# nosec B101


import json
from datetime import UTC, datetime, timedelta
from unittest.mock import AsyncMock

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from domain.exceptions.currency import CacheError
from domain.models.currency import Rate, RateGraph, RatesResponse
from infrastructure.cache.redis_cache import RedisCacheService

AT = datetime(2025, 9, 27, 10, 30, tzinfo=UTC)


@pytest.fixture
def snapshot():
    return RatesResponse(
        at=AT,
        provider_notes=('BCV: 1 rates', 'Frankfurter: 2 rates'),
        rates=RateGraph([
            Rate('USD', 'VES', 36.5, 'Average of 2 sources', AT),
            Rate('EUR', 'USD', 1.08, 'Frankfurter', AT),
        ]),
    )


@pytest.mark.asyncio
async def test_get_rates_cache_hit_returns_snapshot(snapshot):
    mock_redis = AsyncMock()
    mock_redis.get.return_value = json.dumps(snapshot.to_dict())
    cache_service = RedisCacheService(redis_client=mock_redis)

    result = await cache_service.get_rates()

    assert isinstance(result, RatesResponse)
    assert result.at == AT
    assert result.provider_notes == ('BCV: 1 rates', 'Frankfurter: 2 rates')
    assert result.rates['USD-VES'].value == 36.5
    assert result.rates['USD-VES'].provider == 'Average of 2 sources'
    mock_redis.get.assert_called_once_with('rates:snapshot')


@pytest.mark.asyncio
async def test_get_rates_cache_miss_returns_none():
    mock_redis = AsyncMock()
    mock_redis.get.return_value = None
    cache_service = RedisCacheService(redis_client=mock_redis)

    assert await cache_service.get_rates() is None


@pytest.mark.asyncio
async def test_get_rates_redis_error_raises_cache_error():
    mock_redis = AsyncMock()
    mock_redis.get.side_effect = RedisConnectionError('connection refused')
    cache_service = RedisCacheService(redis_client=mock_redis)

    with pytest.raises(CacheError, match='Failed to read'):
        await cache_service.get_rates()


@pytest.mark.asyncio
@pytest.mark.parametrize('payload', [
    'not json',
    json.dumps({'providerNotes': []}),
    json.dumps({'at': '2025-09-27T10:30:00+00:00', 'rates': {'USD-VES': {'base': 'USD'}}}),
    json.dumps({
        'at': '2025-09-27T10:30:00+00:00',
        'rates': {'USD-VES': {'base': 'USD', 'quote': 'VES', 'value': -1, 'provider': 'x', 'at': '2025-09-27T10:30:00'}},
    }),
])
async def test_get_rates_corrupt_snapshot_raises_cache_error(payload):
    mock_redis = AsyncMock()
    mock_redis.get.return_value = payload
    cache_service = RedisCacheService(redis_client=mock_redis)

    with pytest.raises(CacheError, match='Corrupt'):
        await cache_service.get_rates()


@pytest.mark.asyncio
async def test_set_rates_uses_ttl(snapshot):
    mock_redis = AsyncMock()
    cache_service = RedisCacheService(redis_client=mock_redis, ttl_seconds=600)

    await cache_service.set_rates(snapshot)

    mock_redis.setex.assert_called_once()
    key, ttl, value = mock_redis.setex.call_args[0]
    assert key == 'rates:snapshot'
    assert ttl == timedelta(seconds=600)
    assert json.loads(value) == snapshot.to_dict()


@pytest.mark.asyncio
async def test_set_rates_redis_error_raises_cache_error(snapshot):
    mock_redis = AsyncMock()
    mock_redis.setex.side_effect = RedisConnectionError('connection refused')
    cache_service = RedisCacheService(redis_client=mock_redis)

    with pytest.raises(CacheError, match='Failed to write'):
        await cache_service.set_rates(snapshot)
