import json
from datetime import timedelta

from redis import asyncio as redis
from redis.exceptions import RedisError

from domain.exceptions.currency import CacheError, CurrencyException
from domain.models.currency import RatesResponse


class RedisCacheService:
    SNAPSHOT_KEY = "rates:snapshot"

    def __init__(self, redis_client: redis.Redis, ttl_seconds: int = 3600):
        self.redis = redis_client
        self.rate_ttl = timedelta(seconds=ttl_seconds)

    async def get_rates(self) -> RatesResponse | None:
        try:
            data = await self.redis.get(self.SNAPSHOT_KEY)
        except RedisError as e:
            raise CacheError(f"Failed to read rates snapshot: {e}") from e

        if not data:
            return None

        try:
            return RatesResponse.from_dict(json.loads(data))
        except (ValueError, KeyError, TypeError, CurrencyException) as e:
            raise CacheError(f"Corrupt rates snapshot: {e}") from e

    async def set_rates(self, response: RatesResponse) -> None:
        try:
            await self.redis.setex(self.SNAPSHOT_KEY, self.rate_ttl, json.dumps(response.to_dict()))
        except RedisError as e:
            raise CacheError(f"Failed to write rates snapshot: {e}") from e

