import logging

from application.services.rate_service import RateService
from domain.exceptions.currency import CacheError
from domain.models.currency import RatesResponse
from infrastructure.cache.redis_cache import RedisCacheService

logger = logging.getLogger(__name__)


class SnapshotService:
    """Serves the latest RatesResponse, composing a new one when the cached one expired."""

    def __init__(self, rate_service: RateService, cache: RedisCacheService | None = None):
        self.rate_service = rate_service
        self.cache = cache

    async def get_rates(self, refresh: bool = False) -> RatesResponse:
        if not refresh:
            cached = await self._read_cache()
            if cached is not None:
                return cached

        response = await self.rate_service.compose_rates()
        await self._write_cache(response)
        return response

    async def _read_cache(self) -> RatesResponse | None:
        if self.cache is None:
            return None
        try:
            return await self.cache.get_rates()
        except CacheError as e:
            logger.warning(f'Ignoring rates cache: {e}')
            return None

    async def _write_cache(self, response: RatesResponse) -> None:
        if self.cache is None:
            return
        try:
            await self.cache.set_rates(response)
        except CacheError as e:
            logger.warning(f'Could not cache rates snapshot: {e}')
