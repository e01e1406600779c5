from datetime import UTC, datetime

import httpx

from domain.exceptions.currency import ProviderError
from domain.models.currency import Currency, RateGraph
from utils.time import Clock, utc_now

from .base import BaseRateProvider
from .schemas import FrankfurterResponse


class FrankfurterProvider(BaseRateProvider):
    """ECB reference rates; the source of EUR-USD."""

    BASE_URL = 'https://api.frankfurter.app/latest'

    def __init__(
        self,
        base_url: str | None = None,
        client: httpx.AsyncClient | None = None,
        timeout: float = 10,
        retry_attempts: int = 3,
        retry_backoff: float = 1.0,
        clock: Clock = utc_now,
    ):
        super().__init__(
            client=client,
            timeout=timeout,
            retry_attempts=retry_attempts,
            retry_backoff=retry_backoff,
            clock=clock,
        )
        self.base_url = base_url or self.BASE_URL

    @property
    def name(self) -> str:
        return 'Frankfurter'

    async def _collect_rates(self) -> RateGraph:
        data = await self._get_json(self.base_url, {'from': 'EUR', 'to': 'USD'})
        payload = self._validate(FrankfurterResponse, data)

        eur_usd = payload.rates.get('USD')
        if eur_usd is None:
            raise ProviderError('No valid rates found in Frankfurter response')

        at = (
            datetime(payload.date.year, payload.date.month, payload.date.day, tzinfo=UTC)
            if payload.date
            else self.clock()
        )
        return RateGraph([
            self._rate(Currency.EUR, Currency.USD, eur_usd, at=at),
            self._rate(Currency.USD, Currency.EUR, 1 / eur_usd, at=at),
        ])
