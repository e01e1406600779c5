from dataclasses import dataclass
from typing import Any

import httpx

from domain.models.currency import Currency, Rate
from utils.time import Clock, utc_now

from .base import MultiSourceProvider
from .schemas import CurrencyAPIResponse, RatesTableResponse


@dataclass(frozen=True)
class FXSource:
    url: str
    payload: str  # 'table' or 'currencyapi'
    key_param: str | None = None


class PublicFXProvider(MultiSourceProvider):
    """USD-based COP and EUR quotes from several public FX APIs, averaged.

    Sources that need an API key are skipped when none is configured.
    """

    emit_inverses = True

    SOURCES: dict[str, FXSource] = {
        'ExchangeRate.host': FXSource('https://api.exchangerate.host/latest', 'table'),
        'Fixer.io': FXSource('https://api.fixer.io/latest', 'table'),
        'CurrencyAPI': FXSource('https://api.currencyapi.com/v3/latest', 'currencyapi', key_param='apikey'),
        'OpenExchangeRates': FXSource('https://openexchangerates.org/api/latest.json', 'table', key_param='app_id'),
    }

    def __init__(
        self,
        api_key: str = '',
        sources: dict[str, FXSource] | None = None,
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
        self.api_key = api_key
        self.sources = sources if sources is not None else dict(self.SOURCES)

    @property
    def name(self) -> str:
        return 'PublicFX'

    def _sources(self) -> list[tuple[str, Any]]:
        return [
            (source_name, source)
            for source_name, source in self.sources.items()
            if source.key_param is None or self.api_key
        ]

    async def _fetch_source(self, source_name: str, source: FXSource) -> list[Rate]:
        params = {'base': 'USD', 'symbols': 'COP,EUR'}
        if source.payload == 'currencyapi':
            params = {'base_currency': 'USD', 'currencies': 'COP,EUR'}
        if source.key_param:
            params[source.key_param] = self.api_key

        data = await self._get_json(source.url, params)

        if source.payload == 'currencyapi':
            payload = self._validate(CurrencyAPIResponse, data)
            quotes = {code: item.value for code, item in payload.data.items()}
        else:
            payload = self._validate(RatesTableResponse, data)
            if not payload.success:
                return []
            quotes = payload.rates

        rates = []
        if 'COP' in quotes:
            rates.append(self._rate(Currency.USD, Currency.COP, quotes['COP'], provider=source_name))
        if 'EUR' in quotes:
            # USD-based table quotes USD->EUR
            rates.append(self._rate(Currency.EUR, Currency.USD, 1 / quotes['EUR'], provider=source_name))
        return rates
