import re
from typing import Any

import httpx

from domain.models.currency import Currency, Rate
from utils.time import Clock, utc_now

from .base import MultiSourceProvider
from .bcv import extract_rate
from .schemas import CurrencyAPIResponse

USD_VES_PATTERNS = [
    re.compile(r'1\s*USD\s*=\s*([\d,.]+)\s*VES', re.IGNORECASE),
    re.compile(r'USD\s*to\s*VES[^>]*>([\d,.]+)<', re.IGNORECASE),
    re.compile(r'1\s*US\s*dollar\s*=\s*([\d,.]+)\s*VES', re.IGNORECASE),
    re.compile(r'USD\s*=\s*([\d,.]+)\s*VES', re.IGNORECASE),
    re.compile(r'1\s*USD\s*=\s*([\d,.]+)\s*Bolívar', re.IGNORECASE),
    re.compile(r'Dólar\s*=\s*([\d,.]+)\s*Bolívar', re.IGNORECASE),
]

CURRENCYAPI_SOURCE = 'CurrencyAPI'


class AlternativeVESProvider(MultiSourceProvider):
    """USD-VES from currency converter sites, plus CurrencyAPI when keyed."""

    MIN_VALUE = 50.0
    MAX_VALUE = 1000.0

    def __init__(
        self,
        sources: dict[str, str],
        api_key: str = '',
        currencyapi_url: str = 'https://api.currencyapi.com/v3/latest',
        client: httpx.AsyncClient | None = None,
        timeout: float = 10,
        retry_attempts: int = 2,
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
        self.sources = sources
        self.api_key = api_key
        self.currencyapi_url = currencyapi_url

    @property
    def name(self) -> str:
        return 'Alternative-VES'

    def _sources(self) -> list[tuple[str, Any]]:
        sources: list[tuple[str, Any]] = list(self.sources.items())
        if self.api_key:
            sources.append((CURRENCYAPI_SOURCE, self.currencyapi_url))
        return sources

    async def _fetch_source(self, source_name: str, url: str) -> list[Rate]:
        if source_name == CURRENCYAPI_SOURCE:
            return await self._fetch_currencyapi(url)

        html = await self._get_text(url)
        value = extract_rate(html, USD_VES_PATTERNS, self.MIN_VALUE, self.MAX_VALUE)
        if value is None:
            return []
        return [self._rate(Currency.USD, Currency.VES, value, provider=source_name)]

    async def _fetch_currencyapi(self, url: str) -> list[Rate]:
        data = await self._get_json(
            url,
            {'base_currency': 'USD', 'currencies': 'VES', 'apikey': self.api_key},
        )
        payload = self._validate(CurrencyAPIResponse, data)
        quote = payload.data.get('VES')
        if quote is None or not self.MIN_VALUE < quote.value < self.MAX_VALUE:
            return []

        return [self._rate(Currency.USD, Currency.VES, quote.value, provider=CURRENCYAPI_SOURCE)]
