import re
from typing import Any

import httpx

from domain.models.currency import Currency, Rate
from utils.time import Clock, utc_now

from .base import MultiSourceProvider

USD_VES_PATTERNS = [
    re.compile(r'USD\s*=\s*Bs\.?\s*([\d,.]+)', re.IGNORECASE),
    re.compile(r'Dólar\s*=\s*Bs\.?\s*([\d,.]+)', re.IGNORECASE),
    re.compile(r'USD\s*Bs\.?\s*([\d,.]+)', re.IGNORECASE),
    re.compile(r'Dólar\s*Bs\.?\s*([\d,.]+)', re.IGNORECASE),
    re.compile(r'1\s*USD\s*=\s*([\d,.]+)\s*Bs', re.IGNORECASE),
    re.compile(r'1\s*Dólar\s*=\s*([\d,.]+)\s*Bs', re.IGNORECASE),
]

EUR_VES_PATTERNS = [
    re.compile(r'EUR\s*=\s*Bs\.?\s*([\d,.]+)', re.IGNORECASE),
    re.compile(r'Euro\s*=\s*Bs\.?\s*([\d,.]+)', re.IGNORECASE),
    re.compile(r'EUR\s*Bs\.?\s*([\d,.]+)', re.IGNORECASE),
    re.compile(r'Euro\s*Bs\.?\s*([\d,.]+)', re.IGNORECASE),
    re.compile(r'1\s*EUR\s*=\s*([\d,.]+)\s*Bs', re.IGNORECASE),
    re.compile(r'1\s*Euro\s*=\s*([\d,.]+)\s*Bs', re.IGNORECASE),
]


def parse_number(raw: str) -> float | None:
    try:
        return float(raw.replace(',', ''))
    except ValueError:
        return None


def extract_rate(html: str, patterns: list[re.Pattern], low: float, high: float) -> float | None:
    """Return the first match that parses and lies strictly inside (low, high)."""
    for pattern in patterns:
        match = pattern.search(html)
        if not match:
            continue
        value = parse_number(match.group(1))
        if value is not None and low < value < high:
            return value
    return None


class BCVProvider(MultiSourceProvider):
    """Official and parallel bolívar quotes scraped from Venezuelan sites."""

    MIN_VALUE = 0.0
    MAX_VALUE = 1_000_000.0

    def __init__(
        self,
        sources: dict[str, str],
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
        self.sources = sources

    @property
    def name(self) -> str:
        return 'BCV'

    def _sources(self) -> list[tuple[str, Any]]:
        return list(self.sources.items())

    async def _fetch_source(self, source_name: str, url: str) -> list[Rate]:
        html = await self._get_text(url)

        rates = []
        usd_ves = extract_rate(html, USD_VES_PATTERNS, self.MIN_VALUE, self.MAX_VALUE)
        if usd_ves is not None:
            rates.append(self._rate(Currency.USD, Currency.VES, usd_ves, provider=source_name))

        eur_ves = extract_rate(html, EUR_VES_PATTERNS, self.MIN_VALUE, self.MAX_VALUE)
        if eur_ves is not None:
            rates.append(self._rate(Currency.EUR, Currency.VES, eur_ves, provider=source_name))
        return rates
