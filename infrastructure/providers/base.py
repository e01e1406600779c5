import asyncio
import logging
from abc import ABC, abstractmethod
from collections.abc import Iterable
from typing import Any, Protocol, runtime_checkable

import httpx
from pydantic import ValidationError
from tenacity import AsyncRetrying, retry_if_exception_type, stop_after_attempt, wait_exponential

from domain.exceptions.currency import ProviderError
from domain.models.currency import Currency, ProviderResult, Rate, RateGraph
from utils.time import Clock, utc_now

logger = logging.getLogger(__name__)

DEFAULT_HEADERS = {
    'User-Agent': 'Mozilla/5.0 (compatible; RateComposer/1.0)',
    'Accept': 'application/json, text/html;q=0.9, */*;q=0.8',
}


@runtime_checkable
class ExchangeRateProvider(Protocol):
    """Contract every rate source satisfies.

    ``fetch_rates`` never raises: failures come back as an unsuccessful
    ProviderResult with an empty graph.
    """

    @property
    def name(self) -> str: ...

    async def fetch_rates(self) -> ProviderResult: ...

    async def close(self) -> None: ...


class BaseRateProvider(ABC):
    """A base class for rate providers, handling common HTTP logic."""

    def __init__(
        self,
        client: httpx.AsyncClient | None = None,
        timeout: float = 10,
        retry_attempts: int = 3,
        retry_backoff: float = 1.0,
        clock: Clock = utc_now,
    ):
        self.timeout = timeout
        self.retry_attempts = max(1, retry_attempts)
        self.retry_backoff = retry_backoff
        self.clock = clock
        self._client = client or httpx.AsyncClient(
            timeout=httpx.Timeout(timeout),
            headers=DEFAULT_HEADERS,
            follow_redirects=True,
        )

    @property
    @abstractmethod
    def name(self) -> str:
        ...

    @abstractmethod
    async def _collect_rates(self) -> RateGraph:
        """Fetch and parse the source; raise ProviderError when nothing usable came back."""
        ...

    async def fetch_rates(self) -> ProviderResult:
        try:
            rates = await self._collect_rates()
        except ProviderError as e:
            logger.warning(f'Provider {self.name} failed: {e}')
            return ProviderResult.failed(self.name, str(e))
        except Exception as e:
            logger.error(f'Provider {self.name} failed unexpectedly: {e}', exc_info=True)
            return ProviderResult.failed(self.name, f'Unexpected error: {e}')

        if not rates:
            return ProviderResult.failed(self.name, 'No valid rates found')

        logger.info(f'Provider {self.name} returned {len(rates)} rates')
        return ProviderResult.succeeded(self.name, rates)

    async def _get(self, url: str, params: dict[str, Any] | None = None) -> httpx.Response:
        """GET with retries on transport errors; HTTP errors map to ProviderError."""
        retrying = AsyncRetrying(
            stop=stop_after_attempt(self.retry_attempts),
            wait=wait_exponential(multiplier=self.retry_backoff, max=10),
            retry=retry_if_exception_type(httpx.TransportError),
            reraise=True,
        )
        try:
            async for attempt in retrying:
                with attempt:
                    response = await self._client.get(url, params=params)
                    response.raise_for_status()
            return response

        except httpx.HTTPStatusError as e:
            raise ProviderError(
                f'{self.name} HTTP error {e.response.status_code}: {e.response.text[:200]}'
            ) from e
        except httpx.RequestError as e:
            raise ProviderError(f'{self.name} request failed: {e.__class__.__name__}') from e

    async def _get_json(self, url: str, params: dict[str, Any] | None = None) -> Any:
        response = await self._get(url, params)
        try:
            return response.json()
        except ValueError as e:
            raise ProviderError(f'{self.name} response parsing error: {str(e)}') from e

    async def _get_text(self, url: str, params: dict[str, Any] | None = None) -> str:
        response = await self._get(url, params)
        return response.text

    def _validate(self, schema, data: Any):
        """Validate a raw payload against a pydantic schema before it reaches any Rate."""
        try:
            return schema.model_validate(data)
        except ValidationError as e:
            raise ProviderError(f'{self.name} unexpected payload: {e.error_count()} validation errors') from e

    def _rate(self, base: Currency, quote: Currency, value: float, provider: str | None = None, at=None) -> Rate:
        return Rate(
            base=base,
            quote=quote,
            value=value,
            provider=provider or self.name,
            at=at or self.clock(),
        )

    async def close(self) -> None:
        """Cleanly close the HTTP client."""
        await self._client.aclose()

    def __repr__(self):
        return f'<{self.__class__.__name__}(name={self.name})>'


class MultiSourceProvider(BaseRateProvider):
    """Provider that queries several sources concurrently and averages per pair.

    Averaged edges are labelled ``Average of N sources``. With
    ``emit_inverses`` set, each averaged edge is also emitted reversed.
    """

    emit_inverses = False

    @abstractmethod
    def _sources(self) -> list[tuple[str, Any]]:
        """Return ``(source_name, source_config)`` pairs to query."""
        ...

    @abstractmethod
    async def _fetch_source(self, source_name: str, source: Any) -> list[Rate]:
        ...

    async def _collect_rates(self) -> RateGraph:
        sources = self._sources()
        if not sources:
            raise ProviderError(f'{self.name}: no sources configured')

        results = await asyncio.gather(
            *(self._fetch_source(source_name, source) for source_name, source in sources),
            return_exceptions=True,
        )

        collected: list[Rate] = []
        errors: list[str] = []
        for (source_name, _), result in zip(sources, results, strict=True):
            if isinstance(result, BaseException):
                logger.warning(f'{self.name} source {source_name} failed: {result}')
                errors.append(f'{source_name}: {result}')
            elif result:
                collected.extend(result)
            else:
                errors.append(f'{source_name}: no rates found')

        if not collected:
            raise ProviderError(f'All sources failed: {", ".join(errors)}')

        return self._average(collected)

    def _average(self, rates: Iterable[Rate]) -> RateGraph:
        grouped: dict[tuple[Currency, Currency], list[float]] = {}
        for rate in rates:
            grouped.setdefault((rate.base, rate.quote), []).append(rate.value)

        at = self.clock()
        graph = RateGraph()
        for (base, quote), values in grouped.items():
            graph.add(self._rate(
                base,
                quote,
                sum(values) / len(values),
                provider=f'Average of {len(values)} sources',
                at=at,
            ))
            if self.emit_inverses:
                graph.add(self._rate(
                    quote,
                    base,
                    len(values) / sum(values),
                    provider=f'Average of {len(values)} sources',
                    at=at,
                ))
        return graph
