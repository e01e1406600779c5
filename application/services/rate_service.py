import asyncio
import logging
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime

from domain.exceptions.currency import CompositionError
from domain.models.currency import Currency, ProviderResult, Rate, RateGraph, RateKey, RatesResponse
from domain.services.rates import CROSS_RATE_DIGITS, compute_cross_rate, get_inverse_rate, has_finite_inverse
from infrastructure.providers.base import ExchangeRateProvider
from utils.time import Clock, utc_now

logger = logging.getLogger(__name__)

FALLBACK_PROVIDER = 'Fallback'

# Pairs with no natural direct market data, derived through a pivot when absent.
REQUIRED_CROSS_PAIRS: tuple[RateKey, ...] = (
    RateKey(Currency.COP, Currency.VES),
    RateKey(Currency.VES, Currency.COP),
    RateKey(Currency.EUR, Currency.VES),
    RateKey(Currency.VES, Currency.EUR),
    RateKey(Currency.EUR, Currency.COP),
    RateKey(Currency.COP, Currency.EUR),
)

PREFERRED_PIVOTS: tuple[Currency, ...] = (Currency.USD, Currency.EUR)


@dataclass(frozen=True)
class CompositionPolicy:
    min_rate_count: int = 4
    cross_rate_digits: int = CROSS_RATE_DIGITS
    fallback_usd_ves: float = 36.5
    fallback_usd_cop: float = 4200.0
    fallback_eur_usd: float = 1.08
    required_pairs: tuple[RateKey, ...] = REQUIRED_CROSS_PAIRS

    def fallback_seeds(self) -> list[tuple[Currency, Currency, float]]:
        return [
            (Currency.USD, Currency.VES, self.fallback_usd_ves),
            (Currency.USD, Currency.COP, self.fallback_usd_cop),
            (Currency.EUR, Currency.USD, self.fallback_eur_usd),
        ]


class RateService:
    """Composes one RatesResponse out of every registered provider.

    Providers are queried concurrently and merged in registration order, so a
    later provider overrides an earlier one for the same edge.
    """

    def __init__(
        self,
        providers: Sequence[ExchangeRateProvider],
        policy: CompositionPolicy | None = None,
        clock: Clock = utc_now,
    ):
        self.providers = list(providers)
        self.policy = policy or CompositionPolicy()
        self.clock = clock

    async def compose_rates(self) -> RatesResponse:
        results = await asyncio.gather(
            *(provider.fetch_rates() for provider in self.providers),
            return_exceptions=True,
        )

        try:
            now = self.clock()
            notes: list[str] = []
            graph = self._merge_results(results, notes)
            self._complete_inverses(graph)
            self._inject_fallback(graph, notes, now)
            self._derive_cross_rates(graph, notes, now)
        except Exception as e:
            logger.error(f'Rate composition failed: {e}', exc_info=True)
            raise CompositionError(f'Rate composition failed: {e}') from e

        logger.info(f'Composed {len(graph)} rates from {len(self.providers)} providers')
        return RatesResponse(at=now, provider_notes=tuple(notes), rates=graph)

    def _merge_results(self, results: list, notes: list[str]) -> RateGraph:
        graph = RateGraph()
        for provider, result in zip(self.providers, results, strict=True):
            if isinstance(result, BaseException):
                logger.error(f'Provider {provider.name} raised past its boundary: {result}')
                notes.append(f'{provider.name}: Failed ({str(result) or result.__class__.__name__})')
            elif not isinstance(result, ProviderResult):
                logger.error(f'Provider {provider.name} returned {type(result).__name__}, expected ProviderResult')
                notes.append(f'{provider.name}: Failed (malformed result)')
            elif result.success:
                graph.merge(result.rates)
                notes.append(f'{provider.name}: {len(result.rates)} rates')
            else:
                notes.append(f'{provider.name}: Failed ({result.error or "unknown error"})')
        return graph

    def _complete_inverses(self, graph: RateGraph) -> None:
        # Iterate a snapshot so inverses added here are not inverted again.
        for rate in list(graph.values()):
            if graph.find(rate.quote, rate.base) is not None:
                continue
            if not has_finite_inverse(rate):
                logger.warning(
                    f'Skipping inverse of {rate.key} from {rate.provider}: {rate.value} has no finite reciprocal'
                )
                continue
            graph.add(get_inverse_rate(rate))

    def _inject_fallback(self, graph: RateGraph, notes: list[str], now: datetime) -> None:
        if len(graph) >= self.policy.min_rate_count:
            return

        injected = 0
        for base, quote, value in self.policy.fallback_seeds():
            seed = Rate(base=base, quote=quote, value=value, provider=FALLBACK_PROVIDER, at=now)
            for rate in (seed, get_inverse_rate(seed)):
                if rate.key not in graph:
                    graph.add(rate)
                    injected += 1

        logger.warning(f'Only live data for {len(graph) - injected} rates, injected {injected} fallback rates')
        notes.append(f'{FALLBACK_PROVIDER}: {injected} rates (insufficient live data)')

    def _derive_cross_rates(self, graph: RateGraph, notes: list[str], now: datetime) -> None:
        for key in self.policy.required_pairs:
            if key in graph:
                continue

            for pivot in self._pivot_candidates(key.base, key.quote):
                first = graph.find(key.base, pivot)
                second = graph.find(pivot, key.quote)
                if first is None or second is None:
                    continue

                cross = compute_cross_rate(
                    first, second, key.base, key.quote, at=now, digits=self.policy.cross_rate_digits
                )
                if cross is None:
                    continue

                graph.add(cross)
                if graph.find(key.quote, key.base) is None and has_finite_inverse(cross):
                    graph.add(get_inverse_rate(cross))
                notes.append(f'{key}: Computed via {first.key} × {second.key}')
                break

    def _pivot_candidates(self, base: Currency, quote: Currency) -> list[Currency]:
        ordered = list(PREFERRED_PIVOTS) + [c for c in Currency if c not in PREFERRED_PIVOTS]
        return [c for c in ordered if c not in (base, quote)]

    async def close(self) -> None:
        for provider in self.providers:
            await provider.close()
