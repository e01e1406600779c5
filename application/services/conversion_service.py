import logging
import math
from dataclasses import dataclass, field
from datetime import datetime

from application.services.currency_service import CurrencyService
from application.services.snapshot_service import SnapshotService
from domain.models.currency import Currency, Rate, RateGraph
from domain.services.rates import round_to_significant_digits

logger = logging.getLogger(__name__)

CONVERSION_DIGITS = 8

USD = Currency.USD
EUR = Currency.EUR
VES = Currency.VES
COP = Currency.COP


def _candidate_paths(from_currency: Currency, to_currency: Currency) -> list[tuple[Currency, ...]]:
	"""Lookup paths in precedence order: direct, via USD, via EUR, then the VES/COP multi-hops."""
	paths = [
		(from_currency, to_currency),
		(from_currency, USD, to_currency),
		(from_currency, EUR, to_currency),
	]
	if {from_currency, to_currency} == {VES, COP}:
		paths.append((VES, USD, COP) if from_currency == VES else (COP, USD, VES))
	if from_currency == VES and to_currency in (EUR, COP):
		paths.append((VES, USD, EUR, to_currency))
	return paths


def _collapse(path: tuple[Currency, ...]) -> tuple[Currency, ...]:
	collapsed = [path[0]]
	for currency in path[1:]:
		if currency != collapsed[-1]:
			collapsed.append(currency)
	return tuple(collapsed)


def _lookup(graph: RateGraph, path: tuple[Currency, ...]) -> list[Rate] | None:
	hops = []
	for base, quote in zip(path, path[1:]):
		rate = graph.find(base, quote)
		if rate is None:
			return None
		hops.append(rate)
	return hops


def resolve(
	from_currency: Currency,
	to_currency: Currency,
	graph: RateGraph,
) -> list[Rate] | None:
	"""Return the edges of the first resolvable path, or None when there is none."""
	for path in _candidate_paths(from_currency, to_currency):
		path = _collapse(path)
		if len(path) < 2:
			continue
		hops = _lookup(graph, path)
		if hops is not None:
			return hops
	return None


def convert(
	amount: float,
	from_currency: Currency | str,
	to_currency: Currency | str,
	graph: RateGraph,
	digits: int = CONVERSION_DIGITS,
) -> float | None:
	"""Convert ``amount`` using ``graph``.

	None means unavailable (no rate path, or a product past the float range),
	never zero.
	"""
	from_currency = Currency.from_code(from_currency)
	to_currency = Currency.from_code(to_currency)
	if from_currency == to_currency:
		return amount

	hops = resolve(from_currency, to_currency, graph)
	if hops is None:
		return None
	return apply_rates(amount, hops, digits)


def apply_rates(amount: float, hops: list[Rate], digits: int = CONVERSION_DIGITS) -> float | None:
	"""Multiply ``amount`` through ``hops``; None when the product overflows."""
	result = amount
	for rate in hops:
		result *= rate.value
	if not math.isfinite(result):
		return None
	return round_to_significant_digits(result, digits)


@dataclass(frozen=True)
class ConversionResult:
	from_currency: Currency
	to_currency: Currency
	amount: float
	converted_amount: float | None
	timestamp: datetime
	path: list[str] = field(default_factory=list)
	sources: list[str] = field(default_factory=list)

	@property
	def available(self) -> bool:
		return self.converted_amount is not None


class ConversionService:
	def __init__(
		self,
		snapshot_service: SnapshotService,
		currency_service: CurrencyService,
		digits: int = CONVERSION_DIGITS,
	):
		self.snapshot_service = snapshot_service
		self.currency_service = currency_service
		self.digits = digits

	async def convert(self, amount: float, from_code: str, to_code: str) -> ConversionResult:
		from_currency = self.currency_service.validate_currency(from_code)
		to_currency = self.currency_service.validate_currency(to_code)

		snapshot = await self.snapshot_service.get_rates()

		hops: list[Rate] = []
		if from_currency == to_currency:
			converted = amount
		else:
			hops = resolve(from_currency, to_currency, snapshot.rates) or []
			converted = apply_rates(amount, hops, self.digits) if hops else None
			if not hops:
				logger.warning(f'No rate path for {from_currency.value}->{to_currency.value}')
			elif converted is None:
				logger.warning(f'Conversion of {amount} {from_currency.value}->{to_currency.value} overflowed')

		return ConversionResult(
			from_currency=from_currency,
			to_currency=to_currency,
			amount=amount,
			converted_amount=converted,
			timestamp=snapshot.at,
			path=[str(rate.key) for rate in hops],
			sources=[rate.provider for rate in hops],
		)
