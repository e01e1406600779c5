import math
from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, NamedTuple

from domain.exceptions.currency import InvalidCurrencyError, InvalidRateError


class Currency(str, Enum):
    VES = "VES"
    USD = "USD"
    EUR = "EUR"
    COP = "COP"

    @property
    def display_name(self) -> str:
        return CURRENCY_INFO[self]["name"]

    @property
    def symbol(self) -> str:
        return CURRENCY_INFO[self]["symbol"]

    @property
    def precision(self) -> int:
        return CURRENCY_INFO[self]["precision"]

    @classmethod
    def from_code(cls, code: "str | Currency") -> "Currency":
        if isinstance(code, Currency):
            return code
        try:
            return cls(str(code).strip().upper())
        except ValueError as e:
            raise InvalidCurrencyError(f"Currency {code} is not supported") from e


CURRENCY_INFO: dict[Currency, dict[str, Any]] = {
    Currency.VES: {"name": "Bolívar Soberano", "symbol": "Bs", "precision": 2},
    Currency.USD: {"name": "US Dollar", "symbol": "$", "precision": 2},
    Currency.EUR: {"name": "Euro", "symbol": "€", "precision": 2},
    Currency.COP: {"name": "Colombian Peso", "symbol": "$", "precision": 2},
}


def create_rate_key(base: Currency | str, quote: Currency | str) -> str:
    """Canonical edge key, e.g. ``USD-VES``."""
    return f"{Currency.from_code(base).value}-{Currency.from_code(quote).value}"


class RateKey(NamedTuple):
    base: Currency
    quote: Currency

    def __str__(self) -> str:
        return create_rate_key(self.base, self.quote)

    @classmethod
    def parse(cls, key: "str | tuple") -> "RateKey":
        if isinstance(key, tuple) and len(key) == 2:
            return cls(Currency.from_code(key[0]), Currency.from_code(key[1]))
        if not isinstance(key, str):
            raise InvalidCurrencyError(f"Malformed rate key: {key!r}")
        parts = key.split("-")
        if len(parts) != 2:
            raise InvalidCurrencyError(f"Malformed rate key: {key!r}")
        return cls(Currency.from_code(parts[0]), Currency.from_code(parts[1]))


def parse_rate_key(key: str) -> RateKey:
    return RateKey.parse(key)


@dataclass(frozen=True)
class Rate:
    """Directed edge: 1 unit of ``base`` equals ``value`` units of ``quote``."""
    base: Currency
    quote: Currency
    value: float
    provider: str
    at: datetime

    def __post_init__(self):
        object.__setattr__(self, "base", Currency.from_code(self.base))
        object.__setattr__(self, "quote", Currency.from_code(self.quote))
        if isinstance(self.value, bool) or not isinstance(self.value, (int, float)):
            raise InvalidRateError(f"Rate value must be a number, got {self.value!r}")
        if not math.isfinite(self.value) or self.value <= 0:
            raise InvalidRateError(f"Rate {self.key} must be positive, got {self.value}")
        object.__setattr__(self, "value", float(self.value))

    @property
    def key(self) -> RateKey:
        return RateKey(self.base, self.quote)

    def to_dict(self) -> dict[str, Any]:
        return {
            "base": self.base.value,
            "quote": self.quote.value,
            "value": self.value,
            "provider": self.provider,
            "at": self.at.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Rate":
        return cls(
            base=data["base"],
            quote=data["quote"],
            value=data["value"],
            provider=data["provider"],
            at=datetime.fromisoformat(data["at"]),
        )


class RateGraph(Mapping[RateKey, Rate]):
    """Edge set of one composition cycle, keyed by ``(base, quote)``.

    Entries are only added through :meth:`add`, so the key of an entry always
    matches its rate. Lookups accept a ``RateKey`` or the canonical string.
    """

    def __init__(self, rates: Iterable[Rate] = ()):
        self._rates: dict[RateKey, Rate] = {}
        for rate in rates:
            self.add(rate)

    def __getitem__(self, key: RateKey | str) -> Rate:
        try:
            parsed = RateKey.parse(key)
        except InvalidCurrencyError:
            raise KeyError(key) from None
        return self._rates[parsed]

    def __contains__(self, key: object) -> bool:
        try:
            return RateKey.parse(key) in self._rates
        except InvalidCurrencyError:
            return False

    def __iter__(self) -> Iterator[RateKey]:
        return iter(self._rates)

    def __len__(self) -> int:
        return len(self._rates)

    def __repr__(self) -> str:
        return f"RateGraph({', '.join(str(k) for k in self._rates)})"

    def add(self, rate: Rate) -> None:
        self._rates[rate.key] = rate

    def find(self, base: Currency, quote: Currency) -> Rate | None:
        return self._rates.get(RateKey(Currency.from_code(base), Currency.from_code(quote)))

    def merge(self, other: "RateGraph") -> None:
        """Last write wins: edges of ``other`` replace edges with the same key."""
        for rate in other.values():
            self.add(rate)

    def to_dict(self) -> dict[str, dict[str, Any]]:
        return {str(key): rate.to_dict() for key, rate in self._rates.items()}

    @classmethod
    def from_dict(cls, data: dict[str, dict[str, Any]]) -> "RateGraph":
        graph = cls()
        for key, raw in data.items():
            rate = Rate.from_dict(raw)
            if parse_rate_key(key) != rate.key:
                raise InvalidRateError(f"Rate key {key} does not match rate {rate.key}")
            graph.add(rate)
        return graph


@dataclass(frozen=True)
class ProviderResult:
    provider: str
    success: bool
    rates: RateGraph = field(default_factory=RateGraph)
    error: str | None = None

    @classmethod
    def succeeded(cls, provider: str, rates: RateGraph) -> "ProviderResult":
        return cls(provider=provider, success=True, rates=rates)

    @classmethod
    def failed(cls, provider: str, error: str) -> "ProviderResult":
        return cls(provider=provider, success=False, rates=RateGraph(), error=error)


@dataclass(frozen=True)
class RatesResponse:
    at: datetime
    provider_notes: tuple[str, ...]
    rates: RateGraph

    def to_dict(self) -> dict[str, Any]:
        return {
            "at": self.at.isoformat(),
            "providerNotes": list(self.provider_notes),
            "rates": self.rates.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "RatesResponse":
        return cls(
            at=datetime.fromisoformat(data["at"]),
            provider_notes=tuple(data.get("providerNotes", [])),
            rates=RateGraph.from_dict(data.get("rates", {})),
        )
