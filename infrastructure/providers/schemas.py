"""Raw payload shapes of the upstream rate APIs.

Every JSON response is validated against one of these models before any
value is turned into a Rate.
"""
import datetime as dt

from pydantic import BaseModel, ConfigDict, PositiveFloat


class _Payload(BaseModel):
    model_config = ConfigDict(extra='ignore')


class FrankfurterResponse(_Payload):
    """``GET /latest?from=EUR&to=USD``"""
    base: str
    date: dt.date | None = None
    rates: dict[str, PositiveFloat]


class RatesTableResponse(_Payload):
    """Shape shared by exchangerate.host, Fixer and OpenExchangeRates."""
    success: bool = True
    base: str | None = None
    date: str | None = None
    timestamp: int | None = None
    rates: dict[str, PositiveFloat] = {}


class CurrencyAPIValue(_Payload):
    code: str
    value: PositiveFloat


class CurrencyAPIMeta(_Payload):
    last_updated_at: dt.datetime | None = None


class CurrencyAPIResponse(_Payload):
    """``GET /v3/latest`` of currencyapi.com"""
    meta: CurrencyAPIMeta | None = None
    data: dict[str, CurrencyAPIValue] = {}
