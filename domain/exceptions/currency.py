class CurrencyException(Exception):
    pass


class InvalidCurrencyError(CurrencyException):
    pass


class InvalidRateError(CurrencyException):
    pass


class ProviderError(CurrencyException):
    pass


class CacheError(CurrencyException):
    pass


class CompositionError(CurrencyException):
    """Raised when a composition cycle cannot produce a well-formed graph."""
    pass
