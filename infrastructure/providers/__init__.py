from .alternative_ves import AlternativeVESProvider
from .base import BaseRateProvider, ExchangeRateProvider, MultiSourceProvider
from .bcv import BCVProvider
from .frankfurter import FrankfurterProvider
from .public_fx import PublicFXProvider

__all__ = [
    'AlternativeVESProvider',
    'BaseRateProvider',
    'BCVProvider',
    'ExchangeRateProvider',
    'FrankfurterProvider',
    'MultiSourceProvider',
    'PublicFXProvider',
]
