from .conversion_service import ConversionResult, ConversionService, convert
from .currency_service import CurrencyService
from .rate_service import CompositionPolicy, RateService
from .snapshot_service import SnapshotService

__all__ = [
	'CompositionPolicy',
	'ConversionResult',
	'ConversionService',
	'CurrencyService',
	'RateService',
	'SnapshotService',
	'convert',
]
