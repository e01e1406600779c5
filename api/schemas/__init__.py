from .responses import (
	ConversionResponse,
	CurrencyInfo,
	HealthResponse,
	RateSchema,
	RatesResponseSchema,
	SupportedCurrenciesResponse,
)

__all__ = [
	'ConversionResponse',
	'CurrencyInfo',
	'HealthResponse',
	'RateSchema',
	'RatesResponseSchema',
	'SupportedCurrenciesResponse',
]
