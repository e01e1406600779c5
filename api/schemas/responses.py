from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class RateSchema(BaseModel):
	base: str = Field(..., description='Currency of one unit')
	quote: str = Field(..., description='Currency the value is expressed in')
	value: float = Field(..., gt=0, description='Units of quote per one unit of base')
	provider: str = Field(..., description='Source that produced this edge')
	at: datetime = Field(..., description='When the edge was produced')


class RatesResponseSchema(BaseModel):
	at: datetime = Field(..., description='When the snapshot was composed')
	provider_notes: list[str] = Field(
		..., alias='providerNotes', description='Per provider outcome and derivation notes'
	)
	rates: dict[str, RateSchema] = Field(..., description='Edges keyed by BASE-QUOTE')

	model_config = ConfigDict(
		populate_by_name=True,
		json_schema_extra={
			'example': {
				'at': '2025-09-27T10:30:00Z',
				'providerNotes': ['BCV: 4 rates', 'COP-VES: Computed via COP-USD × USD-VES'],
				'rates': {
					'USD-VES': {
						'base': 'USD',
						'quote': 'VES',
						'value': 36.5,
						'provider': 'Average of 2 sources',
						'at': '2025-09-27T10:30:00Z',
					}
				},
			}
		},
	)


class ConversionResponse(BaseModel):
	from_currency: str = Field(..., description='Source currency code')
	to_currency: str = Field(..., description='Target currency code')
	amount: float = Field(..., description='Original amount requested')
	converted_amount: float | None = Field(..., description='Converted amount, null when no rate path exists')
	available: bool = Field(..., description='Whether a rate path was found')
	timestamp: datetime = Field(..., description='When the rates snapshot was composed')
	path: list[str] = Field(default_factory=list, description='Rate keys applied in order')
	sources: list[str] = Field(default_factory=list, description='Providers of the applied rates')

	model_config = ConfigDict(
		json_schema_extra={
			'example': {
				'from_currency': 'EUR',
				'to_currency': 'VES',
				'amount': 100.0,
				'converted_amount': 3942.0,
				'available': True,
				'timestamp': '2025-09-27T10:30:00Z',
				'path': ['EUR-USD', 'USD-VES'],
				'sources': ['Frankfurter', 'Average of 2 sources'],
			}
		}
	)


class CurrencyInfo(BaseModel):
	code: str
	name: str
	symbol: str
	precision: int


class SupportedCurrenciesResponse(BaseModel):
	currencies: list[CurrencyInfo] = Field(description='Supported currencies')


class HealthResponse(BaseModel):
	ok: bool
	timestamp: datetime
	providers: list[str] = Field(description='Registered provider names')
	environment: str
