from typing import Annotated

from fastapi import APIRouter, Depends, Path, Query, Response, status

from api.dependencies import (
	get_conversion_service,
	get_currency_service,
	get_snapshot_service,
)
from api.schemas import ConversionResponse, RatesResponseSchema, SupportedCurrenciesResponse
from application.services import (
	ConversionService,
	CurrencyService,
	SnapshotService,
)

router = APIRouter(prefix='/api', tags=['currency'])

NO_CACHE_HEADERS = {
	'Cache-Control': 'no-cache, no-store, must-revalidate',
	'Pragma': 'no-cache',
	'Expires': '0',
}


@router.get(
	'/rates',
	response_model=RatesResponseSchema,
	response_model_by_alias=True,
	status_code=status.HTTP_200_OK,
	summary='Get the composed rates snapshot',
)
async def get_rates(
	response: Response,
	service: Annotated[SnapshotService, Depends(get_snapshot_service)],
	refresh: Annotated[bool, Query(description='Bypass the snapshot cache')] = False,
) -> RatesResponseSchema:
	snapshot = await service.get_rates(refresh=refresh)
	if refresh:
		response.headers.update(NO_CACHE_HEADERS)
	return RatesResponseSchema.model_validate(snapshot.to_dict())


@router.get(
	'/convert/{from_currency}/{to_currency}/{amount}',
	response_model=ConversionResponse,
	status_code=status.HTTP_200_OK,
	summary='Convert currency amount',
)
async def convert_currency(
	from_currency: Annotated[
		str,
		Path(
			min_length=3,
			max_length=5,
		),
	],
	to_currency: Annotated[
		str,
		Path(
			min_length=3,
			max_length=5,
		),
	],
	amount: Annotated[
		float,
		Path(
			gt=0,
			allow_inf_nan=False,
		),
	],
	service: Annotated[ConversionService, Depends(get_conversion_service)],
) -> ConversionResponse:
	result = await service.convert(amount, from_currency, to_currency)
	return ConversionResponse(
		from_currency=result.from_currency.value,
		to_currency=result.to_currency.value,
		amount=result.amount,
		converted_amount=result.converted_amount,
		available=result.available,
		timestamp=result.timestamp,
		path=result.path,
		sources=result.sources,
	)


@router.get(
	'/currencies',
	response_model=SupportedCurrenciesResponse,
	status_code=status.HTTP_200_OK,
	summary='List supported currencies',
)
async def get_supported_currencies(
	service: Annotated[CurrencyService, Depends(get_currency_service)],
) -> SupportedCurrenciesResponse:
	currencies = service.get_supported_currencies()
	return SupportedCurrenciesResponse(currencies=currencies)
