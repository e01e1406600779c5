from typing import Annotated

from fastapi import APIRouter, Depends, status

from api.dependencies import get_providers
from api.schemas import HealthResponse
from config.settings import get_settings
from infrastructure.providers import ExchangeRateProvider
from utils.time import utc_now

router = APIRouter(prefix='/api', tags=['health'])


@router.get(
	'/health',
	response_model=HealthResponse,
	status_code=status.HTTP_200_OK,
	summary='Service liveness and registered providers',
)
async def health(
	providers: Annotated[list[ExchangeRateProvider], Depends(get_providers)],
) -> HealthResponse:
	return HealthResponse(
		ok=True,
		timestamp=utc_now(),
		providers=[provider.name for provider in providers],
		environment=get_settings().ENVIRONMENT,
	)
