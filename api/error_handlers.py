import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from domain.exceptions.currency import CompositionError, InvalidCurrencyError
from utils.time import utc_now

logger = logging.getLogger(__name__)


def register_exception_handlers(app: FastAPI) -> None:
	@app.exception_handler(InvalidCurrencyError)
	async def invalid_currency_handler(request: Request, exc: InvalidCurrencyError):
		return JSONResponse(status_code=400, content={'detail': str(exc)})

	@app.exception_handler(CompositionError)
	async def composition_error_handler(request: Request, exc: CompositionError):
		logger.error(f'Rates composition error: {exc}')
		return JSONResponse(
			status_code=500,
			content={
				'error': 'Failed to fetch exchange rates',
				'at': utc_now().isoformat(),
				'providerNotes': ['All providers failed'],
				'rates': {},
			},
		)
