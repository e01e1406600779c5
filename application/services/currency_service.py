import logging

from domain.exceptions.currency import InvalidCurrencyError
from domain.models.currency import Currency

logger = logging.getLogger(__name__)


class CurrencyService:
	def get_supported_currencies(self) -> list[dict]:
		return [
			{
				'code': currency.value,
				'name': currency.display_name,
				'symbol': currency.symbol,
				'precision': currency.precision,
			}
			for currency in Currency
		]

	def validate_currency(self, code: str) -> Currency:
		try:
			return Currency.from_code(code)
		except InvalidCurrencyError:
			logger.info(f'Rejected unsupported currency {code!r}')
			raise
