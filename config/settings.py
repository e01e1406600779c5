from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
	# Application
	APP_NAME: str = 'Rate Composer API'
	ENVIRONMENT: str = 'development'
	LOG_LEVEL: str = 'INFO'
	HOST: str = '0.0.0.0'
	PORT: int = 8000

	# Snapshot cache; an empty URL disables it
	REDIS_URL: str = ''
	RATES_CACHE_TTL_SECONDS: int = 3600

	# Provider transport
	PROVIDER_TIMEOUT_SECONDS: float = 10.0
	PROVIDER_RETRY_ATTEMPTS: int = 3
	PROVIDER_RETRY_BACKOFF: float = 1.0
	PUBLIC_FX_API_KEY: str = ''
	ENABLE_ALTERNATIVE_VES: bool = False

	FRANKFURTER_URL: str = 'https://api.frankfurter.app/latest'
	EXCHANGERATE_HOST_URL: str = 'https://api.exchangerate.host/latest'
	FIXER_URL: str = 'https://api.fixer.io/latest'
	CURRENCYAPI_URL: str = 'https://api.currencyapi.com/v3/latest'
	OPENEXCHANGE_URL: str = 'https://openexchangerates.org/api/latest.json'
	BCV_SOURCES: dict[str, str] = {
		'BCV Official': 'https://www.bcv.org.ve/',
		'DolarToday': 'https://dolartoday.com/',
		'Monitor Dolar': 'https://monitordolarvzla.com/',
	}
	ALTERNATIVE_VES_SOURCES: dict[str, str] = {
		'XE.com': 'https://www.xe.com/currencyconverter/convert/?Amount=1&From=USD&To=VES',
		'Wise.com': 'https://wise.com/us/currency-converter/usd-to-ves-rate',
	}

	# Composition policy
	MIN_RATE_COUNT: int = 4
	CROSS_RATE_DIGITS: int = 6
	CONVERSION_DIGITS: int = 8
	FALLBACK_USD_VES: float = 36.5
	FALLBACK_USD_COP: float = 4200.0
	FALLBACK_EUR_USD: float = 1.08

	model_config = SettingsConfigDict(env_file='.env', case_sensitive=False, extra='ignore')


@lru_cache
def get_settings() -> Settings:
	return Settings()
