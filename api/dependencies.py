import logging
from typing import Annotated

from fastapi import Depends
from redis.asyncio import Redis

from application.services import (
	CompositionPolicy,
	ConversionService,
	CurrencyService,
	RateService,
	SnapshotService,
)
from config.settings import Settings, get_settings
from infrastructure.cache.redis_cache import RedisCacheService
from infrastructure.providers import (
	AlternativeVESProvider,
	BCVProvider,
	ExchangeRateProvider,
	FrankfurterProvider,
	PublicFXProvider,
)
from infrastructure.providers.public_fx import FXSource

logger = logging.getLogger(__name__)


class AppDependencies:
	"""Container for application-wide singleton dependencies."""

	redis_client: Redis | None = None
	redis_cache: RedisCacheService | None = None
	providers: list[ExchangeRateProvider] | None = None
	rate_service: RateService | None = None
	snapshot_service: SnapshotService | None = None


deps = AppDependencies()


def build_providers(settings: Settings) -> list[ExchangeRateProvider]:
	"""Providers in merge order: a later provider overrides an earlier one for the same edge."""
	transport = {
		'timeout': settings.PROVIDER_TIMEOUT_SECONDS,
		'retry_attempts': settings.PROVIDER_RETRY_ATTEMPTS,
		'retry_backoff': settings.PROVIDER_RETRY_BACKOFF,
	}
	providers: list[ExchangeRateProvider] = [
		BCVProvider(sources=settings.BCV_SOURCES, **transport),
	]
	if settings.ENABLE_ALTERNATIVE_VES:
		providers.append(
			AlternativeVESProvider(
				sources=settings.ALTERNATIVE_VES_SOURCES,
				api_key=settings.PUBLIC_FX_API_KEY,
				currencyapi_url=settings.CURRENCYAPI_URL,
				**transport,
			)
		)
	providers.append(FrankfurterProvider(base_url=settings.FRANKFURTER_URL, **transport))
	providers.append(
		PublicFXProvider(
			api_key=settings.PUBLIC_FX_API_KEY,
			sources={
				'ExchangeRate.host': FXSource(settings.EXCHANGERATE_HOST_URL, 'table'),
				'Fixer.io': FXSource(settings.FIXER_URL, 'table'),
				'CurrencyAPI': FXSource(settings.CURRENCYAPI_URL, 'currencyapi', key_param='apikey'),
				'OpenExchangeRates': FXSource(settings.OPENEXCHANGE_URL, 'table', key_param='app_id'),
			},
			**transport,
		)
	)
	return providers


def build_policy(settings: Settings) -> CompositionPolicy:
	return CompositionPolicy(
		min_rate_count=settings.MIN_RATE_COUNT,
		cross_rate_digits=settings.CROSS_RATE_DIGITS,
		fallback_usd_ves=settings.FALLBACK_USD_VES,
		fallback_usd_cop=settings.FALLBACK_USD_COP,
		fallback_eur_usd=settings.FALLBACK_EUR_USD,
	)


def init_dependencies() -> None:
	"""Initialize all singleton dependencies. Called at app startup."""
	logger.info('Initializing dependencies...')
	settings = get_settings()

	if settings.REDIS_URL:
		deps.redis_client = Redis.from_url(settings.REDIS_URL, decode_responses=True)
		deps.redis_cache = RedisCacheService(deps.redis_client, ttl_seconds=settings.RATES_CACHE_TTL_SECONDS)
	else:
		logger.info('REDIS_URL not set, rates snapshot cache disabled')

	deps.providers = build_providers(settings)
	deps.rate_service = RateService(providers=deps.providers, policy=build_policy(settings))
	deps.snapshot_service = SnapshotService(rate_service=deps.rate_service, cache=deps.redis_cache)
	logger.info(f'Dependencies initialized with {len(deps.providers)} providers')


async def cleanup_dependencies() -> None:
	logger.info('Cleaning up dependencies...')

	if deps.redis_client:
		await deps.redis_client.close()
	if deps.providers:
		for provider in deps.providers:
			await provider.close()

	deps.redis_client = None
	deps.redis_cache = None
	deps.providers = None
	deps.rate_service = None
	deps.snapshot_service = None
	logger.info('Cleanup complete')


def get_providers() -> list[ExchangeRateProvider]:
	if deps.providers is None:
		raise RuntimeError('Providers not initialized')
	return deps.providers


def get_snapshot_service() -> SnapshotService:
	if deps.snapshot_service is None:
		raise RuntimeError('Snapshot service not initialized')
	return deps.snapshot_service


def get_currency_service() -> CurrencyService:
	return CurrencyService()


def get_conversion_service(
	snapshot_service: Annotated[SnapshotService, Depends(get_snapshot_service)],
	currency_service: Annotated[CurrencyService, Depends(get_currency_service)],
) -> ConversionService:
	return ConversionService(
		snapshot_service=snapshot_service,
		currency_service=currency_service,
		digits=get_settings().CONVERSION_DIGITS,
	)
