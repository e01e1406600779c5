from api.dependencies import build_policy, build_providers
from config.settings import Settings


def test_build_providers_merge_order():
    providers = build_providers(Settings(ENABLE_ALTERNATIVE_VES=False))

    assert [provider.name for provider in providers] == ['BCV', 'Frankfurter', 'PublicFX']


def test_build_providers_with_alternative_ves():
    settings = Settings(ENABLE_ALTERNATIVE_VES=True, PUBLIC_FX_API_KEY='secret', PROVIDER_RETRY_ATTEMPTS=5)
    providers = build_providers(settings)

    assert [provider.name for provider in providers] == ['BCV', 'Alternative-VES', 'Frankfurter', 'PublicFX']
    assert providers[1].api_key == 'secret'
    assert all(provider.retry_attempts == 5 for provider in providers)


def test_build_policy_from_settings():
    policy = build_policy(Settings(MIN_RATE_COUNT=6, FALLBACK_USD_VES=40.0))

    assert policy.min_rate_count == 6
    assert policy.fallback_usd_ves == 40.0
    assert policy.fallback_eur_usd == 1.08
