# nosec B101


import pytest

from infrastructure.providers.public_fx import FXSource, PublicFXProvider

TABLE = FXSource('https://table.test/latest', 'table')
KEYED_TABLE = FXSource('https://keyed.test/latest.json', 'table', key_param='app_id')
CURRENCYAPI = FXSource('https://currencyapi.test/v3/latest', 'currencyapi', key_param='apikey')


def make_provider(mock_client, clock, sources, api_key=''):
    return PublicFXProvider(
        api_key=api_key,
        sources=sources,
        client=mock_client,
        retry_attempts=1,
        retry_backoff=0,
        clock=clock,
    )


@pytest.mark.asyncio
async def test_table_source_emits_cop_and_eur_with_inverses(mock_client, clock, json_response):
    mock_client.get.return_value = json_response({
        'success': True,
        'base': 'USD',
        'rates': {'COP': 4200.0, 'EUR': 0.925},
    })
    provider = make_provider(mock_client, clock, {'ExchangeRate.host': TABLE})

    result = await provider.fetch_rates()

    assert result.success is True
    assert result.provider == 'PublicFX'
    assert result.rates['USD-COP'].value == 4200.0
    assert result.rates['COP-USD'].value == pytest.approx(1 / 4200.0)
    assert result.rates['EUR-USD'].value == pytest.approx(1 / 0.925)
    assert result.rates['USD-EUR'].value == pytest.approx(0.925)
    assert result.rates['USD-COP'].provider == 'Average of 1 sources'

    call_args = mock_client.get.call_args
    assert call_args[0][0] == 'https://table.test/latest'
    assert call_args[1]['params'] == {'base': 'USD', 'symbols': 'COP,EUR'}


@pytest.mark.asyncio
async def test_keyed_sources_skipped_without_api_key(mock_client, clock, json_response):
    mock_client.get.return_value = json_response({'rates': {'COP': 4200.0}})
    provider = make_provider(mock_client, clock, {'Open': KEYED_TABLE, 'Table': TABLE, 'CurrencyAPI': CURRENCYAPI})

    await provider.fetch_rates()

    assert mock_client.get.call_count == 1
    assert mock_client.get.call_args[0][0] == 'https://table.test/latest'


@pytest.mark.asyncio
async def test_sources_are_averaged(mock_client, clock, responses_by_url, json_response):
    responses_by_url['https://table.test/latest'] = json_response({'rates': {'COP': 4000.0, 'EUR': 0.9}})
    responses_by_url['https://keyed.test/latest.json'] = json_response({'rates': {'COP': 4200.0}})
    responses_by_url['https://currencyapi.test/v3/latest'] = json_response({
        'meta': {'last_updated_at': '2025-09-26T23:59:59Z'},
        'data': {
            'COP': {'code': 'COP', 'value': 4400.0},
            'EUR': {'code': 'EUR', 'value': 0.9},
        },
    })
    provider = make_provider(
        mock_client, clock, {'Table': TABLE, 'Open': KEYED_TABLE, 'CurrencyAPI': CURRENCYAPI}, api_key='secret'
    )

    result = await provider.fetch_rates()

    assert result.rates['USD-COP'].value == pytest.approx(4200.0)
    assert result.rates['USD-COP'].provider == 'Average of 3 sources'
    assert result.rates['EUR-USD'].value == pytest.approx(1 / 0.9)
    assert result.rates['EUR-USD'].provider == 'Average of 2 sources'

    params = {call[0][0]: call[1]['params'] for call in mock_client.get.call_args_list}
    assert params['https://keyed.test/latest.json']['app_id'] == 'secret'
    assert params['https://currencyapi.test/v3/latest'] == {
        'base_currency': 'USD',
        'currencies': 'COP,EUR',
        'apikey': 'secret',
    }


@pytest.mark.asyncio
async def test_unsuccessful_table_counts_as_failed_source(mock_client, clock, json_response):
    mock_client.get.return_value = json_response({
        'success': False,
        'error': {'code': 101, 'info': 'Invalid API key'},
    })
    provider = make_provider(mock_client, clock, {'Fixer.io': TABLE})

    result = await provider.fetch_rates()

    assert result.success is False
    assert 'Fixer.io: no rates found' in result.error


@pytest.mark.asyncio
async def test_default_sources_without_key(mock_client, clock, json_response):
    mock_client.get.return_value = json_response({'rates': {'COP': 4200.0}})
    provider = PublicFXProvider(client=mock_client, clock=clock)

    await provider.fetch_rates()

    assert mock_client.get.call_count == 2
