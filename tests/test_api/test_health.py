def test_health_lists_providers(client):
    response = client.get('/api/health')

    assert response.status_code == 200
    data = response.json()

    assert data['ok'] is True
    assert data['providers'] == ['BCV', 'Frankfurter', 'PublicFX']
    assert data['environment'] == 'development'
    assert 'timestamp' in data


def test_supported_currencies(client):
    response = client.get('/api/currencies')

    assert response.status_code == 200
    currencies = response.json()['currencies']

    assert [c['code'] for c in currencies] == ['VES', 'USD', 'EUR', 'COP']
    assert currencies[2] == {'code': 'EUR', 'name': 'Euro', 'symbol': '€', 'precision': 2}
