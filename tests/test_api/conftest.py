from unittest.mock import AsyncMock, Mock

import pytest
from fastapi.testclient import TestClient

from api.dependencies import get_providers, get_snapshot_service
from api.main import app
from domain.models.currency import RatesResponse


@pytest.fixture
def snapshot(make_graph, fixed_now):
    return RatesResponse(
        at=fixed_now,
        provider_notes=('BCV: 1 rates', 'Frankfurter: 1 rates'),
        rates=make_graph({'USD-VES': 36.5, 'EUR-USD': 1.08}, provider='BCV'),
    )


@pytest.fixture
def mock_snapshot_service(snapshot):
    service = Mock()
    service.get_rates = AsyncMock(return_value=snapshot)
    return service


@pytest.fixture
def mock_providers():
    providers = []
    for name in ('BCV', 'Frankfurter', 'PublicFX'):
        provider = Mock()
        provider.name = name
        providers.append(provider)
    return providers


@pytest.fixture
def client(mock_snapshot_service, mock_providers):
    # Override the real dependencies with mocks
    app.dependency_overrides[get_snapshot_service] = lambda: mock_snapshot_service
    app.dependency_overrides[get_providers] = lambda: mock_providers
    client = TestClient(app)
    yield client
    app.dependency_overrides.clear()
