from unittest.mock import AsyncMock, Mock

import httpx
import pytest


def _json_response(payload):
    response = Mock()
    response.json.return_value = payload
    response.raise_for_status = Mock()
    return response


def _html_response(text):
    response = Mock()
    response.text = text
    response.raise_for_status = Mock()
    return response


def _status_error(status_code, text='error'):
    response = Mock()
    response.status_code = status_code
    response.text = text
    response.raise_for_status = Mock(
        side_effect=httpx.HTTPStatusError('error', request=Mock(), response=response)
    )
    return response


@pytest.fixture
def mock_client():
    return AsyncMock(spec=httpx.AsyncClient)


@pytest.fixture
def responses_by_url(mock_client):
    """Route ``mock_client.get`` by URL; a route may be a response or an exception."""
    routes = {}

    async def _get(url, params=None):
        route = routes[url]
        if isinstance(route, Exception):
            raise route
        return route

    mock_client.get.side_effect = _get
    return routes


@pytest.fixture
def json_response():
    return _json_response


@pytest.fixture
def html_response():
    return _html_response


@pytest.fixture
def status_error():
    return _status_error
