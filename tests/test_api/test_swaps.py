from datetime import UTC, datetime
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi.testclient import TestClient

from api.dependencies import get_swap_service
from api.main import app
from domain.exceptions.swap import InvalidCurrencyError, SourceUnavailableError
from domain.models.swap import NotFound, RateEntry


@pytest.fixture
def mock_swap_service():
    mock_service = MagicMock()
    mock_service.get_rate = AsyncMock(
        return_value=RateEntry(
            code='RUB',
            rate=Decimal('7.5'),
            fetched_at=datetime(2025, 9, 30, 10, 0, 0, tzinfo=UTC),
            source='database',
        )
    )
    mock_service.invalidate = AsyncMock(return_value=None)
    return mock_service


@pytest.fixture
def client(mock_swap_service):
    app.dependency_overrides[get_swap_service] = lambda: mock_swap_service
    client = TestClient(app, raise_server_exceptions=False)
    yield client
    app.dependency_overrides.clear()


def test_get_swap_success(client, mock_swap_service):
    response = client.get('/api/swaps/RUB')

    assert response.status_code == 200
    data = response.json()
    assert data['code'] == 'RUB'
    assert Decimal(data['rate']) == Decimal('7.5')
    assert data['source'] == 'database'
    assert 'fetched_at' in data
    mock_swap_service.get_rate.assert_awaited_once_with('RUB')


def test_get_swap_not_found_returns_404(client, mock_swap_service):
    mock_swap_service.get_rate.return_value = NotFound(code='XYZ')

    response = client.get('/api/swaps/XYZ')

    assert response.status_code == 404
    assert 'XYZ' in response.json()['detail']


def test_get_swap_invalid_code_returns_400(client, mock_swap_service):
    mock_swap_service.get_rate.side_effect = InvalidCurrencyError("Invalid currency code: '1234'")

    response = client.get('/api/swaps/1234')

    assert response.status_code == 400


def test_get_swap_code_too_short_is_rejected_by_validation(client, mock_swap_service):
    response = client.get('/api/swaps/RU')

    assert response.status_code == 422
    mock_swap_service.get_rate.assert_not_awaited()


def test_get_swap_propagated_source_error_returns_503(client, mock_swap_service):
    mock_swap_service.get_rate.side_effect = SourceUnavailableError('database', 'connection refused')

    response = client.get('/api/swaps/RUB')

    assert response.status_code == 503
    assert response.json()['detail'] == 'Swap rate source unavailable'


def test_delete_swap_invalidates_cache(client, mock_swap_service):
    response = client.delete('/api/swaps/RUB')

    assert response.status_code == 204
    mock_swap_service.invalidate.assert_awaited_once_with('RUB')
