"""Contract tests for error handling of spreadsheet failures."""

from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient

from kaswarga.api.app import create_app
from kaswarga.api.deps import get_sheets_client
from kaswarga.services.errors import APIError, ConfigError


@pytest.fixture
def failing_client():
    """Test client whose sheets client raises a configurable error."""
    sheets = MagicMock()
    app = create_app()
    app.dependency_overrides[get_sheets_client] = lambda: sheets
    with TestClient(app) as test_client:
        yield test_client, sheets


@pytest.mark.parametrize("path", ["/api/gsheet", "/api/transactions", "/api/dues", "/api/dues/1"])
def test_api_error_returns_500(failing_client, path):
    """Test Google API failures become 500 with the error message."""
    test_client, sheets = failing_client
    sheets.fetch_table.side_effect = APIError("Access denied to sheet test-spreadsheet-id")

    response = test_client.get(path)

    assert response.status_code == 500
    assert response.json()["detail"] == "Access denied to sheet test-spreadsheet-id"


def test_config_error_returns_500(failing_client):
    test_client, sheets = failing_client
    sheets.fetch_table.side_effect = ConfigError("GOOGLE_SPREADSHEET_ID not configured")

    response = test_client.get("/api/gsheet")

    assert response.status_code == 500
    assert "GOOGLE_SPREADSHEET_ID" in response.json()["detail"]


def test_unexpected_error_returns_generic_500(failing_client):
    test_client, sheets = failing_client
    sheets.fetch_table.side_effect = RuntimeError("boom")

    response = test_client.get("/api/dues")

    assert response.status_code == 500
    assert response.json()["detail"] == "Failed to fetch spreadsheet data"


def test_client_creation_failure_returns_500(monkeypatch):
    """Test credential problems surface as 500 instead of crashing."""
    app = create_app()
    monkeypatch.setattr(
        "kaswarga.api.deps._cached_client",
        MagicMock(side_effect=ConfigError("Credentials file not found: creds.json")),
    )
    with TestClient(app) as test_client:
        response = test_client.get("/api/gsheet")

    assert response.status_code == 500
    assert response.json()["detail"] == "Credentials file not found: creds.json"
