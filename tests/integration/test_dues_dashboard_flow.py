"""Integration tests: dashboard endpoints over the real Google Sheets client.

Only the discovery service is mocked; sheet resolution, range building,
row parsing, reconciliation and formatting all run for real.
"""

from unittest.mock import MagicMock, patch

import pytest
from fastapi.testclient import TestClient

from kaswarga.api.app import create_app
from kaswarga.api.deps import get_sheets_client, get_today
from kaswarga.config.settings import get_settings
from kaswarga.services.google_sheets import GoogleSheetsClient


@pytest.fixture
def discovery_service(sheet_values):
    """Mocked Sheets API service holding the sample Kas and Iuran sheets."""
    service = MagicMock()
    service.spreadsheets.return_value.get.return_value.execute.return_value = {
        "sheets": [
            {"properties": {"title": "Kas", "sheetId": 0}},
            {"properties": {"title": "Iuran", "sheetId": 683750936}},
        ]
    }

    def values_get(spreadsheetId, range, valueRenderOption):
        title = range.split("!")[0].strip("'")
        request = MagicMock()
        request.execute.return_value = {"values": sheet_values[title]}
        return request

    service.spreadsheets.return_value.values.return_value.get.side_effect = values_get
    return service


@pytest.fixture
def api_client(discovery_service, settings, today):
    with patch("kaswarga.services.google_sheets.build", return_value=discovery_service):
        sheets_client = GoogleSheetsClient(api_key="test-key")

    app = create_app(settings)
    app.dependency_overrides[get_sheets_client] = lambda: sheets_client
    app.dependency_overrides[get_settings] = lambda: settings
    app.dependency_overrides[get_today] = lambda: today
    with TestClient(app) as test_client:
        yield test_client


def test_default_sheet_is_resolved_by_gid(api_client, discovery_service):
    """Test /api/gsheet without a name reads the sheet with the default gid."""
    response = api_client.get("/api/gsheet")

    assert response.status_code == 200
    body = response.json()
    assert body["sheetName"] == "Iuran"
    assert body["total"] == 4
    discovery_service.spreadsheets.return_value.values.return_value.get.assert_called_with(
        spreadsheetId="test-spreadsheet-id",
        range="'Iuran'!A:ZZZ",
        valueRenderOption="FORMATTED_VALUE",
    )


def test_monitoring_and_timeline_agree(api_client):
    """Test every resident's timeline summary matches its monitoring row."""
    monitoring = api_client.get("/api/dues").json()
    assert monitoring["overview"]["residents"] == 3

    for row in monitoring["residents"]:
        resident_id = row["resident"]["id"]
        timeline = api_client.get(f"/api/dues/{resident_id}").json()

        assert timeline["resident"] == row["resident"]
        assert timeline["summary"] == row["summary"]

        entries = [e for year in timeline["years"] for e in year["entries"]]
        counted = [e for e in entries if e["counts_toward_total"] and not e["is_special"]]
        assert len(counted) == row["summary"]["total"]
        assert sum(1 for e in counted if e["paid"]) == row["summary"]["paid"]
        assert not any(e["is_future"] and e["counts_toward_total"] for e in entries)


def test_overview_totals_add_up(api_client):
    """Test the overview is the sum of the resident rows."""
    body = api_client.get("/api/dues").json()
    overview = body["overview"]

    assert overview["paid_entries"] == sum(r["summary"]["paid"] for r in body["residents"])
    assert overview["total_entries"] == sum(r["summary"]["total"] for r in body["residents"])
    assert (overview["paid_entries"], overview["total_entries"]) == (5, 6)
    assert overview["fully_paid"] + overview["in_arrears"] == overview["residents"]


def test_ledger_running_balance_matches_summary(api_client):
    """Test the last running balance equals income minus expense."""
    body = api_client.get("/api/transactions").json()

    last = body["transactions"][-1]
    assert last["balance"] == body["summary"]["balance"]
    assert last["balance_display"] == "Rp2.500.000"
