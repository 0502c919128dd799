"""Pytest configuration: test environment, sample sheets and API client fixtures."""

import os

# Set test environment BEFORE any imports from kaswarga
# (locale and settings are read at import time)
os.environ["LOCALE"] = "id_ID"
os.environ["GOOGLE_SPREADSHEET_ID"] = "test-spreadsheet-id"
for _name in ("GOOGLE_SERVICE_ACCOUNT_KEY", "GOOGLE_CREDENTIALS_PATH", "GOOGLE_API_KEY"):
    os.environ.pop(_name, None)

from datetime import date  # noqa: E402
from typing import Any, Dict, List, Optional  # noqa: E402

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from kaswarga.api.app import create_app  # noqa: E402
from kaswarga.api.deps import get_sheets_client, get_today  # noqa: E402
from kaswarga.config.settings import DEFAULT_SHEET_GID, Settings, get_settings  # noqa: E402
from kaswarga.services.errors import SheetNotFoundError  # noqa: E402
from kaswarga.services.google_sheets import SheetTable  # noqa: E402
from kaswarga.services.parsers import sheet_values_to_dicts  # noqa: E402

TODAY = date(2024, 6, 15)

DUES_VALUES: List[List[Any]] = [
    [
        "No", "Nama", "Blok", "No Rumah", "Mulai",
        "2024/1 (tgl)", "2024/1 (jml)",
        "2024/3 (tgl)", "2024/3 (jml)",
        "2024/5 (tgl)", "2024/5 (jml)",
        "2024/7 (tgl)", "2024/7 (jml)",
        "2024/13 (tgl)", "2024/13 (jml)",
        "Catatan",
    ],
    # Starts in March: January is not tracked, July is in the future
    ["1", "Budi Santoso", "A", "12", "2024/3",
     "05/01/2024", "Rp50.000", "04/03/2024", "Rp50.000", "", "", "", "", "", "", "pindahan"],
    # No start period: every month up to June counts
    ["2", "Siti Aminah", "A", "7", "",
     "03/01/2024", "Rp50.000", "02/03/2024", "Rp50.000", "06/05/2024", "Rp50.000",
     "", "", "20/02/2024", "Rp25.000", ""],
    # Legacy start period format
    ["3", "Andi Wijaya", "B", "3", "2024 Mei",
     "", "", "", "", "10/05/2024", "Rp50.000", "", "", "", "", ""],
    # Blank row is skipped
    ["", "", "", "", "", "", "", "", "", "", "", "", "", "", "", ""],
]

LEDGER_VALUES: List[List[Any]] = [
    ["Tanggal", "Keterangan", "Kategori", "Pemasukan", "Pengeluaran"],
    ["02/01/2024", "Iuran Januari", "Iuran", "Rp1.500.000", ""],
    ["10/01/2024", "Kebersihan", "Operasional", "", "Rp300.000"],
    ["05/02/2024", "Iuran Februari", "Iuran", "Rp1.200.000", ""],
    ["", "", "", "", ""],
    ["tanggal hilang", "Sumbangan", "", "Rp100.000", ""],
]


class FakeSheetsClient:
    """In-memory stand-in for GoogleSheetsClient."""

    def __init__(self, sheets: Dict[str, List[List[Any]]]):
        self.sheets = sheets
        self.requests: List[Optional[str]] = []

    def fetch_table(
        self,
        spreadsheet_id: str,
        sheet_name: Optional[str] = None,
        default_gid: int = DEFAULT_SHEET_GID,
    ) -> SheetTable:
        self.requests.append(sheet_name)
        if sheet_name is None:
            title = next(iter(self.sheets))
        else:
            matches = [t for t in self.sheets if t.lower() == sheet_name.lower()]
            if not matches:
                raise SheetNotFoundError.for_name(sheet_name, list(self.sheets))
            title = matches[0]

        headers, rows = sheet_values_to_dicts(self.sheets[title])
        return SheetTable(sheet_name=title, headers=headers, rows=rows)


@pytest.fixture
def settings() -> Settings:
    """Default settings."""
    return Settings()


@pytest.fixture
def dues_rows() -> List[Dict[str, str]]:
    """Dues sheet rows keyed by header."""
    return sheet_values_to_dicts(DUES_VALUES)[1]


@pytest.fixture
def ledger_rows() -> List[Dict[str, str]]:
    """Ledger sheet rows keyed by header."""
    return sheet_values_to_dicts(LEDGER_VALUES)[1]


@pytest.fixture
def sheet_values() -> Dict[str, List[List[Any]]]:
    """Raw values of the sample sheets by title."""
    return {"Kas": LEDGER_VALUES, "Iuran": DUES_VALUES, "Kosong": []}


@pytest.fixture
def today() -> date:
    """Fixed reference date for reconciliation."""
    return TODAY


@pytest.fixture
def fake_sheets(sheet_values) -> FakeSheetsClient:
    """Fake client serving the sample Kas and Iuran sheets plus an empty one."""
    return FakeSheetsClient(sheet_values)


@pytest.fixture
def client(fake_sheets: FakeSheetsClient, settings: Settings):
    """Create FastAPI test client backed by the fake sheets client."""
    app = create_app(settings)
    app.dependency_overrides[get_sheets_client] = lambda: fake_sheets
    app.dependency_overrides[get_settings] = lambda: settings
    app.dependency_overrides[get_today] = lambda: TODAY
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()
