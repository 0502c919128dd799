"""Services: spreadsheet access, parsing, formatting and view building."""

from kaswarga.services.dues_service import DuesService
from kaswarga.services.errors import (
    APIError,
    ConfigError,
    CredentialsError,
    DashboardError,
    ResidentNotFoundError,
    SheetNotFoundError,
)
from kaswarga.services.google_sheets import GoogleSheetsClient, SheetInfo, SheetTable
from kaswarga.services.ledger_service import LedgerService

__all__ = [
    "APIError",
    "ConfigError",
    "CredentialsError",
    "DashboardError",
    "DuesService",
    "GoogleSheetsClient",
    "LedgerService",
    "ResidentNotFoundError",
    "SheetInfo",
    "SheetNotFoundError",
    "SheetTable",
]
