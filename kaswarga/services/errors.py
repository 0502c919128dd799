"""Custom exception classes for the treasury dashboard.

Provides domain-specific exceptions for clear error handling and reporting.
The reconciliation transforms never raise; these are used by the
spreadsheet client and mapped to HTTP responses by the API layer.
"""

from typing import List, Optional


class DashboardError(Exception):
    """Base exception for dashboard errors."""

    pass


class ConfigError(DashboardError):
    """Configuration loading or validation error."""

    pass


class CredentialsError(ConfigError):
    """Service account credentials not found or invalid."""

    pass


class APIError(DashboardError):
    """Google Sheets API error (authentication, network, etc.)."""

    pass


class SheetNotFoundError(APIError):
    """Requested sheet does not exist in the spreadsheet."""

    def __init__(self, message: str, available_sheets: Optional[List[str]] = None):
        super().__init__(message)
        self.available_sheets = available_sheets or []

    @classmethod
    def for_name(cls, requested: str, available_sheets: List[str]) -> "SheetNotFoundError":
        """Build the error for a named sheet, listing what is available."""
        return cls(
            f'Sheet "{requested}" not found. Available sheets: {", ".join(available_sheets)}',
            available_sheets,
        )


class ResidentNotFoundError(DashboardError):
    """No resident with the given id in the dues sheet."""

    def __init__(self, resident_id: str):
        super().__init__(f"Resident not found: {resident_id}")
        self.resident_id = resident_id
