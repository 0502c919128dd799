"""Google Sheets API client for fetching data.

Handles authentication and data retrieval from Google Sheets. Tries, in
order: an inline service account key, a service account file, and public
access (optionally with an API key).
"""

import json
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from google.oauth2 import service_account
from google_auth_httplib2 import AuthorizedHttp
from googleapiclient.discovery import build
from googleapiclient.errors import HttpError
from googleapiclient.http import build_http

from kaswarga.config.settings import DEFAULT_SHEET_GID, Settings
from kaswarga.services.errors import APIError, ConfigError, CredentialsError, SheetNotFoundError
from kaswarga.services.parsers import sheet_values_to_dicts

SCOPES = ["https://www.googleapis.com/auth/spreadsheets.readonly"]

# Widest column range fetched from a sheet
SHEET_RANGE_COLUMNS = "A:ZZZ"


@dataclass(frozen=True)
class SheetInfo:
    """Title and numeric id of a sheet (tab) in the spreadsheet."""

    title: str
    sheet_id: Optional[int] = None


@dataclass
class SheetTable:
    """A sheet read as header row + row dicts."""

    sheet_name: str
    headers: List[str] = field(default_factory=list)
    rows: List[Dict[str, str]] = field(default_factory=list)


def load_credentials(settings: Settings) -> Optional[service_account.Credentials]:
    """Load service account credentials from settings.

    Args:
        settings: Settings with google_service_account_key and/or
            google_credentials_path

    Returns:
        Credentials, or None when public access should be used

    Raises:
        CredentialsError: If the configured credentials file is missing or invalid
    """
    logger = logging.getLogger(__name__)

    if settings.google_service_account_key:
        try:
            info = json.loads(settings.google_service_account_key)
            if not isinstance(info, dict):
                raise ValueError("service account key must be a JSON object")
            credentials = service_account.Credentials.from_service_account_info(info, scopes=SCOPES)
            logger.info("Using authenticated access")
            return credentials
        except (ValueError, KeyError) as e:
            logger.error("Authentication failed, trying public access: %s", e)
            return None

    if settings.google_credentials_path:
        try:
            credentials = service_account.Credentials.from_service_account_file(
                settings.google_credentials_path, scopes=SCOPES
            )
            logger.info(f"Loaded credentials from {settings.google_credentials_path}")
            return credentials
        except FileNotFoundError as e:
            raise CredentialsError(
                f"Credentials file not found: {settings.google_credentials_path}"
            ) from e
        except ValueError as e:
            raise CredentialsError(
                f"Invalid credentials file format: {settings.google_credentials_path}"
            ) from e

    logger.warning("No service account key found, trying public access")
    return None


class GoogleSheetsClient:
    """Client for Google Sheets API operations."""

    def __init__(
        self,
        credentials: Optional[service_account.Credentials] = None,
        api_key: Optional[str] = None,
        value_render_option: str = "FORMATTED_VALUE",
    ):
        """
        Initialize Google Sheets API client.

        Args:
            credentials: Service account credentials, or None for public access
            api_key: API key used for public access
            value_render_option: How the API renders cell values

        Raises:
            APIError: If the API service cannot be built
        """
        self.logger = logging.getLogger(__name__)
        self.value_render_option = value_render_option
        self.credentials = credentials

        try:
            if credentials is not None:
                self.service = build("sheets", "v4", credentials=credentials, cache_discovery=False)
            else:
                self.service = build("sheets", "v4", developerKey=api_key, cache_discovery=False)
            self.logger.info("Google Sheets API service initialized")
        except Exception as e:
            raise APIError(f"Failed to initialize Google Sheets API: {e}") from e

    @classmethod
    def from_settings(cls, settings: Settings) -> "GoogleSheetsClient":
        """Create a client using the credentials configured in settings."""
        return cls(
            credentials=load_credentials(settings),
            api_key=settings.google_api_key,
            value_render_option=settings.value_render_option,
        )

    def _new_http(self):
        """Fresh transport for one request.

        httplib2.Http is not thread-safe and fetches run in worker threads;
        each execute() gets its own.
        """
        http = build_http()
        if self.credentials is not None:
            return AuthorizedHttp(self.credentials, http=http)
        return http

    def _raise_for_http_error(self, e: HttpError, spreadsheet_id: str, range_spec: str = "") -> None:
        if e.resp.status == 404:
            raise APIError(f"Sheet not found: {spreadsheet_id} or range '{range_spec}'") from e
        elif e.resp.status == 403:
            raise APIError(
                f"Access denied to sheet {spreadsheet_id}. Check service account permissions."
            ) from e
        else:
            raise APIError(f"Google Sheets API error: {e}") from e

    def list_sheets(self, spreadsheet_id: str) -> List[SheetInfo]:
        """
        List the sheets (tabs) of a spreadsheet.

        Args:
            spreadsheet_id: Google Sheet ID

        Returns:
            SheetInfo for each sheet, in spreadsheet order

        Raises:
            APIError: If API call fails
        """
        try:
            result = (
                self.service.spreadsheets()
                .get(spreadsheetId=spreadsheet_id, fields="sheets.properties")
                .execute(http=self._new_http())
            )
        except HttpError as e:
            self._raise_for_http_error(e, spreadsheet_id)
        except Exception as e:
            raise APIError(f"Failed to fetch spreadsheet metadata: {e}") from e

        sheets = []
        for sheet in result.get("sheets", []):
            properties = sheet.get("properties", {})
            if properties.get("title"):
                sheets.append(SheetInfo(title=properties["title"], sheet_id=properties.get("sheetId")))
        return sheets

    def resolve_sheet(
        self,
        spreadsheet_id: str,
        requested: Optional[str] = None,
        default_gid: int = DEFAULT_SHEET_GID,
    ) -> str:
        """
        Find the title of the sheet to read.

        A requested name is matched case-insensitively. Without one, the
        sheet with id default_gid is used, else the first sheet.

        Returns:
            Sheet title

        Raises:
            SheetNotFoundError: If the requested sheet (or any sheet) is missing
        """
        sheets = self.list_sheets(spreadsheet_id)

        if requested:
            for sheet in sheets:
                if sheet.title.lower() == requested.lower():
                    return sheet.title
            raise SheetNotFoundError.for_name(requested, [s.title for s in sheets])

        for sheet in sheets:
            if sheet.sheet_id == default_gid:
                return sheet.title
        if sheets:
            return sheets[0].title
        raise SheetNotFoundError("Target sheet not found")

    def fetch_sheet_data(self, spreadsheet_id: str, range_spec: str = None) -> List[List[Any]]:
        """
        Fetch data from a range in Google Sheets.

        Args:
            spreadsheet_id: Google Sheet ID
            range_spec: A1 range (e.g., "'Kas'!A:ZZZ") or named range

        Returns:
            List of rows, each row is a list of cell values

        Raises:
            APIError: If API call fails
            ValueError: If range_spec not provided
        """
        if not range_spec:
            raise ValueError("range_spec is required")

        self.logger.info(f"Fetching data from range: {range_spec}...")
        try:
            result = (
                self.service.spreadsheets()
                .values()
                .get(
                    spreadsheetId=spreadsheet_id,
                    range=range_spec,
                    valueRenderOption=self.value_render_option,
                )
                .execute(http=self._new_http())
            )
        except HttpError as e:
            self._raise_for_http_error(e, spreadsheet_id, range_spec)
        except Exception as e:
            raise APIError(f"Failed to fetch sheet data: {e}") from e

        values = result.get("values", [])
        self.logger.info(f"Fetched {len(values)} rows from range {range_spec}")
        return values

    def fetch_table(
        self,
        spreadsheet_id: str,
        sheet_name: Optional[str] = None,
        default_gid: int = DEFAULT_SHEET_GID,
    ) -> SheetTable:
        """
        Fetch a whole sheet as header + row dicts.

        Example:
            ```python
            client = GoogleSheetsClient.from_settings(get_settings())
            table = client.fetch_table(spreadsheet_id, sheet_name="Iuran")
            print(f"Fetched {len(table.rows)} residents from {table.sheet_name}")
            ```

        Raises:
            ConfigError: If spreadsheet_id is empty
            SheetNotFoundError: If the sheet does not exist
            APIError: If API call fails
        """
        if not spreadsheet_id:
            raise ConfigError(
                "GOOGLE_SPREADSHEET_ID not configured. "
                "Set GOOGLE_SPREADSHEET_ID environment variable or in .env file"
            )

        title = self.resolve_sheet(spreadsheet_id, sheet_name, default_gid)
        escaped = title.replace("'", "''")
        values = self.fetch_sheet_data(spreadsheet_id, f"'{escaped}'!{SHEET_RANGE_COLUMNS}")
        headers, rows = sheet_values_to_dicts(values)
        return SheetTable(sheet_name=title, headers=headers, rows=rows)
