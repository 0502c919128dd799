"""Shared FastAPI dependencies and sheet loading helpers."""

import asyncio
import logging
from datetime import date
from functools import lru_cache
from typing import Optional

from fastapi import Depends, HTTPException

from kaswarga.config.settings import Settings, get_settings
from kaswarga.services.errors import DashboardError, SheetNotFoundError
from kaswarga.services.google_sheets import GoogleSheetsClient, SheetTable
from kaswarga.services.locale_service import today

logger = logging.getLogger(__name__)


@lru_cache
def _cached_client() -> GoogleSheetsClient:
    return GoogleSheetsClient.from_settings(get_settings())


def get_sheets_client() -> GoogleSheetsClient:
    """Get the shared Google Sheets client.

    Raises:
        HTTPException: 500 if the client cannot be created
    """
    try:
        return _cached_client()
    except DashboardError as e:
        logger.error("Failed to create Google Sheets client: %s", e)
        raise HTTPException(status_code=500, detail=str(e)) from e


def get_today() -> date:
    """Reference date for dues reconciliation (today, system timezone)."""
    return today()


async def load_table(
    client: GoogleSheetsClient,
    settings: Settings,
    sheet_name: Optional[str],
) -> SheetTable:
    """Fetch a sheet off the event loop, mapping errors to HTTP responses.

    Raises:
        HTTPException: 404 if the sheet is missing, 500 on any other failure
    """
    try:
        return await asyncio.to_thread(
            client.fetch_table,
            settings.google_spreadsheet_id,
            sheet_name,
            settings.default_sheet_gid,
        )
    except SheetNotFoundError as e:
        logger.warning("Sheet lookup failed: %s", e)
        raise HTTPException(status_code=404, detail=str(e)) from e
    except DashboardError as e:
        logger.error("Error fetching Google Sheets data: %s", e)
        raise HTTPException(status_code=500, detail=str(e)) from e
    except Exception as e:
        logger.error("Unexpected error fetching Google Sheets data: %s", e, exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to fetch spreadsheet data") from e


SettingsDep = Depends(get_settings)
SheetsClientDep = Depends(get_sheets_client)
TodayDep = Depends(get_today)
