"""Spreadsheet proxy endpoint: raw sheet rows as JSON objects."""

import logging
import time

from fastapi import APIRouter, Query
from pydantic import BaseModel, ConfigDict, Field

from kaswarga.api.deps import SettingsDep, SheetsClientDep, load_table
from kaswarga.config.settings import Settings
from kaswarga.services.google_sheets import GoogleSheetsClient

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["sheets"])


class SheetDataResponse(BaseModel):
    """Response schema for /api/gsheet."""

    success: bool = True
    data: list[dict[str, str]]
    total: int = 0
    headers: list[str] | None = None
    sheet_name: str | None = Field(default=None, serialization_alias="sheetName")
    message: str | None = None

    model_config = ConfigDict(populate_by_name=True)


@router.get(
    "/gsheet",
    response_model=SheetDataResponse,
    response_model_exclude_none=True,
    response_model_by_alias=True,
)
async def get_sheet(
    sheet: str | None = Query(default=None, description="Sheet name (case-insensitive)"),
    client: GoogleSheetsClient = SheetsClientDep,
    settings: Settings = SettingsDep,
) -> SheetDataResponse:
    """Return every row of a sheet as an object keyed by the header row."""
    start_time = time.time()
    table = await load_table(client, settings, sheet)
    logger.info(
        f"Fetching data from sheet: \"{table.sheet_name}\" "
        f"({len(table.rows)} rows, {int((time.time() - start_time) * 1000)} ms)"
    )

    if not table.headers:
        return SheetDataResponse(data=[], total=0, message="No data found in the spreadsheet")

    return SheetDataResponse(
        data=table.rows,
        total=len(table.rows),
        headers=table.headers,
        sheet_name=table.sheet_name,
    )
