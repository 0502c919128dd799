"""Dashboard API endpoints: cash ledger, dues monitoring and payment timeline."""

import logging
import time
from datetime import date
from decimal import Decimal

from fastapi import APIRouter, HTTPException, Query
from pydantic import BaseModel, ConfigDict

from kaswarga.api.deps import SettingsDep, SheetsClientDep, TodayDep, load_table
from kaswarga.config.settings import Settings
from kaswarga.models.payment import DuesSummary, PaymentEntry, ResidentDues
from kaswarga.models.transaction import CashTransaction
from kaswarga.services.dues_service import DuesService
from kaswarga.services.errors import ResidentNotFoundError
from kaswarga.services.google_sheets import GoogleSheetsClient
from kaswarga.services.ledger_service import MONTH_FILTER_PATTERN, LedgerService
from kaswarga.services.locale_service import format_currency, format_date

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["dashboard"])


def _log_debug(endpoint: str, start_time: float, **kwargs) -> None:
    """Log API request with timing at DEBUG level."""
    duration_ms = int((time.time() - start_time) * 1000)
    extra = " ".join(f"{k}={v}" for k, v in kwargs.items())
    logger.debug("dashboard.%s: %sduration_ms=%d", endpoint, f"{extra} " if extra else "", duration_ms)


# Ledger schemas


class TransactionResponse(BaseModel):
    """Response schema for a single cash ledger row."""

    row_number: int
    transaction_date: date | None
    date_display: str
    description: str
    category: str
    income: Decimal
    expense: Decimal
    balance: Decimal
    income_display: str
    expense_display: str
    balance_display: str

    @classmethod
    def from_transaction(cls, transaction: CashTransaction) -> "TransactionResponse":
        return cls(
            row_number=transaction.row_number,
            transaction_date=transaction.date,
            date_display=format_date(transaction.date or transaction.raw_date),
            description=transaction.description,
            category=transaction.category,
            income=transaction.income,
            expense=transaction.expense,
            balance=transaction.balance,
            income_display=format_currency(transaction.income),
            expense_display=format_currency(transaction.expense),
            balance_display=format_currency(transaction.balance),
        )


class LedgerSummaryResponse(BaseModel):
    """Totals shown above the ledger table."""

    count: int
    total_income: Decimal
    total_expense: Decimal
    balance: Decimal
    total_income_display: str
    total_expense_display: str
    balance_display: str


class MonthlyTotalResponse(BaseModel):
    period: str  # "YYYY-MM"
    label: str
    income: Decimal
    expense: Decimal
    net: Decimal

    model_config = ConfigDict(from_attributes=True)


class CategoryTotalResponse(BaseModel):
    category: str
    income: Decimal
    expense: Decimal

    model_config = ConfigDict(from_attributes=True)


class LedgerResponse(BaseModel):
    """Response schema for /api/transactions."""

    sheet_name: str
    transactions: list[TransactionResponse]
    summary: LedgerSummaryResponse
    monthly: list[MonthlyTotalResponse]
    categories: list[CategoryTotalResponse]


# Dues schemas


class DuesSummaryResponse(BaseModel):
    """Paid/unpaid/total counts of a resident (or of everyone)."""

    paid: int
    unpaid: int
    total: int
    percentage: int

    model_config = ConfigDict(from_attributes=True)


class ResidentResponse(BaseModel):
    """Resident identity columns."""

    id: str
    name: str
    block: str
    unit: str
    start_period: str | None  # Canonical "YYYY/M"


class ResidentDuesResponse(BaseModel):
    """One row of the monitoring table."""

    resident: ResidentResponse
    summary: DuesSummaryResponse


class MonitoringOverviewResponse(BaseModel):
    residents: int
    fully_paid: int
    in_arrears: int
    paid_entries: int
    total_entries: int
    percentage: int
    blocks: list[str]

    model_config = ConfigDict(from_attributes=True)


class MonitoringResponse(BaseModel):
    """Response schema for /api/dues."""

    sheet_name: str
    as_of: date
    residents: list[ResidentDuesResponse]
    overview: MonitoringOverviewResponse


class PaymentEntryResponse(BaseModel):
    """One period in the payment timeline."""

    key: str
    year: int
    ordinal: int
    label: str
    date: str
    date_display: str
    amount: str
    amount_display: str
    paid: bool
    counts_toward_total: bool
    is_future: bool
    is_special: bool
    status: str

    @classmethod
    def from_entry(cls, entry: PaymentEntry) -> "PaymentEntryResponse":
        return cls(
            key=entry.key,
            year=entry.period.year,
            ordinal=entry.period.ordinal,
            label=entry.label,
            date=entry.date,
            date_display=format_date(entry.date),
            amount=entry.amount,
            amount_display=format_currency(entry.amount) if entry.amount.strip() else "",
            paid=entry.paid,
            counts_toward_total=entry.counts_toward_total,
            is_future=entry.is_future,
            is_special=entry.is_special,
            status=entry.status.value,
        )


class TimelineYearResponse(BaseModel):
    year: int
    entries: list[PaymentEntryResponse]


class ResidentTimelineResponse(BaseModel):
    """Response schema for /api/dues/{resident_id}."""

    sheet_name: str
    as_of: date
    resident: ResidentResponse
    summary: DuesSummaryResponse
    years: list[TimelineYearResponse]


def _resident_response(dues: ResidentDues) -> ResidentResponse:
    resident = dues.resident
    return ResidentResponse(
        id=resident.id,
        name=resident.name,
        block=resident.block,
        unit=resident.unit,
        start_period=str(resident.start_period) if resident.start_period else None,
    )


def _summary_response(summary: DuesSummary) -> DuesSummaryResponse:
    return DuesSummaryResponse.model_validate(summary)


@router.get("/transactions", response_model=LedgerResponse)
async def get_transactions(
    sheet: str | None = Query(default=None, description="Ledger sheet name"),
    month: str | None = Query(
        default=None, pattern=MONTH_FILTER_PATTERN.pattern, description="Only this month (YYYY-MM)"
    ),
    client: GoogleSheetsClient = SheetsClientDep,
    settings: Settings = SettingsDep,
) -> LedgerResponse:
    """Cash ledger table with running balance, totals and breakdowns."""
    start_time = time.time()
    table = await load_table(client, settings, sheet or settings.ledger_sheet)
    view = LedgerService(settings).build_view(table.rows, month=month)

    _log_debug("transactions", start_time, sheet=table.sheet_name, count=len(view.transactions))
    summary = view.summary
    return LedgerResponse(
        sheet_name=table.sheet_name,
        transactions=[TransactionResponse.from_transaction(t) for t in view.transactions],
        summary=LedgerSummaryResponse(
            count=summary.count,
            total_income=summary.total_income,
            total_expense=summary.total_expense,
            balance=summary.balance,
            total_income_display=format_currency(summary.total_income),
            total_expense_display=format_currency(summary.total_expense),
            balance_display=format_currency(summary.balance),
        ),
        monthly=[MonthlyTotalResponse.model_validate(m) for m in view.monthly],
        categories=[CategoryTotalResponse.model_validate(c) for c in view.categories],
    )


@router.get("/dues", response_model=MonitoringResponse)
async def get_dues(
    sheet: str | None = Query(default=None, description="Dues sheet name"),
    block: str | None = Query(default=None, description="Only residents of this block"),
    search: str | None = Query(default=None, description="Match on name or unit number"),
    as_of: date | None = Query(default=None, description="Reference date (default: today)"),
    client: GoogleSheetsClient = SheetsClientDep,
    settings: Settings = SettingsDep,
    today: date = TodayDep,
) -> MonitoringResponse:
    """Dues monitoring table: per-resident payment summary plus overview."""
    start_time = time.time()
    reference = as_of or today
    table = await load_table(client, settings, sheet or settings.dues_sheet)
    view = DuesService(settings).build_monitoring(table.rows, reference, block=block, search=search)

    _log_debug("dues", start_time, sheet=table.sheet_name, residents=len(view.residents))
    return MonitoringResponse(
        sheet_name=table.sheet_name,
        as_of=reference,
        residents=[
            ResidentDuesResponse(
                resident=_resident_response(dues), summary=_summary_response(dues.summary)
            )
            for dues in view.residents
        ],
        overview=MonitoringOverviewResponse.model_validate(view.overview),
    )


@router.get("/dues/{resident_id}", response_model=ResidentTimelineResponse)
async def get_resident_timeline(
    resident_id: str,
    sheet: str | None = Query(default=None, description="Dues sheet name"),
    as_of: date | None = Query(default=None, description="Reference date (default: today)"),
    client: GoogleSheetsClient = SheetsClientDep,
    settings: Settings = SettingsDep,
    today: date = TodayDep,
) -> ResidentTimelineResponse:
    """Payment timeline of one resident, grouped by year."""
    start_time = time.time()
    reference = as_of or today
    table = await load_table(client, settings, sheet or settings.dues_sheet)

    try:
        dues = DuesService(settings).build_timeline(table.rows, resident_id, reference)
    except ResidentNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e)) from e

    _log_debug("timeline", start_time, resident_id=resident_id, entries=len(dues.entries))
    return ResidentTimelineResponse(
        sheet_name=table.sheet_name,
        as_of=reference,
        resident=_resident_response(dues),
        summary=_summary_response(dues.summary),
        years=[
            TimelineYearResponse(
                year=year, entries=[PaymentEntryResponse.from_entry(e) for e in entries]
            )
            for year, entries in dues.entries_by_year()
        ],
    )
