"""Payment-period reconciliation for the dues monitoring view.

Three steps, all pure and never raising on malformed input:

1. parse_payment_columns: flat sheet columns -> period key -> raw (date, amount)
2. evaluate_period: does a period count toward the resident's totals?
3. summarize_entries: paid / unpaid / total counts and a percentage

Column layout of the dues sheet, one pair of columns per period:

    "2024/1 (tgl)"  date paid for January 2024
    "2024/1 (jml)"  amount paid for January 2024
    "2024/13 (jml)" ordinals above 12 are special levies (e.g. meeting fee)
"""

import logging
import re
from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from typing import Callable, Dict, Iterable, List, Mapping, Optional

from kaswarga.models.payment import DuesSummary, PaymentEntry, PeriodEvaluation, ResidentDues
from kaswarga.models.resident import PeriodKey, RawPayment, Resident, StartPeriod
from kaswarga.services.parsers import is_paid_amount, parse_period_key

logger = logging.getLogger(__name__)

# "<period key> (tgl)" / "<period key> (jml)"
_FIELD_SUFFIX = re.compile(r"^(?P<key>.*?)\s*\(\s*(?P<field>tgl|jml)\s*\)\s*$", re.IGNORECASE)
FIELD_NAMES = {"tgl": "date", "jml": "amount"}

_EXCLUDED = PeriodEvaluation(counts_toward_total=False, is_future=False)


def parse_payment_columns(
    row: Mapping[str, str], identity_columns: Iterable[str] = ()
) -> Dict[str, RawPayment]:
    """Collect the date/amount columns of a dues row by period key.

    Args:
        row: Column name -> cell value for one resident
        identity_columns: Columns describing the resident (name, block, ...)

    Returns:
        Period key -> RawPayment. Well-formed keys are normalized to
        "year/ordinal" ("2024/03" -> "2024/3") so both halves of a period
        meet; malformed keys are kept as written. Columns without a
        "(tgl)"/"(jml)" suffix are dropped.
    """
    excluded = set(identity_columns)
    payments: Dict[str, RawPayment] = {}

    for column, value in row.items():
        if column in excluded:
            continue

        match = _FIELD_SUFFIX.match(column)
        if not match or not match.group("key"):
            continue

        key = match.group("key").strip()
        period = parse_period_key(key)
        if period is not None:
            key = str(period)
        payment = payments.setdefault(key, RawPayment())
        setattr(payment, FIELD_NAMES[match.group("field").lower()], value or "")

    return payments


def evaluate_period(
    period_key: str,
    start_period: Optional[StartPeriod],
    current_year: int,
    current_month: int,
) -> PeriodEvaluation:
    """Decide whether a period counts toward a resident's totals.

    Rules, in order:
        1. A malformed key is excluded.
        2. Special entries (ordinal > 12) never count in a future year; with
           a start period they count from the start year on, otherwise
           whenever the year is not in the future.
        3. Monthly entries after the current month are excluded; otherwise
           they count when there is no start period, or when
           (year, month) >= (start year, start month).

    Args:
        period_key: "year/ordinal" text
        start_period: First tracked period, or None to track everything
        current_year: Year of "today"
        current_month: Month of "today"

    Returns:
        PeriodEvaluation with counts_toward_total and is_future
    """
    period = parse_period_key(period_key)
    if period is None:
        return _EXCLUDED

    if period.is_special:
        is_future = period.year > current_year
        if is_future:
            return PeriodEvaluation(counts_toward_total=False, is_future=True)
        if start_period is not None:
            return PeriodEvaluation(
                counts_toward_total=period.year >= start_period.year, is_future=False
            )
        return PeriodEvaluation(counts_toward_total=True, is_future=False)

    if (period.year, period.ordinal) > (current_year, current_month):
        return PeriodEvaluation(counts_toward_total=False, is_future=True)

    if start_period is None:
        return PeriodEvaluation(counts_toward_total=True, is_future=False)

    return PeriodEvaluation(
        counts_toward_total=(period.year, period.ordinal)
        >= (start_period.year, start_period.month),
        is_future=False,
    )


def calculate_percentage(paid: int, total: int) -> int:
    """Paid share of total as a whole percentage, rounded half up; 0 for no total."""
    if total <= 0:
        return 0
    ratio = Decimal(paid) * 100 / Decimal(total)
    return int(ratio.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def summarize_entries(entries: Iterable[PaymentEntry]) -> DuesSummary:
    """Fold evaluated entries into paid/unpaid/total counts.

    Only monthly entries that count toward the total are included; special
    entries are rendered but never counted.
    """
    paid = 0
    total = 0
    for entry in entries:
        if entry.is_special or not entry.counts_toward_total:
            continue
        total += 1
        if entry.paid:
            paid += 1

    return DuesSummary(
        paid=paid,
        unpaid=total - paid,
        total=total,
        percentage=calculate_percentage(paid, total),
    )


def evaluate_entries(
    payments: Mapping[str, RawPayment],
    start_period: Optional[StartPeriod],
    today: date,
    label_for: Callable[[PeriodKey], str] = str,
) -> List[PaymentEntry]:
    """Evaluate every well-formed period of a payment record.

    Args:
        payments: Period key -> raw cells, as built by parse_payment_columns
        start_period: Resident's start period, or None
        today: Reference date for the future check
        label_for: Builds the display label of a period

    Returns:
        Entries ordered by (year, ordinal); malformed keys are left out
    """
    entries: List[PaymentEntry] = []
    for key, raw in payments.items():
        period = parse_period_key(key)
        if period is None:
            logger.debug("Ignoring malformed payment column key %r", key)
            continue

        evaluation = evaluate_period(key, start_period, today.year, today.month)
        entries.append(
            PaymentEntry(
                period=period,
                label=label_for(period),
                date=raw.date,
                amount=raw.amount,
                paid=is_paid_amount(raw.amount),
                counts_toward_total=evaluation.counts_toward_total,
                is_future=evaluation.is_future,
            )
        )

    entries.sort(key=lambda entry: entry.period)
    return entries


def reconcile_resident(
    resident: Resident,
    today: date,
    label_for: Callable[[PeriodKey], str] = str,
) -> ResidentDues:
    """Evaluate a resident's payment record and summarize it."""
    entries = evaluate_entries(resident.payments, resident.start_period, today, label_for)
    return ResidentDues(resident=resident, entries=entries, summary=summarize_entries(entries))
