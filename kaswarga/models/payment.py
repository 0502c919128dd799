"""Evaluated payment entries and their aggregate summary."""

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import List, Optional

from kaswarga.models.resident import PeriodKey, Resident


class EntryStatus(str, Enum):
    """Display status of an evaluated payment entry."""

    PAID = "paid"
    UNPAID = "unpaid"
    FUTURE = "future"
    NOT_TRACKED = "not_tracked"


@dataclass(frozen=True)
class PeriodEvaluation:
    """Outcome of checking one period key against the start period and today."""

    counts_toward_total: bool
    is_future: bool


@dataclass
class PaymentEntry:
    """One period of a resident's payment record, evaluated for display."""

    period: PeriodKey
    label: str
    date: str
    amount: str
    paid: bool
    counts_toward_total: bool
    is_future: bool

    @property
    def key(self) -> str:
        return str(self.period)

    @property
    def is_special(self) -> bool:
        return self.period.is_special

    @property
    def status(self) -> EntryStatus:
        if self.paid:
            return EntryStatus.PAID
        if self.is_future:
            return EntryStatus.FUTURE
        if self.counts_toward_total:
            return EntryStatus.UNPAID
        return EntryStatus.NOT_TRACKED


@dataclass(frozen=True)
class DuesSummary:
    """Paid/unpaid/total counts over the monthly entries that count."""

    paid: int = 0
    unpaid: int = 0
    total: int = 0
    percentage: int = 0


@dataclass
class ResidentDues:
    """A resident with their evaluated entries and summary."""

    resident: Resident
    entries: List[PaymentEntry] = field(default_factory=list)
    summary: DuesSummary = field(default_factory=DuesSummary)

    def entries_by_year(self) -> List[tuple[int, List[PaymentEntry]]]:
        """Group entries by year, ascending, keeping entry order within a year."""
        years: dict[int, List[PaymentEntry]] = {}
        for entry in self.entries:
            years.setdefault(entry.period.year, []).append(entry)
        return sorted(years.items())


@dataclass
class MonitoringOverview:
    """Aggregate figures over all residents shown in the monitoring table."""

    residents: int = 0
    fully_paid: int = 0
    in_arrears: int = 0
    paid_entries: int = 0
    total_entries: int = 0
    percentage: int = 0
    blocks: List[str] = field(default_factory=list)


@dataclass
class MonitoringView:
    """Monitoring table: one reconciled row per resident plus the overview."""

    residents: List[ResidentDues]
    overview: MonitoringOverview
    as_of: Optional[date] = None
