"""View models for the treasury dashboard."""

from kaswarga.models.payment import (
    DuesSummary,
    EntryStatus,
    MonitoringOverview,
    MonitoringView,
    PaymentEntry,
    PeriodEvaluation,
    ResidentDues,
)
from kaswarga.models.resident import PeriodKey, RawPayment, Resident, StartPeriod
from kaswarga.models.transaction import (
    UNCATEGORIZED,
    CashTransaction,
    CategoryTotal,
    LedgerSummary,
    LedgerView,
    MonthlyTotal,
)

__all__ = [
    "CashTransaction",
    "CategoryTotal",
    "DuesSummary",
    "EntryStatus",
    "LedgerSummary",
    "LedgerView",
    "MonitoringOverview",
    "MonitoringView",
    "MonthlyTotal",
    "PaymentEntry",
    "PeriodEvaluation",
    "PeriodKey",
    "RawPayment",
    "Resident",
    "ResidentDues",
    "StartPeriod",
    "UNCATEGORIZED",
]
