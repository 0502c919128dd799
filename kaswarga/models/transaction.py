"""Cash ledger view models built from the cash transactions sheet."""

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import List, Optional

# Category used for ledger rows with a blank category cell
UNCATEGORIZED = "Lainnya"


@dataclass
class CashTransaction:
    """One row of the cash ledger."""

    row_number: int
    date: Optional[date]
    raw_date: str
    description: str
    category: str
    income: Decimal = Decimal("0")
    expense: Decimal = Decimal("0")
    balance: Decimal = Decimal("0")
    """Running balance after this row, in sheet order"""

    @property
    def net(self) -> Decimal:
        return self.income - self.expense

    @property
    def month(self) -> Optional[str]:
        """Calendar month as "YYYY-MM", or None for undated rows."""
        if self.date is None:
            return None
        return f"{self.date.year:04d}-{self.date.month:02d}"


@dataclass
class LedgerSummary:
    """Totals over a set of ledger rows."""

    count: int = 0
    total_income: Decimal = Decimal("0")
    total_expense: Decimal = Decimal("0")

    @property
    def balance(self) -> Decimal:
        return self.total_income - self.total_expense


@dataclass
class MonthlyTotal:
    """Income and expense for one calendar month."""

    period: str
    label: str
    income: Decimal = Decimal("0")
    expense: Decimal = Decimal("0")

    @property
    def net(self) -> Decimal:
        return self.income - self.expense


@dataclass
class CategoryTotal:
    """Income and expense for one ledger category."""

    category: str
    income: Decimal = Decimal("0")
    expense: Decimal = Decimal("0")


@dataclass
class LedgerView:
    """Cash ledger table with its summary and breakdowns."""

    transactions: List[CashTransaction]
    summary: LedgerSummary
    monthly: List[MonthlyTotal] = field(default_factory=list)
    categories: List[CategoryTotal] = field(default_factory=list)
