"""Cash ledger service for the transactions table and its summaries.

Reads rows of the cash sheet (date, description, category, income, expense)
into CashTransaction view models with a running balance, and computes the
totals shown above the table plus monthly and per-category breakdowns.
"""

import logging
import re
from decimal import Decimal
from typing import Dict, List, Optional

from kaswarga.config.settings import Settings
from kaswarga.models.transaction import (
    UNCATEGORIZED,
    CashTransaction,
    CategoryTotal,
    LedgerSummary,
    LedgerView,
    MonthlyTotal,
)
from kaswarga.services.locale_service import format_month, parse_amount
from kaswarga.services.parsers import parse_sheet_date

logger = logging.getLogger(__name__)

MONTH_FILTER_PATTERN = re.compile(r"^\d{4}-(0[1-9]|1[0-2])$")


class LedgerService:
    """Build the cash ledger view from sheet rows."""

    def __init__(self, settings: Settings):
        self.settings = settings

    def parse_transaction_row(
        self, row: Dict[str, str], row_number: int
    ) -> Optional[CashTransaction]:
        """Parse one ledger row.

        Args:
            row: Column name -> cell value
            row_number: 1-based data row number

        Returns:
            CashTransaction, or None for a blank row
        """
        settings = self.settings
        raw_date = row.get(settings.ledger_date_column, "").strip()
        description = row.get(settings.ledger_description_column, "").strip()
        raw_income = row.get(settings.ledger_income_column, "").strip()
        raw_expense = row.get(settings.ledger_expense_column, "").strip()

        if not (raw_date or description or raw_income or raw_expense):
            return None

        return CashTransaction(
            row_number=row_number,
            date=parse_sheet_date(raw_date),
            raw_date=raw_date,
            description=description,
            category=row.get(settings.ledger_category_column, "").strip() or UNCATEGORIZED,
            income=parse_amount(raw_income),
            expense=parse_amount(raw_expense),
        )

    def build_transactions(self, rows: List[Dict[str, str]]) -> List[CashTransaction]:
        """Parse ledger rows in sheet order and fill in the running balance."""
        transactions: List[CashTransaction] = []
        balance = Decimal("0")

        for row_number, row in enumerate(rows, start=1):
            transaction = self.parse_transaction_row(row, row_number)
            if transaction is None:
                continue
            balance += transaction.net
            transaction.balance = balance
            transactions.append(transaction)

        logger.debug("Parsed %d ledger rows out of %d", len(transactions), len(rows))
        return transactions

    @staticmethod
    def summarize(transactions: List[CashTransaction]) -> LedgerSummary:
        summary = LedgerSummary()
        for transaction in transactions:
            summary.count += 1
            summary.total_income += transaction.income
            summary.total_expense += transaction.expense
        return summary

    @staticmethod
    def monthly_breakdown(transactions: List[CashTransaction]) -> List[MonthlyTotal]:
        """Income and expense per calendar month, oldest first; undated rows are left out."""
        months: Dict[str, MonthlyTotal] = {}
        for transaction in transactions:
            period = transaction.month
            if period is None:
                continue
            if period not in months:
                months[period] = MonthlyTotal(
                    period=period,
                    label=format_month(transaction.date.year, transaction.date.month),
                )
            months[period].income += transaction.income
            months[period].expense += transaction.expense

        return [months[period] for period in sorted(months)]

    @staticmethod
    def category_breakdown(transactions: List[CashTransaction]) -> List[CategoryTotal]:
        """Income and expense per category, sorted by category name."""
        categories: Dict[str, CategoryTotal] = {}
        for transaction in transactions:
            total = categories.setdefault(
                transaction.category, CategoryTotal(category=transaction.category)
            )
            total.income += transaction.income
            total.expense += transaction.expense

        return [categories[name] for name in sorted(categories)]

    def build_view(self, rows: List[Dict[str, str]], month: Optional[str] = None) -> LedgerView:
        """Build the ledger table, optionally narrowed to one "YYYY-MM" month.

        The month filter applies to the table and the summary; the breakdowns
        always cover the whole ledger.

        Raises:
            ValueError: If month is not in "YYYY-MM" form
        """
        if month is not None and not MONTH_FILTER_PATTERN.match(month):
            raise ValueError(f"Invalid month filter '{month}' (expected YYYY-MM)")

        transactions = self.build_transactions(rows)
        shown = transactions
        if month is not None:
            shown = [t for t in transactions if t.month == month]

        return LedgerView(
            transactions=shown,
            summary=self.summarize(shown),
            monthly=self.monthly_breakdown(transactions),
            categories=self.category_breakdown(transactions),
        )
