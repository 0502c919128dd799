"""Dues monitoring service.

Turns rows of the dues sheet into reconciled residents for the monitoring
table and the per-resident payment timeline.
"""

import logging
from datetime import date
from typing import Dict, List, Optional

from kaswarga.config.settings import Settings
from kaswarga.models.payment import MonitoringOverview, MonitoringView, ResidentDues
from kaswarga.models.resident import PeriodKey, Resident
from kaswarga.services.errors import ResidentNotFoundError
from kaswarga.services.locale_service import format_month
from kaswarga.services.parsers import parse_start_period
from kaswarga.services.reconciliation import (
    calculate_percentage,
    parse_payment_columns,
    reconcile_resident,
)

logger = logging.getLogger(__name__)


class DuesService:
    """Build dues monitoring views from dues sheet rows."""

    def __init__(self, settings: Settings):
        """Initialize with application settings.

        Args:
            settings: Settings carrying the dues sheet column names
        """
        self.settings = settings

    def period_label(self, period: PeriodKey) -> str:
        """Display label: "Mar 2024" for months, "Iuran Rapat 2024" for special entries."""
        if period.is_special:
            return f"{self.settings.special_label(period.ordinal)} {period.year}"
        return format_month(period.year, period.ordinal)

    def parse_resident_row(self, row: Dict[str, str], row_number: int) -> Optional[Resident]:
        """Parse one dues row into a Resident.

        Args:
            row: Column name -> cell value
            row_number: 1-based data row number, used when the id cell is empty

        Returns:
            Resident, or None when the row has no name
        """
        settings = self.settings
        name = row.get(settings.dues_name_column, "").strip()
        if not name:
            logger.debug("Skipping dues row %d: empty %s column", row_number, settings.dues_name_column)
            return None

        resident_id = row.get(settings.dues_id_column, "").strip() or str(row_number)
        return Resident(
            id=resident_id,
            name=name,
            block=row.get(settings.dues_block_column, "").strip(),
            unit=row.get(settings.dues_unit_column, "").strip(),
            start_period=parse_start_period(row.get(settings.dues_start_column)),
            payments=parse_payment_columns(row, settings.dues_identity_columns),
        )

    def build_residents(self, rows: List[Dict[str, str]]) -> List[Resident]:
        """Parse all dues rows, skipping rows without a name."""
        residents = []
        for row_number, row in enumerate(rows, start=1):
            resident = self.parse_resident_row(row, row_number)
            if resident:
                residents.append(resident)

        skipped = len(rows) - len(residents)
        if skipped:
            logger.info("Parsed %d residents, skipped %d rows", len(residents), skipped)
        return residents

    def reconcile(self, resident: Resident, today: date) -> ResidentDues:
        return reconcile_resident(resident, today, label_for=self.period_label)

    def build_monitoring(
        self,
        rows: List[Dict[str, str]],
        today: date,
        block: Optional[str] = None,
        search: Optional[str] = None,
    ) -> MonitoringView:
        """Build the monitoring table.

        Args:
            rows: Dues sheet rows
            today: Reference date for the reconciliation
            block: Only residents of this block (case-insensitive)
            search: Only residents whose name or unit contains this text

        Returns:
            MonitoringView with one reconciled row per resident and the overview
        """
        residents = self.build_residents(rows)
        blocks = sorted({r.block for r in residents if r.block})

        if block:
            wanted = block.strip().lower()
            residents = [r for r in residents if r.block.lower() == wanted]
        if search:
            needle = search.strip().lower()
            residents = [
                r for r in residents if needle in r.name.lower() or needle in r.unit.lower()
            ]

        reconciled = [self.reconcile(r, today) for r in residents]
        overview = self.build_overview(reconciled)
        overview.blocks = blocks
        return MonitoringView(residents=reconciled, overview=overview, as_of=today)

    def build_overview(self, reconciled: List[ResidentDues]) -> MonitoringOverview:
        """Aggregate resident summaries into the monitoring overview."""
        paid_entries = sum(r.summary.paid for r in reconciled)
        total_entries = sum(r.summary.total for r in reconciled)
        fully_paid = sum(1 for r in reconciled if r.summary.unpaid == 0)
        return MonitoringOverview(
            residents=len(reconciled),
            fully_paid=fully_paid,
            in_arrears=len(reconciled) - fully_paid,
            paid_entries=paid_entries,
            total_entries=total_entries,
            percentage=calculate_percentage(paid_entries, total_entries),
        )

    def build_timeline(
        self, rows: List[Dict[str, str]], resident_id: str, today: date
    ) -> ResidentDues:
        """Reconcile a single resident for the payment timeline.

        Raises:
            ResidentNotFoundError: If no resident has this id
        """
        for resident in self.build_residents(rows):
            if resident.id == resident_id:
                return self.reconcile(resident, today)
        raise ResidentNotFoundError(resident_id)
