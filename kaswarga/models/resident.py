"""Resident and payment-period models built from the dues sheet."""

from dataclasses import dataclass, field
from typing import Dict, Optional

# Ordinals above this value are special levies, not calendar months
LAST_MONTH_ORDINAL = 12


@dataclass(frozen=True, order=True)
class PeriodKey:
    """Year + ordinal identifying a monthly (1-12) or special (>12) payment slot."""

    year: int
    ordinal: int

    @property
    def is_special(self) -> bool:
        return self.ordinal > LAST_MONTH_ORDINAL

    def __str__(self) -> str:
        return f"{self.year}/{self.ordinal}"


@dataclass(frozen=True, order=True)
class StartPeriod:
    """First year/month from which a resident's dues are tracked.

    Canonical text form is "YYYY/M" (e.g. "2023/1").
    """

    year: int
    month: int

    def __str__(self) -> str:
        return f"{self.year}/{self.month}"


@dataclass
class RawPayment:
    """Raw date and amount cells recorded for one period."""

    date: str = ""
    amount: str = ""


@dataclass
class Resident:
    """Resident row from the dues sheet."""

    id: str
    name: str
    block: str = ""
    unit: str = ""
    start_period: Optional[StartPeriod] = None
    payments: Dict[str, RawPayment] = field(default_factory=dict)
    """Period key text (e.g. "2024/3") -> raw payment cells"""
