"""Parsing utilities for Google Sheets data.

Handles the loosely-typed cells of the treasury spreadsheet:
- Rows as lists of cells -> dicts keyed by header
- Amounts such as "Rp50.000" (leading-number semantics of the dashboard)
- Day-first dates ("15/01/2024", "15-01-2024", "15.01.2024") and ISO dates
- Period keys ("2024/3") and resident start periods ("2024/3", legacy "2024 Mar")

None of these raise on malformed input; they return None (or 0) instead.

Example:
    >>> parse_numeric_value("Rp50.000")
    50.0

    >>> parse_period_key("2024/13")
    PeriodKey(year=2024, ordinal=13)

    >>> parse_start_period("2023 Jan")
    StartPeriod(year=2023, month=1)
"""

import logging
import math
import re
from datetime import date, datetime
from functools import lru_cache
from typing import Any, Dict, List, Optional

from babel.dates import get_month_names

from kaswarga.models.resident import PeriodKey, StartPeriod

logger = logging.getLogger(__name__)

# Characters kept before reading a number out of an amount cell
_NON_NUMERIC = re.compile(r"[^\d.\-]")
# Longest numeric prefix, as a browser's parseFloat reads it
_LEADING_NUMBER = re.compile(r"^-?(?:\d+\.?\d*|\.\d+)")

_PERIOD_KEY = re.compile(r"^\s*(\d{4})\s*/\s*(\d{1,2})\s*$")
_LEGACY_YEAR_FIRST = re.compile(r"^(\d{4})[\s\-]+([^\W\d_]+)\.?$")
_LEGACY_MONTH_FIRST = re.compile(r"^([^\W\d_]+)\.?[\s\-]+(\d{4})$")

# Locales whose month names are accepted in legacy start periods
_MONTH_NAME_LOCALES = ("en", "id")

SHEET_DATE_FORMATS: List[str] = [
    "%Y-%m-%d",
    "%d/%m/%Y",
    "%d-%m-%Y",
    "%d.%m.%Y",
    "%d/%m/%y",
    "%Y/%m/%d",
]


def sheet_row_to_dict(row_values: list, header_names: list) -> Dict[str, str]:
    """
    Convert row values to dictionary using header names.

    Cells are stringified; cells missing at the end of the row become "".

    Args:
        row_values: List of cell values in the row
        header_names: List of column header names

    Returns:
        Dictionary mapping header name to cell value

    Example:
        >>> sheet_row_to_dict(["1", "Budi"], ["No", "Nama", "Blok"])
        {"No": "1", "Nama": "Budi", "Blok": ""}
    """
    result = {}
    for idx, header_name in enumerate(header_names):
        if idx < len(row_values) and row_values[idx] is not None:
            result[str(header_name)] = str(row_values[idx])
        else:
            result[str(header_name)] = ""

    return result


def sheet_values_to_dicts(values: List[List[Any]]) -> tuple[List[str], List[Dict[str, str]]]:
    """Split raw sheet values into headers and row dicts.

    Args:
        values: Rows as returned by the Sheets API, first row is the header

    Returns:
        Tuple of (headers, rows); both empty when there is no data
    """
    if not values:
        return [], []

    headers = [str(h) for h in values[0]]
    return headers, [sheet_row_to_dict(row, headers) for row in values[1:]]


def parse_leading_number(value: Optional[str]) -> Optional[float]:
    """Read the leading number of a cell after dropping non-numeric characters.

    Everything except digits, "." and "-" is removed first, then the longest
    numeric prefix is read. "Rp50.000" therefore reads as 50.0 and
    "1.500.000" as 1.5.

    Args:
        value: Raw cell text

    Returns:
        Parsed float or None when no number can be read
    """
    if not value or not isinstance(value, str):
        return None

    match = _LEADING_NUMBER.match(_NON_NUMERIC.sub("", value))
    if not match:
        return None
    return float(match.group(0))


def parse_numeric_value(value: Optional[str]) -> float:
    """Parse numeric value from currency or numeric string, 0 when unreadable."""
    number = parse_leading_number(value)
    if number is None or math.isnan(number):
        return 0.0
    return number


def is_paid_amount(value: Optional[str]) -> bool:
    """Check whether an amount cell records a payment (finite and positive)."""
    number = parse_numeric_value(value)
    return math.isfinite(number) and number > 0


def parse_sheet_date(value: Optional[str]) -> Optional[date]:
    """Parse a date cell, day-first.

    Args:
        value: Date text such as "15/01/2024" or "2024-01-15"

    Returns:
        datetime.date or None if the cell is empty or not a recognised date
    """
    if not value or not isinstance(value, str):
        return None

    value = value.strip()
    if not value:
        return None

    for fmt in SHEET_DATE_FORMATS:
        try:
            return datetime.strptime(value, fmt).date()
        except ValueError:
            continue

    try:
        return datetime.fromisoformat(value).date()
    except ValueError:
        logger.debug("Unrecognised date cell %r", value)
        return None


def parse_period_key(value: Optional[str]) -> Optional[PeriodKey]:
    """Parse a "year/ordinal" period key.

    Returns:
        PeriodKey or None when the key is malformed or the ordinal is 0
    """
    if not value or not isinstance(value, str):
        return None

    match = _PERIOD_KEY.match(value)
    if not match:
        return None

    year, ordinal = int(match.group(1)), int(match.group(2))
    if ordinal < 1:
        return None
    return PeriodKey(year=year, ordinal=ordinal)


@lru_cache(maxsize=1)
def _month_lookup() -> Dict[str, int]:
    """Lower-cased month names (wide and abbreviated) -> month number."""
    lookup: Dict[str, int] = {}
    for locale in _MONTH_NAME_LOCALES:
        for width in ("wide", "abbreviated"):
            for context in ("format", "stand-alone"):
                for number, name in get_month_names(width, context, locale=locale).items():
                    lookup[name.lower().rstrip(".")] = number
    return lookup


def parse_month_name(value: str) -> Optional[int]:
    """Get the month number for an English or Indonesian month name."""
    return _month_lookup().get(value.strip().lower().rstrip("."))


def parse_start_period(value: Optional[str]) -> Optional[StartPeriod]:
    """Parse a resident's start period into the canonical year/month form.

    Accepts the canonical "2023/1" and the legacy "2023 Jan" / "Jan 2023"
    forms (English or Indonesian month names).

    Args:
        value: Start period cell

    Returns:
        StartPeriod or None, meaning every period is tracked

    Examples:
        >>> parse_start_period("2023/1")
        StartPeriod(year=2023, month=1)
        >>> parse_start_period("2023 Agustus")
        StartPeriod(year=2023, month=8)
        >>> parse_start_period("")
        None
    """
    if not value or not isinstance(value, str):
        return None

    value = value.strip()
    if not value:
        return None

    year: Optional[int] = None
    month: Optional[int] = None

    match = _PERIOD_KEY.match(value)
    if match:
        year, month = int(match.group(1)), int(match.group(2))
    else:
        match = _LEGACY_YEAR_FIRST.match(value)
        if match:
            year, month = int(match.group(1)), parse_month_name(match.group(2))
        else:
            match = _LEGACY_MONTH_FIRST.match(value)
            if match:
                year, month = int(match.group(2)), parse_month_name(match.group(1))

    if year is None or month is None or not 1 <= month <= 12:
        logger.debug("Ignoring unrecognised start period %r", value)
        return None

    return StartPeriod(year=year, month=month)
