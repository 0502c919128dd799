"""Centralized locale service for currency, dates, and number formatting.

Single source of truth for all locale-related display strings.
Uses babel library with system timezone auto-detection.

Configuration:
    LOCALE env var (default: id_ID) - determines currency, number/date formatting

Example:
    >>> from kaswarga.services.locale_service import format_currency, format_date
    >>> format_currency(1500000)
    'Rp1.500.000'
    >>> format_date("15/01/2024")
    '15 Jan 2024'
"""

import logging
import os
from datetime import date, datetime, tzinfo
from decimal import Decimal
from typing import Optional

from babel import Locale, UnknownLocaleError
from babel.dates import LOCALTZ
from babel.dates import format_date as babel_format_date
from babel.numbers import NumberFormatError, get_territory_currencies
from babel.numbers import format_decimal as babel_format_decimal
from babel.numbers import get_currency_symbol as babel_get_currency_symbol
from babel.numbers import parse_decimal as babel_parse_decimal

from kaswarga.services.parsers import parse_sheet_date

logger = logging.getLogger(__name__)

# Default locale if LOCALE env var is invalid or missing
DEFAULT_LOCALE = "id_ID"

# Pattern for ledger and payment dates, e.g. "15 Jan 2024"
DATE_PATTERN = "dd MMM yyyy"
# Pattern for monthly period labels, e.g. "Jan 2024"
MONTH_PATTERN = "MMM yyyy"


def _get_locale() -> str:
    """Get locale from environment with validation and fallback.

    Returns:
        Valid locale string (e.g., 'id_ID')
    """
    locale_str = os.getenv("LOCALE", DEFAULT_LOCALE)
    try:
        Locale.parse(locale_str)
        return locale_str
    except (UnknownLocaleError, ValueError) as e:
        logger.warning(f"Invalid LOCALE '{locale_str}': {e}. Falling back to '{DEFAULT_LOCALE}'")
        return DEFAULT_LOCALE


def _get_currency_from_locale(locale_str: str) -> str:
    """Derive currency code from locale territory.

    Args:
        locale_str: Locale string (e.g., 'id_ID')

    Returns:
        Currency code (e.g., 'IDR')
    """
    try:
        locale = Locale.parse(locale_str)
        territory = locale.territory
        if territory:
            currencies = get_territory_currencies(territory)
            if currencies:
                return currencies[0]
    except (UnknownLocaleError, ValueError) as e:
        logger.warning(f"Could not derive currency from locale '{locale_str}': {e}")

    return "IDR"


# Module-level constants (computed once at import)
LOCALE = _get_locale()
CURRENCY = _get_currency_from_locale(LOCALE)


def get_system_timezone() -> tzinfo:
    """Get system timezone via babel auto-detection."""
    return LOCALTZ


def today() -> date:
    """Get today's date in the system timezone."""
    return datetime.now(get_system_timezone()).date()


def get_currency_symbol() -> str:
    """Get currency symbol for current locale (e.g., 'Rp')."""
    return babel_get_currency_symbol(CURRENCY, locale=LOCALE)


def parse_amount(value: Optional[str]) -> Decimal:
    """Parse a locale-formatted amount cell to Decimal.

    Currency symbols and spaces are dropped, then the number is read with the
    locale's separators ("Rp1.500.000" -> 1500000 for id_ID). A trailing
    whole-amount marker (",-" as in "Rp50.000,-") is ignored.

    Args:
        value: Amount cell text

    Returns:
        Decimal amount (0 for empty or unreadable cells)
    """
    if not value or not isinstance(value, str):
        return Decimal("0")

    cleaned = "".join(ch for ch in value if ch.isdigit() or ch in ".,-").rstrip(".,-")
    if not cleaned.strip(".,-"):
        return Decimal("0")

    try:
        return babel_parse_decimal(cleaned, locale=LOCALE)
    except NumberFormatError:
        logger.warning("Unreadable amount %r, using 0", value)
        return Decimal("0")


def format_currency(amount: str | float | Decimal | None) -> str:
    """Format an amount as locale currency, e.g. 'Rp1.500.000'.

    Strings are parsed with parse_amount first. Empty input gives 'Rp0'.
    """
    if amount is None or amount == "":
        numeric_amount: float | Decimal = 0
    elif isinstance(amount, str):
        numeric_amount = parse_amount(amount)
    else:
        numeric_amount = amount

    return f"{get_currency_symbol()}{babel_format_decimal(numeric_amount, locale=LOCALE)}"


def format_date(value: str | date | None) -> str:
    """Format a date (or date cell) for display, e.g. '15 Jan 2024'.

    Returns:
        Formatted date, "" for empty input, or the input unchanged when it is
        not a recognised date
    """
    if not value:
        return ""

    if isinstance(value, date):
        parsed: Optional[date] = value
    else:
        parsed = parse_sheet_date(value)
        if parsed is None:
            return value

    return babel_format_date(parsed, format=DATE_PATTERN, locale=LOCALE)


def format_month(year: int, month: int) -> str:
    """Format a calendar month for display, e.g. 'Jan 2024'."""
    return babel_format_date(date(year, month, 1), format=MONTH_PATTERN, locale=LOCALE)


def get_locale_info() -> dict:
    """Get current locale configuration for debugging/display.

    Returns:
        Dict with locale, currency, timezone info
    """
    return {
        "locale": LOCALE,
        "currency_code": CURRENCY,
        "currency_symbol": get_currency_symbol(),
        "timezone": str(get_system_timezone()),
    }


__all__ = [
    "LOCALE",
    "CURRENCY",
    "get_system_timezone",
    "today",
    "get_currency_symbol",
    "parse_amount",
    "format_currency",
    "format_date",
    "format_month",
    "get_locale_info",
]
