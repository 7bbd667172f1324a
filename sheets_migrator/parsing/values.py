"""
Cell Value Parsers

Spreadsheet cells arrive as free text. These helpers turn them into
typed values:

- parse_date: strict. Returns None when nothing matches so the caller
  can reject the row.
- parse_number: permissive. Anything unreadable becomes 0.0.
- month_label: fixed English month abbreviation, independent of locale.

All three are pure functions and never raise on bad input.
"""

import math
import re
from datetime import date, timedelta
from typing import Optional

import structlog


logger = structlog.get_logger(__name__)

# Spreadsheet serial day 0. Serial 25569 is 1970-01-01.
SERIAL_EPOCH = date(1899, 12, 30)
MAX_SERIAL = (date.max - SERIAL_EPOCH).days

MONTH_ABBREVIATIONS = (
    "Jan", "Feb", "Mar", "Apr", "May", "Jun",
    "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
)
_MONTH_BY_ABBREVIATION = {
    abbr.lower(): number
    for number, abbr in enumerate(MONTH_ABBREVIATIONS, start=1)
}

# (pattern, order of the captured groups)
_NUMERIC_DATE_PATTERNS = (
    (re.compile(r"^(\d{1,2})/(\d{1,2})/(\d{4})$", re.ASCII), ("month", "day", "year")),
    (re.compile(r"^(\d{4})-(\d{1,2})-(\d{1,2})$", re.ASCII), ("year", "month", "day")),
    (re.compile(r"^(\d{1,2})-(\d{1,2})-(\d{4})$", re.ASCII), ("month", "day", "year")),
)

# 23-Nov-23
_DAY_MONTH_NAME_PATTERN = re.compile(r"^(\d{1,2})-([A-Za-z]{3})-(\d{2})$", re.ASCII)

_LEADING_FLOAT = re.compile(r"^[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?", re.ASCII)
_SERIAL = re.compile(r"^[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?$", re.ASCII)


def _build_date(year: int, month: int, day: int) -> Optional[date]:
    try:
        return date(year, month, day)
    except ValueError:
        return None


def _parse_serial(text: str) -> Optional[date]:
    if not _SERIAL.match(text):
        return None

    serial = float(text)
    if not math.isfinite(serial) or serial > MAX_SERIAL:
        return None

    # Time of day is dropped; day 0 is the epoch itself and not a real date
    days = int(serial)
    if days <= 0:
        return None

    return SERIAL_EPOCH + timedelta(days=days)


def parse_date(value: Optional[str]) -> Optional[date]:
    """
    Parse a sheet cell into a calendar date.

    Formats tried in order:
    1. M/D/YYYY
    2. YYYY-M-D
    3. M-D-YYYY
    4. D-Mon-YY (two-digit years below 50 are 20xx)
    5. Spreadsheet serial number (days since 1899-12-30)

    Returns:
        The date, or None when the text is empty or not a valid date
    """
    if value is None:
        return None

    text = str(value).strip()
    if not text:
        return None

    for pattern, order in _NUMERIC_DATE_PATTERNS:
        match = pattern.match(text)
        if match:
            parts = dict(zip(order, (int(g) for g in match.groups())))
            parsed = _build_date(parts["year"], parts["month"], parts["day"])
            if parsed is not None:
                return parsed

    match = _DAY_MONTH_NAME_PATTERN.match(text)
    if match:
        day, month_name, short_year = match.groups()
        month = _MONTH_BY_ABBREVIATION.get(month_name.lower())
        if month is not None:
            year = int(short_year)
            year += 2000 if year < 50 else 1900
            parsed = _build_date(year, month, int(day))
            if parsed is not None:
                return parsed

    parsed = _parse_serial(text)
    if parsed is not None:
        return parsed

    logger.warning("date_unparseable", value=text)
    return None


def parse_number(value: Optional[str]) -> float:
    """
    Parse a currency-formatted cell ("$1,200.50") into a float.

    Trailing text after the number is ignored ("12.5 USD" is 12.5).
    Empty or unreadable input returns 0.0.
    """
    if value is None:
        return 0.0

    text = str(value).strip().replace("$", "").replace(",", "")
    match = _LEADING_FLOAT.match(text)
    if not match:
        return 0.0

    number = float(match.group(0))
    if not math.isfinite(number):
        return 0.0
    return number


def month_label(d: date) -> str:
    """Three-letter English month abbreviation ("Jan" .. "Dec")."""
    return MONTH_ABBREVIATIONS[d.month - 1]
