"""Date parsing utilities."""

import re
from datetime import date, datetime, timedelta
from decimal import Decimal
from typing import Any

from dateutil import parser as date_parser
from dateutil.relativedelta import relativedelta

# Day zero of spreadsheet serial dates (Lotus 1-2-3 leap year bug included).
SPREADSHEET_EPOCH = datetime(1899, 12, 30)

# Text formats tried in order for spreadsheet due-date cells.
DUE_DATE_FORMATS = ("%d.%m.%Y", "%Y-%m-%d", "%m/%d/%Y")

_SERIAL_PATTERN = re.compile(r"\d+(\.\d+)?")
_DOTTED_PATTERN = re.compile(r"\d{1,2}\.\d{1,2}\.\d{4}")
_MONTH_PATTERN = re.compile(r"(\d{4})-(\d{1,2})")


def parse_date(date_str: str) -> date:
    """Parse a date string into a date object.

    Supports various formats including relative dates:
    - Absolute dates: "2024-01-15", "15.01.2024", "January 15, 2024", etc.
    - Relative dates: "today", "yesterday", "next month", "this year", etc.

    Args:
        date_str: Date string in various formats

    Returns:
        Date object

    Raises:
        ValueError: If date string cannot be parsed
    """
    date_str = date_str.strip().lower()
    today = date.today()

    relative_dates = {
        "today": today,
        "yesterday": today - timedelta(days=1),
        "tomorrow": today + timedelta(days=1),
    }

    if date_str in relative_dates:
        return relative_dates[date_str]

    if date_str.startswith("last "):
        period = date_str[5:]
        if period == "month":
            return (today - relativedelta(months=1)).replace(day=1)
        elif period == "year":
            return today.replace(month=1, day=1) - relativedelta(years=1)
        elif period == "week":
            return today - timedelta(days=today.weekday() + 7)

    elif date_str.startswith("this "):
        period = date_str[5:]
        if period == "month":
            return today.replace(day=1)
        elif period == "year":
            return today.replace(month=1, day=1)
        elif period == "week":
            return today - timedelta(days=today.weekday())

    elif date_str.startswith("next "):
        period = date_str[5:]
        if period == "month":
            return (today + relativedelta(months=1)).replace(day=1)
        elif period == "year":
            return today.replace(month=1, day=1) + relativedelta(years=1)
        elif period == "week":
            return today + timedelta(days=(7 - today.weekday()))

    # Dotted dates are always day-first, as written on checks.
    if _DOTTED_PATTERN.fullmatch(date_str):
        try:
            return datetime.strptime(date_str, "%d.%m.%Y").date()
        except ValueError as e:
            raise ValueError(f"Could not parse date '{date_str}': {e}")

    try:
        dt = date_parser.parse(date_str)
        return dt.date()
    except (ValueError, TypeError, OverflowError) as e:
        raise ValueError(f"Could not parse date '{date_str}': {e}")


def parse_month(month_str: str) -> tuple[int, int]:
    """Parse a "YYYY-MM" string into a (year, month) pair.

    Raises:
        ValueError: If the string is not a valid year and month
    """
    match = _MONTH_PATTERN.fullmatch(month_str.strip())
    if match is None:
        raise ValueError(f"Could not parse month '{month_str}': expected YYYY-MM")
    year, month = int(match.group(1)), int(match.group(2))
    if not 1 <= month <= 12:
        raise ValueError(f"Could not parse month '{month_str}': month must be 1-12")
    return year, month


def serial_to_date(serial: float) -> date:
    """Convert a spreadsheet serial number to a calendar date."""
    return (SPREADSHEET_EPOCH + timedelta(days=float(serial))).date()


def parse_due_date(value: Any, today: date) -> tuple[date, bool]:
    """Parse a spreadsheet due-date cell.

    Tries, in order: native date values, numeric serial dates, the text
    formats in DUE_DATE_FORMATS and finally number-like text as a serial.
    Anything else falls back to ``today``.

    Returns:
        Tuple of (due date, whether the fallback to today was used)
    """
    if value is None or value == "" or value == 0:
        return today, True

    if isinstance(value, datetime):
        return value.date(), False
    if isinstance(value, date):
        return value, False

    if isinstance(value, (int, float, Decimal)) and not isinstance(value, bool):
        try:
            return serial_to_date(value), False
        except (OverflowError, ValueError):
            return today, True

    text = str(value).strip()
    for fmt in DUE_DATE_FORMATS:
        try:
            return datetime.strptime(text, fmt).date(), False
        except ValueError:
            continue

    if _SERIAL_PATTERN.fullmatch(text) and float(text) > 0:
        try:
            return serial_to_date(float(text)), False
        except (OverflowError, ValueError):
            pass

    return today, True


def same_month(value: date, year: int, month: int) -> bool:
    """Return True when a date falls in the given calendar month."""
    return value.year == year and value.month == month
