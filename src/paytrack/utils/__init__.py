"""Utility functions for paytrack."""

from paytrack.utils.date_parser import parse_date, parse_due_date, parse_month
from paytrack.utils.amount_parser import (
    amount_to_text,
    format_lira,
    parse_amount,
    parse_import_amount,
)
from paytrack.utils.text import transliterate

__all__ = [
    "parse_date",
    "parse_due_date",
    "parse_month",
    "amount_to_text",
    "format_lira",
    "parse_amount",
    "parse_import_amount",
    "transliterate",
]
