"""Shared table layout for exports."""

from datetime import date, datetime
from pathlib import Path
from typing import Optional

from paytrack.domain.entities import Payment
from paytrack.utils.amount_parser import format_amount

TABLE_HEADERS = (
    "Due Date",
    "Check Number",
    "Bank",
    "Company",
    "Business Group",
    "Description",
    "Amount",
    "Status",
)


def format_due_date(value: date) -> str:
    return value.strftime("%d.%m.%Y")


def table_row(payment: Payment) -> list[str]:
    """Render a payment as the eight display columns."""
    return [
        format_due_date(payment.due_date),
        payment.check_number,
        payment.bank,
        payment.company,
        payment.business_group,
        payment.description,
        format_amount(payment.amount),
        payment.status.label,
    ]


def default_export_path(
    stem: str, suffix: str, destination: Optional[str | Path], now: Optional[datetime] = None
) -> Path:
    """Resolve an export destination, e.g. odemeler_31_01_2024.xlsx in a directory."""
    now = now or datetime.now()
    filename = f"{stem}_{now.strftime('%d_%m_%Y')}{suffix}"
    if destination is None:
        return Path(filename)
    path = Path(destination)
    if path.is_dir():
        return path / filename
    return path
