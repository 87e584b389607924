"""Backup and restore of the payment store."""

import json
import logging
import math
import os
from datetime import date
from pathlib import Path
from typing import Any, Optional, Sequence

from dateutil import parser as date_parser

from paytrack.domain.entities import Payment, PaymentStatus
from paytrack.domain.errors import (
    InvalidRecord,
    NotAnArray,
    RecordProblem,
    ValidationError,
)
from paytrack.domain.payment import PaymentService

logger = logging.getLogger(__name__)

DEFAULT_BACKUP_PREFIX = "odeme_takip"

_REQUIRED_TEXT_FIELDS = ("id", "checkNumber", "bank", "company", "businessGroup")
_STATUSES = {status.value for status in PaymentStatus}


def backup_filename(today: Optional[date] = None, prefix: Optional[str] = None) -> str:
    """Return the conventional backup file name, e.g. odeme_takip_yedek_2024-01-31.json."""
    if prefix is None:
        prefix = os.environ.get("PAYTRACK_BACKUP_PREFIX", DEFAULT_BACKUP_PREFIX)
    today = today or date.today()
    return f"{prefix}_yedek_{today.isoformat()}.json"


def payment_to_record(payment: Payment) -> dict[str, Any]:
    """Serialize a payment to its backup record."""
    return {
        "id": payment.id,
        "dueDate": payment.due_date.isoformat(),
        "checkNumber": payment.check_number,
        "bank": payment.bank,
        "company": payment.company,
        "businessGroup": payment.business_group,
        "description": payment.description,
        "amount": payment.amount,
        "status": payment.status.value,
    }


def dump_backup_snapshot(payments: Sequence[Payment]) -> list[dict[str, Any]]:
    """Serialize the payment store to backup records."""
    return [payment_to_record(payment) for payment in payments]


def _parse_iso_date(text: str) -> date:
    parsed = date_parser.isoparse(text)
    if parsed.tzinfo is not None:
        # Browser backups store local midnight as a UTC instant.
        parsed = parsed.astimezone()
    return parsed.date()


def _decode_record(index: int, record: Any, problems: list[RecordProblem]) -> Optional[Payment]:
    if not isinstance(record, dict):
        problems.append(RecordProblem(index, "<record>", "must be an object"))
        return None

    start = len(problems)

    for name in _REQUIRED_TEXT_FIELDS:
        value = record.get(name)
        if value is None or value == "":
            problems.append(RecordProblem(index, name, "is required"))
        elif not isinstance(value, str):
            problems.append(RecordProblem(index, name, "must be a string"))

    due_date = None
    raw_due_date = record.get("dueDate")
    if raw_due_date is None or raw_due_date == "":
        problems.append(RecordProblem(index, "dueDate", "is required"))
    elif not isinstance(raw_due_date, str):
        problems.append(RecordProblem(index, "dueDate", "must be an ISO date string"))
    else:
        try:
            due_date = _parse_iso_date(raw_due_date)
        except (ValueError, OverflowError):
            problems.append(
                RecordProblem(index, "dueDate", f"'{raw_due_date}' is not an ISO date")
            )

    description = record.get("description", "")
    if description is None:
        description = ""
    elif not isinstance(description, str):
        problems.append(RecordProblem(index, "description", "must be a string"))

    amount = record.get("amount")
    if isinstance(amount, bool) or not isinstance(amount, (int, float)):
        problems.append(RecordProblem(index, "amount", "must be a number"))
    elif not math.isfinite(amount):
        problems.append(RecordProblem(index, "amount", "must be finite"))

    status = record.get("status")
    if status not in _STATUSES:
        problems.append(
            RecordProblem(index, "status", "must be 'paid' or 'pending'")
        )

    if len(problems) > start:
        return None

    return Payment(
        id=record["id"],
        due_date=due_date,
        check_number=record["checkNumber"],
        bank=record["bank"],
        company=record["company"],
        business_group=record["businessGroup"],
        description=description,
        amount=float(amount),
        status=PaymentStatus(status),
    )


def parse_backup_snapshot(value: Any) -> list[Payment]:
    """Decode a parsed backup document into payments.

    Every record is validated field by field and all problems are reported
    together.

    Raises:
        NotAnArray: If the document is not a list
        InvalidRecord: If any record has a missing or mistyped field
    """
    if not isinstance(value, list):
        raise NotAnArray("Backup file must contain a list of payments")

    problems: list[RecordProblem] = []
    payments: list[Payment] = []
    seen_ids: set[str] = set()

    for index, record in enumerate(value):
        payment = _decode_record(index, record, problems)
        if payment is None:
            continue
        if payment.id in seen_ids:
            problems.append(RecordProblem(index, "id", f"duplicate id '{payment.id}'"))
            continue
        seen_ids.add(payment.id)
        payments.append(payment)

    if problems:
        raise InvalidRecord(problems)
    return payments


class BackupService:
    """Service for writing and restoring backup files."""

    def __init__(self, payment_service: PaymentService):
        """Initialize backup service.

        Args:
            payment_service: Payment service owning the store
        """
        self.payment_service = payment_service

    def write_backup(self, destination: str | Path, today: Optional[date] = None) -> Path:
        """Write the payment store to a JSON backup.

        Args:
            destination: Target file, or a directory to place a conventionally
                named file in. A path ending in a separator is a directory
                and is created when missing
            today: Date used in the generated file name

        Returns:
            Path of the written file
        """
        path = Path(destination)
        if str(destination).endswith(("/", os.sep)):
            path.mkdir(parents=True, exist_ok=True)
        if path.is_dir():
            path = path / backup_filename(today)

        records = dump_backup_snapshot(self.payment_service.list_payments())
        path.write_text(json.dumps(records, indent=2, ensure_ascii=False), encoding="utf-8")
        logger.info("Wrote backup of %d payment(s) to %s", len(records), path)
        return path

    def load_backup(self, file_path: str | Path) -> list[Payment]:
        """Read and validate a backup file without touching the store."""
        path = Path(file_path)
        if not path.exists():
            raise FileNotFoundError(f"Backup file not found: {file_path}")
        try:
            document = json.loads(path.read_text(encoding="utf-8"))
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise ValidationError(f"Backup file is not valid JSON: {e}") from e
        return parse_backup_snapshot(document)

    def restore_backup(self, file_path: str | Path) -> int:
        """Replace the payment store with the content of a backup file.

        Returns:
            Number of restored payments
        """
        payments = self.load_backup(file_path)
        return self.payment_service.restore_payments(payments)
