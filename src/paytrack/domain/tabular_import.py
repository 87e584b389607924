"""Spreadsheet import domain service."""

import csv
import logging
import uuid
from datetime import date
from pathlib import Path
from typing import Any, Callable, Optional, Sequence

from openpyxl import load_workbook

from paytrack.domain.entities import (
    Payment,
    PaymentDraft,
    PaymentStatus,
    TabularImportResult,
)
from paytrack.domain.errors import (
    EmptyDataset,
    NoValidRows,
    SchemaMismatch,
    ValidationError,
    schema_mismatch,
)
from paytrack.domain.payment import PaymentService
from paytrack.utils.amount_parser import is_valid_amount, parse_import_amount
from paytrack.utils.date_parser import parse_due_date

logger = logging.getLogger(__name__)

EXPECTED_COLUMNS = (
    "Due Date",
    "Check Number",
    "Bank",
    "Company",
    "Business Group",
    "Description",
    "Amount",
)

# Header vocabulary of spreadsheets written with Turkish column names.
TURKISH_COLUMNS = (
    "Vade Tarihi",
    "Çek No",
    "Banka",
    "Firma",
    "İş Grubu",
    "Açıklama",
    "Tutar",
)

HEADER_VOCABULARIES = (EXPECTED_COLUMNS, TURKISH_COLUMNS)


def _cell_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value).strip()


def _is_blank(row: Sequence[Any]) -> bool:
    return all(_cell_text(cell) == "" for cell in row)


def _header_matches(header: Sequence[Any]) -> bool:
    cells = [_cell_text(cell).casefold() for cell in header]
    for vocabulary in HEADER_VOCABULARIES:
        expected = [column.casefold() for column in vocabulary]
        if cells[: len(expected)] == expected:
            return True
    return False


def parse_tabular_import(rows: Sequence[Sequence[Any]], today: date) -> TabularImportResult:
    """Parse spreadsheet rows into validated payment drafts.

    Row 0 is the header and must list EXPECTED_COLUMNS (or the Turkish
    equivalents) in order. Rows with an empty check number, bank, company or
    business group, or with a non-positive amount, are rejected without
    raising. A due date that cannot be parsed falls back to ``today``.

    Args:
        rows: Raw cell values, header first
        today: Reference date for past-due classification

    Returns:
        TabularImportResult with drafts, past-due indices and totals

    Raises:
        EmptyDataset: If there is no data row
        SchemaMismatch: If the header doesn't match
        NoValidRows: If every data row was rejected
    """
    if len(rows) < 2:
        raise EmptyDataset("Spreadsheet contains no data")

    if not _header_matches(rows[0]):
        raise SchemaMismatch(schema_mismatch(EXPECTED_COLUMNS))

    drafts: list[PaymentDraft] = []
    past_due_indices: list[int] = []
    rejected_rows: list[int] = []
    defaulted_date_rows: list[int] = []
    past_due_total = 0.0
    total_amount = 0.0

    for row_num, row in enumerate(rows[1:], start=2):  # Header is row 1
        if _is_blank(row):
            continue
        cells = list(row) + [None] * (len(EXPECTED_COLUMNS) - len(row))

        check_number, bank, company, business_group, description = (
            _cell_text(cell) for cell in cells[1:6]
        )
        try:
            amount = parse_import_amount(cells[6])
        except ValueError:
            amount = float("nan")

        if not (
            check_number
            and bank
            and company
            and business_group
            and is_valid_amount(amount)
        ):
            logger.warning("Row %d rejected: missing field or invalid amount", row_num)
            rejected_rows.append(row_num)
            continue

        due_date, used_fallback = parse_due_date(cells[0], today)
        if used_fallback:
            logger.warning("Row %d: unreadable due date %r, using today", row_num, cells[0])
            defaulted_date_rows.append(row_num)

        if due_date < today:
            past_due_indices.append(len(drafts))
            past_due_total += amount
        total_amount += amount
        drafts.append(
            PaymentDraft(
                due_date=due_date,
                check_number=check_number,
                bank=bank,
                company=company,
                business_group=business_group,
                description=description,
                amount=amount,
            )
        )

    if not drafts:
        raise NoValidRows("No valid payment rows found in spreadsheet")

    return TabularImportResult(
        drafts=tuple(drafts),
        past_due_indices=tuple(past_due_indices),
        past_due_total=past_due_total,
        total_amount=total_amount,
        rejected_rows=tuple(rejected_rows),
        defaulted_date_rows=tuple(defaulted_date_rows),
    )


def reconcile_past_due(
    drafts: Sequence[PaymentDraft],
    past_due_indices: Sequence[int],
    auto_mark_paid: bool,
    id_factory: Optional[Callable[[], str]] = None,
) -> list[Payment]:
    """Turn drafts into payments with fresh IDs.

    When ``auto_mark_paid`` is True the drafts listed in ``past_due_indices``
    become paid; every other payment is pending.
    """
    if id_factory is None:
        id_factory = lambda: str(uuid.uuid4())  # noqa: E731

    past_due = set(past_due_indices) if auto_mark_paid else set()
    return [
        Payment(
            id=id_factory(),
            due_date=draft.due_date,
            check_number=draft.check_number,
            bank=draft.bank,
            company=draft.company,
            business_group=draft.business_group,
            description=draft.description,
            amount=draft.amount,
            status=PaymentStatus.PAID if index in past_due else PaymentStatus.PENDING,
        )
        for index, draft in enumerate(drafts)
    ]


def read_tabular_file(file_path: str | Path) -> list[list[Any]]:
    """Read every row of a spreadsheet file.

    .xlsx/.xlsm files are read from their first worksheet; .csv files use a
    sniffed delimiter.

    Raises:
        FileNotFoundError: If the file doesn't exist
        ValidationError: If the file type is not supported or unreadable
    """
    path = Path(file_path)
    if not path.exists():
        raise FileNotFoundError(f"File not found: {file_path}")

    suffix = path.suffix.lower()
    if suffix in (".xlsx", ".xlsm"):
        try:
            workbook = load_workbook(path, read_only=True, data_only=True)
        except Exception as e:
            raise ValidationError(f"Could not read spreadsheet '{path.name}': {e}") from e
        try:
            worksheet = workbook.worksheets[0]
            return [list(row) for row in worksheet.iter_rows(values_only=True)]
        finally:
            workbook.close()

    if suffix == ".csv":
        with open(path, "r", encoding="utf-8-sig", newline="") as f:
            sample = f.read(1024)
            f.seek(0)
            try:
                delimiter = csv.Sniffer().sniff(sample, delimiters=",;\t").delimiter
            except csv.Error:
                delimiter = ","
            return [list(row) for row in csv.reader(f, delimiter=delimiter)]

    raise ValidationError(f"Unsupported file type '{suffix}': use .xlsx or .csv")


class TabularImportService:
    """Service for importing payments from spreadsheets."""

    def __init__(self, payment_service: PaymentService):
        """Initialize import service.

        Args:
            payment_service: Payment service used to merge imported payments
        """
        self.payment_service = payment_service

    def preview_file(self, file_path: str | Path, today: Optional[date] = None) -> TabularImportResult:
        """Read and parse a spreadsheet without touching the store."""
        return self.preview(read_tabular_file(file_path), today=today)

    def preview(self, rows: Sequence[Sequence[Any]], today: Optional[date] = None) -> TabularImportResult:
        return parse_tabular_import(rows, today or date.today())

    def commit(self, result: TabularImportResult, auto_mark_paid: bool) -> list[Payment]:
        """Assign IDs and merge the parsed payments into the store.

        Raises:
            PermissionDenied: If the actor may not add payments
        """
        payments = reconcile_past_due(
            result.drafts, result.past_due_indices, auto_mark_paid=auto_mark_paid
        )
        self.payment_service.import_payments(payments)
        return payments
