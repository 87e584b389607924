"""Excel workbook export."""

import logging
from pathlib import Path
from typing import Optional, Sequence

from openpyxl import Workbook
from openpyxl.styles import Font
from openpyxl.utils import get_column_letter

from paytrack.domain.entities import Payment
from paytrack.domain.errors import ExportFailure
from paytrack.export.table import TABLE_HEADERS, default_export_path, format_due_date

logger = logging.getLogger(__name__)

COLUMN_WIDTHS = (12, 15, 20, 20, 15, 30, 15, 10)
AMOUNT_FORMAT = "#,##0.00"


def export_excel(payments: Sequence[Payment], destination: Optional[str | Path] = None) -> Path:
    """Write payments to an .xlsx workbook with a single "Payments" sheet.

    The first seven columns match the spreadsheet import layout, so an
    exported workbook can be imported again.

    Returns:
        Path of the written workbook

    Raises:
        ExportFailure: If the workbook cannot be written
    """
    path = default_export_path("odemeler", ".xlsx", destination)

    workbook = Workbook()
    sheet = workbook.active
    sheet.title = "Payments"
    sheet.append(list(TABLE_HEADERS))
    for cell in sheet[1]:
        cell.font = Font(bold=True)

    for payment in payments:
        sheet.append(
            [
                format_due_date(payment.due_date),
                payment.check_number,
                payment.bank,
                payment.company,
                payment.business_group,
                payment.description,
                payment.amount,
                payment.status.label,
            ]
        )
        sheet.cell(row=sheet.max_row, column=7).number_format = AMOUNT_FORMAT

    for index, width in enumerate(COLUMN_WIDTHS, start=1):
        sheet.column_dimensions[get_column_letter(index)].width = width

    try:
        workbook.save(path)
    except OSError as e:
        raise ExportFailure(f"Could not write Excel file '{path}': {e}") from e

    logger.info("Exported %d payment(s) to %s", len(payments), path)
    return path
