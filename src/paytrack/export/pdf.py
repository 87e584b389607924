"""PDF report export using reportlab."""

import logging
from datetime import datetime
from pathlib import Path
from typing import Optional, Sequence

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4, landscape
from reportlab.lib.styles import getSampleStyleSheet, ParagraphStyle
from reportlab.lib.units import mm
from reportlab.platypus import SimpleDocTemplate, Paragraph, Spacer, Table, TableStyle

from paytrack.domain.entities import Payment
from paytrack.domain.errors import ExportFailure
from paytrack.domain.summary import total_amount
from paytrack.export.table import TABLE_HEADERS, default_export_path, table_row
from paytrack.utils.amount_parser import format_amount
from paytrack.utils.text import transliterate

logger = logging.getLogger(__name__)

HEADER_FILL = colors.Color(63 / 255, 81 / 255, 181 / 255)
PAID_TEXT = colors.Color(220 / 255, 0, 0)
DETAIL_COLUMN_WIDTHS = [w * mm for w in (25, 25, 35, 35, 35, 50, 25, 20)]


def _draw_page_number(canvas, doc) -> None:
    canvas.saveState()
    canvas.setFont("Helvetica", 8)
    width, height = doc.pagesize
    canvas.drawRightString(width - 10 * mm, 10 * mm, f"Page {doc.page}")
    canvas.restoreState()


def _summary_table(payments: Sequence[Payment]) -> Table:
    total = total_amount(payments)
    paid = total_amount(p for p in payments if p.is_paid)
    rows = [
        ["SUMMARY", ""],
        ["Payments:", f"{len(payments)}"],
        ["Total Amount:", f"{format_amount(total)} TL"],
        ["Paid:", f"{format_amount(paid)} TL"],
        ["Remaining:", f"{format_amount(total - paid)} TL"],
    ]
    table = Table(rows, colWidths=[40 * mm, 40 * mm])
    table.setStyle(
        TableStyle(
            [
                ("SPAN", (0, 0), (-1, 0)),
                ("BACKGROUND", (0, 0), (-1, 0), HEADER_FILL),
                ("TEXTCOLOR", (0, 0), (-1, 0), colors.white),
                ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
                ("FONTSIZE", (0, 0), (-1, -1), 10),
                ("GRID", (0, 0), (-1, -1), 0.5, colors.grey),
                ("ALIGN", (0, 0), (-1, -1), "LEFT"),
            ]
        )
    )
    return table


def _detail_table(payments: Sequence[Payment]) -> Table:
    rows = [[transliterate(h) for h in TABLE_HEADERS]]
    rows.extend([transliterate(cell) for cell in table_row(p)] for p in payments)

    style = [
        ("BACKGROUND", (0, 0), (-1, 0), HEADER_FILL),
        ("TEXTCOLOR", (0, 0), (-1, 0), colors.white),
        ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
        ("FONTSIZE", (0, 0), (-1, -1), 8),
        ("GRID", (0, 0), (-1, -1), 0.5, colors.grey),
        ("ALIGN", (6, 1), (6, -1), "RIGHT"),
        ("ALIGN", (7, 1), (7, -1), "CENTER"),
        ("VALIGN", (0, 0), (-1, -1), "MIDDLE"),
    ]
    for row_index, payment in enumerate(payments, start=1):
        if payment.is_paid:
            style.append(("TEXTCOLOR", (7, row_index), (7, row_index), PAID_TEXT))

    table = Table(rows, colWidths=DETAIL_COLUMN_WIDTHS, repeatRows=1)
    table.setStyle(TableStyle(style))
    return table


def export_pdf(
    payments: Sequence[Payment],
    destination: Optional[str | Path] = None,
    now: Optional[datetime] = None,
) -> Path:
    """Write a landscape PDF report: a summary table followed by the payment list.

    Text is transliterated to ASCII because the built-in PDF fonts lack the
    Turkish letters.

    Returns:
        Path of the written report

    Raises:
        ExportFailure: If the report cannot be rendered or written
    """
    now = now or datetime.now()
    path = default_export_path("odeme_raporu", ".pdf", destination, now=now)

    doc = SimpleDocTemplate(
        str(path),
        pagesize=landscape(A4),
        topMargin=10 * mm,
        bottomMargin=15 * mm,
        leftMargin=15 * mm,
        rightMargin=15 * mm,
        title="Payment Tracking Report",
        subject="Payment List",
    )
    styles = getSampleStyleSheet()
    title_style = ParagraphStyle("ReportTitle", parent=styles["Heading1"], fontSize=16, alignment=1)
    meta_style = ParagraphStyle("ReportMeta", parent=styles["Normal"], fontSize=10)

    elements = [
        Paragraph("PAYMENT TRACKING REPORT", title_style),
        Paragraph(f"Created: {now.strftime('%d.%m.%Y %H:%M')}", meta_style),
        Spacer(1, 6 * mm),
        _summary_table(payments),
        Spacer(1, 10 * mm),
        _detail_table(payments),
    ]

    try:
        doc.build(elements, onFirstPage=_draw_page_number, onLaterPages=_draw_page_number)
    except Exception as e:
        raise ExportFailure(f"Could not create PDF file '{path}': {e}") from e

    logger.info("Exported %d payment(s) to %s", len(payments), path)
    return path
