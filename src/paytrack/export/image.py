"""JPEG snapshot of the payment table using Pillow."""

import logging
from pathlib import Path
from typing import Optional, Sequence

from PIL import Image, ImageDraw, ImageFont

from paytrack.domain.entities import Payment
from paytrack.domain.errors import ExportFailure
from paytrack.export.table import TABLE_HEADERS, default_export_path, table_row
from paytrack.utils.text import transliterate

logger = logging.getLogger(__name__)

CELL_PADDING = 8
ROW_HEIGHT = 24
JPEG_QUALITY = 90
BACKGROUND = (255, 255, 255)
HEADER_FILL = (243, 244, 246)
GRID = (209, 213, 219)
TEXT = (17, 24, 39)
PAID_TEXT = (220, 0, 0)


def _text_width(draw: ImageDraw.ImageDraw, text: str, font) -> int:
    left, _, right, _ = draw.textbbox((0, 0), text, font=font)
    return int(right - left)


def export_image(payments: Sequence[Payment], destination: Optional[str | Path] = None) -> Path:
    """Render the payment table to a JPEG image.

    Returns:
        Path of the written image

    Raises:
        ExportFailure: If the image cannot be rendered or written
    """
    path = default_export_path("odemeler", ".jpg", destination)
    font = ImageFont.load_default()

    rows = [list(TABLE_HEADERS)] + [table_row(p) for p in payments]
    rows = [[transliterate(cell) for cell in row] for row in rows]

    measure = ImageDraw.Draw(Image.new("RGB", (1, 1)))
    widths = [
        max(_text_width(measure, row[col], font) for row in rows) + 2 * CELL_PADDING
        for col in range(len(TABLE_HEADERS))
    ]
    width = sum(widths) + 1
    height = ROW_HEIGHT * len(rows) + 1

    image = Image.new("RGB", (width, height), BACKGROUND)
    draw = ImageDraw.Draw(image)
    draw.rectangle([0, 0, width - 1, ROW_HEIGHT], fill=HEADER_FILL)

    for row_index, row in enumerate(rows):
        top = row_index * ROW_HEIGHT
        x = 0
        is_paid_row = row_index > 0 and payments[row_index - 1].is_paid
        for col, cell in enumerate(row):
            color = PAID_TEXT if is_paid_row and col == len(row) - 1 else TEXT
            draw.text((x + CELL_PADDING, top + 6), cell, fill=color, font=font)
            draw.rectangle([x, top, x + widths[col], top + ROW_HEIGHT], outline=GRID)
            x += widths[col]

    try:
        image.save(path, "JPEG", quality=JPEG_QUALITY)
    except OSError as e:
        raise ExportFailure(f"Could not write image '{path}': {e}") from e

    logger.info("Exported %d payment(s) to %s", len(payments), path)
    return path
