"""Export adapters rendering payment lists to files."""

from paytrack.export.excel import export_excel
from paytrack.export.pdf import export_pdf
from paytrack.export.image import export_image

__all__ = ["export_excel", "export_pdf", "export_image"]
