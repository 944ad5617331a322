"""PDF rendering implementations."""

from efactura.infrastructure.pdf.fpdf2_renderer import Fpdf2InvoiceRenderer
from efactura.infrastructure.pdf.layout import (
    PageCursor,
    PageGeometry,
    advance,
    layout_rows,
    reserve,
)

__all__ = [
    "Fpdf2InvoiceRenderer",
    "PageCursor",
    "PageGeometry",
    "advance",
    "layout_rows",
    "reserve",
]
