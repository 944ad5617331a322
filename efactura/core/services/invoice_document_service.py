"""
Invoice document generation service.

Pure service that orchestrates document generation for an invoice.
The actual rendering is delegated to an injected IInvoiceDocumentRenderer.
"""

import base64
from dataclasses import dataclass

from efactura.config import get_logger
from efactura.core.entities.invoice import Invoice
from efactura.core.interfaces import IInvoiceDocumentRenderer
from efactura.core.services.invoice_number import format_invoice_number

logger = get_logger(__name__)


@dataclass
class InvoiceDocumentResult:
    """Result of invoice document generation."""

    pdf_bytes: bytes
    invoice_number: str
    filename: str
    file_size: int

    def to_base64(self) -> str:
        """Encode the document for email attachments or JSON payloads."""
        return base64.b64encode(self.pdf_bytes).decode("ascii")


class InvoiceDocumentService:
    """
    Service for generating printable invoice documents.

    Does not validate: callers that care about correctness run the
    validator first.
    """

    def __init__(self, renderer: IInvoiceDocumentRenderer):
        self._renderer = renderer

    def render(self, invoice: Invoice) -> InvoiceDocumentResult:
        """
        Render the invoice and wrap the bytes with file metadata.

        Args:
            invoice: Invoice to render

        Returns:
            InvoiceDocumentResult with PDF bytes and a suggested filename
        """
        invoice_number = format_invoice_number(invoice.series, invoice.number)

        logger.info("generating_invoice_document", invoice_number=invoice_number)
        pdf_bytes = self._renderer.render(invoice)

        logger.info(
            "invoice_document_generated",
            invoice_number=invoice_number,
            items_count=invoice.items_count,
            size_bytes=len(pdf_bytes),
        )

        return InvoiceDocumentResult(
            pdf_bytes=pdf_bytes,
            invoice_number=invoice_number,
            filename=f"Factura_{invoice_number}.pdf",
            file_size=len(pdf_bytes),
        )
