"""
Generate Invoice Document Use Case.

Renders the printable PDF for an invoice. Does not validate: callers run
validate_invoice first when correctness matters.
"""

from efactura.config import get_logger
from efactura.core.entities.invoice import Invoice
from efactura.core.services.invoice_document_service import (
    InvoiceDocumentResult,
    InvoiceDocumentService,
)

logger = get_logger(__name__)


class GenerateInvoiceDocumentUseCase:
    """
    Use case for generating invoice PDFs.

    Flow:
    1. Render PDF via InvoiceDocumentService
    2. Return PDF bytes and metadata
    """

    def __init__(
        self,
        document_service: InvoiceDocumentService | None = None,
    ):
        self._document_service = document_service

    def _get_document_service(self) -> InvoiceDocumentService:
        if self._document_service is None:
            from efactura.application.services import get_invoice_document_service

            self._document_service = get_invoice_document_service()
        return self._document_service

    def execute(self, invoice: Invoice) -> InvoiceDocumentResult:
        """
        Generate the PDF for the given invoice.

        Args:
            invoice: Invoice to render.

        Returns:
            InvoiceDocumentResult with PDF bytes and metadata.
        """
        logger.info("generate_invoice_document_started", series=invoice.series, number=invoice.number)
        result = self._get_document_service().render(invoice)
        logger.info(
            "generate_invoice_document_complete",
            filename=result.filename,
            file_size=result.file_size,
        )
        return result


def generate_invoice_document(invoice: Invoice) -> bytes:
    """Render the invoice PDF and return its bytes."""
    return GenerateInvoiceDocumentUseCase().execute(invoice).pdf_bytes
