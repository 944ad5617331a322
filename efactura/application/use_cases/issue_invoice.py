"""
Issue Invoice Use Case.

Runs the full pipeline for a finished invoice: validate, then render the
PDF and the ANAF XML. Nothing is produced for an invalid invoice.
"""

from dataclasses import dataclass

from efactura.config import get_logger, invoice_log_context
from efactura.core.entities.invoice import Invoice
from efactura.core.entities.validation import ValidationResult
from efactura.core.exceptions import InvoiceValidationError
from efactura.core.interfaces import IInvoiceXmlGenerator
from efactura.core.services.invoice_document_service import (
    InvoiceDocumentResult,
    InvoiceDocumentService,
)
from efactura.core.services.invoice_number import format_invoice_number
from efactura.core.services.invoice_validator import InvoiceValidatorService

logger = get_logger(__name__)


@dataclass
class IssuedInvoice:
    """Artifacts produced for an issued invoice."""

    invoice_number: str
    validation: ValidationResult
    document: InvoiceDocumentResult
    xml: bytes


class IssueInvoiceUseCase:
    """
    Use case for issuing an invoice.

    Flow:
    1. Validate (schema, then business rules)
    2. Render the PDF document
    3. Generate the UBL e-Factura XML
    """

    def __init__(
        self,
        validator: InvoiceValidatorService | None = None,
        document_service: InvoiceDocumentService | None = None,
        xml_generator: IInvoiceXmlGenerator | None = None,
    ):
        from efactura.application.services import (
            get_invoice_document_service,
            get_invoice_validator,
            get_invoice_xml_generator,
        )

        self._validator = validator or get_invoice_validator()
        self._document_service = document_service or get_invoice_document_service()
        self._xml_generator = xml_generator or get_invoice_xml_generator()

    def execute(self, invoice: Invoice) -> IssuedInvoice:
        """
        Issue the invoice.

        Returns:
            IssuedInvoice with validation warnings, PDF and XML

        Raises:
            InvoiceValidationError: If the invoice has validation errors
        """
        invoice_number = format_invoice_number(invoice.series, invoice.number)

        with invoice_log_context(invoice_number, invoice_type=invoice.invoice_type):
            logger.info("issue_invoice_started")

            validation = self._validator.validate(invoice)
            if not validation.valid:
                logger.warning("issue_invoice_rejected", error_codes=validation.error_codes)
                raise InvoiceValidationError(validation.errors, invoice_number=invoice_number)

            document = self._document_service.render(invoice)
            xml = self._xml_generator.generate(invoice)

            logger.info(
                "issue_invoice_complete",
                warnings_count=validation.warnings_count,
                pdf_size=document.file_size,
                xml_size=len(xml),
            )

        return IssuedInvoice(
            invoice_number=invoice_number,
            validation=validation,
            document=document,
            xml=xml,
        )
