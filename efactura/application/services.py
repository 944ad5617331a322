"""
Service factory functions for dependency injection.

This module provides factory functions that wire infrastructure
implementations to core services. Use cases should import from here.

Clean Architecture: Application layer orchestrates DI, not core layer.
"""

from efactura.config import get_settings
from efactura.core.exceptions import ConfigurationError
from efactura.core.interfaces import IInvoiceDocumentRenderer, IInvoiceXmlGenerator
from efactura.core.services import (
    BusinessRuleValidator,
    InvoiceBuilderService,
    InvoiceDocumentService,
    InvoiceValidatorService,
)

# Singleton service instances
_invoice_validator: InvoiceValidatorService | None = None
_invoice_renderer: IInvoiceDocumentRenderer | None = None
_invoice_document_service: InvoiceDocumentService | None = None
_invoice_xml_generator: IInvoiceXmlGenerator | None = None
_invoice_builder: InvoiceBuilderService | None = None


def get_invoice_validator() -> InvoiceValidatorService:
    """
    Get or create the InvoiceValidatorService.

    Warning thresholds come from ValidationSettings.
    """
    global _invoice_validator

    if _invoice_validator is None:
        settings = get_settings().validation
        _invoice_validator = InvoiceValidatorService(
            business_rules=BusinessRuleValidator(
                large_person_total=settings.large_person_invoice_total,
                max_payment_term_days=settings.max_payment_term_days,
            )
        )
    return _invoice_validator


def get_invoice_renderer() -> IInvoiceDocumentRenderer:
    """
    Get or create the PDF renderer.

    Raises:
        ConfigurationError: If a configured font file does not exist
    """
    global _invoice_renderer

    if _invoice_renderer is None:
        pdf_settings = get_settings().pdf
        for font_path in (pdf_settings.font_path, pdf_settings.bold_font_path):
            if font_path is not None and not font_path.is_file():
                raise ConfigurationError(
                    f"Font file not found: {font_path}",
                    details={"font_path": str(font_path)},
                )

        # Lazy import infrastructure to avoid circular imports
        from efactura.infrastructure.pdf import Fpdf2InvoiceRenderer

        _invoice_renderer = Fpdf2InvoiceRenderer(pdf_settings=pdf_settings)
    return _invoice_renderer


def get_invoice_document_service(
    renderer: IInvoiceDocumentRenderer | None = None,
) -> InvoiceDocumentService:
    """
    Get or create InvoiceDocumentService.

    Args:
        renderer: Optional renderer override (not cached)

    Returns:
        Configured InvoiceDocumentService
    """
    global _invoice_document_service

    if renderer is not None:
        return InvoiceDocumentService(renderer=renderer)

    if _invoice_document_service is None:
        _invoice_document_service = InvoiceDocumentService(renderer=get_invoice_renderer())
    return _invoice_document_service


def get_invoice_xml_generator() -> IInvoiceXmlGenerator:
    """Get or create the UBL e-Factura XML generator."""
    global _invoice_xml_generator

    if _invoice_xml_generator is None:
        from efactura.infrastructure.xml import UblInvoiceXmlGenerator

        _invoice_xml_generator = UblInvoiceXmlGenerator(validator=get_invoice_validator())
    return _invoice_xml_generator


def get_invoice_builder() -> InvoiceBuilderService:
    """Get or create InvoiceBuilderService using InvoiceSettings."""
    global _invoice_builder

    if _invoice_builder is None:
        _invoice_builder = InvoiceBuilderService(settings=get_settings().invoice)
    return _invoice_builder


def reset_services() -> None:
    """Reset all singleton services (for testing)."""
    global _invoice_validator, _invoice_renderer, _invoice_document_service
    global _invoice_xml_generator, _invoice_builder

    _invoice_validator = None
    _invoice_renderer = None
    _invoice_document_service = None
    _invoice_xml_generator = None
    _invoice_builder = None
