"""
Core business logic services.

Layer-pure services that depend only on:
- efactura/core/entities/*
- efactura/core/interfaces/*
- efactura/core/exceptions.py

NO infrastructure imports. All dependencies injected via constructor.
"""

from efactura.core.services.business_rules import AMOUNT_TOLERANCE, BusinessRuleValidator
from efactura.core.services.identifiers import validate_cif, validate_cnp, validate_iban
from efactura.core.services.invoice_builder import InvoiceBuilderService
from efactura.core.services.invoice_document_service import (
    InvoiceDocumentResult,
    InvoiceDocumentService,
)
from efactura.core.services.invoice_number import (
    InvoiceNumber,
    format_invoice_number,
    parse_invoice_number,
)
from efactura.core.services.invoice_validator import InvoiceValidatorService, validate_invoice
from efactura.core.services.number_words import number_to_words
from efactura.core.services.schema_validator import SchemaValidator

__all__ = [
    # Identifiers
    "validate_cif",
    "validate_cnp",
    "validate_iban",
    # Validation
    "SchemaValidator",
    "BusinessRuleValidator",
    "AMOUNT_TOLERANCE",
    "InvoiceValidatorService",
    "validate_invoice",
    # Invoice numbers
    "InvoiceNumber",
    "format_invoice_number",
    "parse_invoice_number",
    # Amount in words
    "number_to_words",
    # Builder
    "InvoiceBuilderService",
    # Documents
    "InvoiceDocumentService",
    "InvoiceDocumentResult",
]
