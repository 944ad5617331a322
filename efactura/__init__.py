"""
Romanian e-Factura invoice core.

Fiscal identifier checks, invoice validation, invoice numbering, amounts in
Romanian words, PDF rendering and UBL/CIUS-RO XML generation.
"""

from efactura.application import (
    IssuedInvoice,
    IssueInvoiceUseCase,
    generate_invoice_document,
)
from efactura.core.entities import (
    Address,
    BankAccount,
    CompanyDetails,
    Customer,
    Discount,
    Invoice,
    InvoiceItem,
    Order,
    OrderLine,
    PersonDetails,
    ValidationIssue,
    ValidationResult,
    ValidationWarning,
    VatBreakdownEntry,
    is_company,
    is_person,
)
from efactura.core.exceptions import (
    EFacturaError,
    InvoiceNumberParseError,
    InvoiceValidationError,
)
from efactura.core.services import (
    InvoiceNumber,
    format_invoice_number,
    number_to_words,
    parse_invoice_number,
    validate_cif,
    validate_cnp,
    validate_iban,
    validate_invoice,
)

__version__ = "1.0.0"

__all__ = [
    # Identifiers
    "validate_cif",
    "validate_cnp",
    "validate_iban",
    # Validation
    "validate_invoice",
    "ValidationIssue",
    "ValidationWarning",
    "ValidationResult",
    # Numbering
    "format_invoice_number",
    "parse_invoice_number",
    "InvoiceNumber",
    # Documents
    "generate_invoice_document",
    "number_to_words",
    "IssueInvoiceUseCase",
    "IssuedInvoice",
    # Entities
    "Address",
    "BankAccount",
    "CompanyDetails",
    "PersonDetails",
    "Customer",
    "Discount",
    "InvoiceItem",
    "VatBreakdownEntry",
    "Invoice",
    "Order",
    "OrderLine",
    "is_company",
    "is_person",
    # Errors
    "EFacturaError",
    "InvoiceNumberParseError",
    "InvoiceValidationError",
]
