"""Core domain entities."""

from efactura.core.entities.invoice import (
    Address,
    BankAccount,
    CompanyDetails,
    Customer,
    Discount,
    Invoice,
    InvoiceItem,
    PersonDetails,
    VatBreakdownEntry,
    is_company,
    is_person,
)
from efactura.core.entities.order import Order, OrderLine
from efactura.core.entities.validation import (
    ValidationIssue,
    ValidationResult,
    ValidationWarning,
)

__all__ = [
    # Invoice entities
    "Address",
    "BankAccount",
    "CompanyDetails",
    "PersonDetails",
    "Customer",
    "Discount",
    "InvoiceItem",
    "VatBreakdownEntry",
    "Invoice",
    "is_company",
    "is_person",
    # Order entities
    "Order",
    "OrderLine",
    # Validation entities
    "ValidationIssue",
    "ValidationWarning",
    "ValidationResult",
]
