"""Application use cases."""

from efactura.application.use_cases.generate_invoice_document import (
    GenerateInvoiceDocumentUseCase,
    generate_invoice_document,
)
from efactura.application.use_cases.issue_invoice import IssuedInvoice, IssueInvoiceUseCase

__all__ = [
    "GenerateInvoiceDocumentUseCase",
    "generate_invoice_document",
    "IssueInvoiceUseCase",
    "IssuedInvoice",
]
