"""
Application layer - Use cases and service factories.

This layer orchestrates business logic by:
1. Implementing use cases that coordinate core services
2. Providing factory functions for dependency injection
"""

from efactura.application.services import (
    get_invoice_builder,
    get_invoice_document_service,
    get_invoice_renderer,
    get_invoice_validator,
    get_invoice_xml_generator,
    reset_services,
)
from efactura.application.use_cases import (
    GenerateInvoiceDocumentUseCase,
    IssuedInvoice,
    IssueInvoiceUseCase,
    generate_invoice_document,
)

__all__ = [
    # Use Cases
    "GenerateInvoiceDocumentUseCase",
    "generate_invoice_document",
    "IssueInvoiceUseCase",
    "IssuedInvoice",
    # Service factories
    "get_invoice_validator",
    "get_invoice_renderer",
    "get_invoice_document_service",
    "get_invoice_xml_generator",
    "get_invoice_builder",
    "reset_services",
]
