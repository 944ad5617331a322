"""Core interfaces (ports) for dependency injection."""

from efactura.core.interfaces.renderer import IInvoiceDocumentRenderer, IInvoiceXmlGenerator

__all__ = [
    "IInvoiceDocumentRenderer",
    "IInvoiceXmlGenerator",
]
