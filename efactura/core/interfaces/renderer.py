"""
Abstract interfaces for invoice document output.

The PDF renderer and the UBL XML generator live in infrastructure; core
services depend only on these contracts.
"""

from abc import ABC, abstractmethod

from efactura.core.entities.invoice import Invoice


class IInvoiceDocumentRenderer(ABC):
    """Interface for printable invoice document renderers."""

    @abstractmethod
    def render(self, invoice: Invoice) -> bytes:
        """Render the invoice into document bytes.

        Implementations do not validate; they render whatever amounts the
        invoice carries.
        """
        pass


class IInvoiceXmlGenerator(ABC):
    """Interface for ANAF e-Factura XML generators."""

    @abstractmethod
    def generate(self, invoice: Invoice) -> bytes:
        """Serialize the invoice as UTF-8 encoded XML."""
        pass
