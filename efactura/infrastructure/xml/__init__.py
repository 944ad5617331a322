"""ANAF e-Factura XML generation."""

from efactura.infrastructure.xml.ubl_builder import (
    CIUS_RO_CUSTOMIZATION_ID,
    NAMESPACES,
    UblInvoiceXmlGenerator,
)

__all__ = ["UblInvoiceXmlGenerator", "NAMESPACES", "CIUS_RO_CUSTOMIZATION_ID"]
