"""Unit tests for InvoiceDocumentService with a stub renderer."""

import base64

from efactura.core.interfaces import IInvoiceDocumentRenderer
from efactura.core.services.invoice_document_service import (
    InvoiceDocumentResult,
    InvoiceDocumentService,
)


class FakeRenderer(IInvoiceDocumentRenderer):
    def __init__(self):
        self.rendered = []

    def render(self, invoice) -> bytes:
        self.rendered.append(invoice)
        return b"%PDF-1.4 fake"


class TestInvoiceDocumentService:
    def test_wraps_renderer_output(self, valid_invoice):
        renderer = FakeRenderer()
        result = InvoiceDocumentService(renderer=renderer).render(valid_invoice)

        assert renderer.rendered == [valid_invoice]
        assert result.pdf_bytes == b"%PDF-1.4 fake"
        assert result.file_size == len(b"%PDF-1.4 fake")

    def test_filename_uses_formatted_number(self, valid_invoice):
        result = InvoiceDocumentService(renderer=FakeRenderer()).render(valid_invoice)
        assert result.invoice_number == "PMT000042"
        assert result.filename == "Factura_PMT000042.pdf"

    def test_does_not_validate(self, valid_invoice):
        broken = valid_invoice.model_copy(update={"supplier": None, "items": []})
        result = InvoiceDocumentService(renderer=FakeRenderer()).render(broken)
        assert result.file_size > 0


class TestInvoiceDocumentResult:
    def test_to_base64(self):
        result = InvoiceDocumentResult(
            pdf_bytes=b"abc", invoice_number="A000001", filename="f.pdf", file_size=3
        )
        assert result.to_base64() == "YWJj"
        assert base64.b64decode(result.to_base64()) == b"abc"
