"""
Fpdf2 implementation of invoice document rendering.

Builds an A4 Romanian invoice: colored header band, title, supplier and
customer panels, dates, line-item table, totals with the amount in words,
payment details and signature area. Vertical placement is driven by
PageCursor values from the layout module; fpdf2's automatic page breaking
is disabled.
"""

from datetime import date

from fpdf import FPDF
from fpdf.enums import XPos, YPos

from efactura.config import get_logger
from efactura.config.settings import PdfSettings, get_settings
from efactura.core.constants import DOCUMENT_TITLES, PAYMENT_METHOD_LABELS
from efactura.core.entities.invoice import (
    CompanyDetails,
    Invoice,
    PersonDetails,
    is_company,
)
from efactura.core.interfaces import IInvoiceDocumentRenderer
from efactura.core.services.invoice_number import format_invoice_number
from efactura.core.services.number_words import number_to_words
from efactura.infrastructure.pdf.layout import (
    PageCursor,
    PageGeometry,
    advance,
    layout_rows,
    reserve,
)

logger = get_logger(__name__)

PAGE_WIDTH = 210.0
LINE_HEIGHT = 5.0
ROW_HEIGHT = 7.0
TABLE_HEADER_HEIGHT = 8.0
NAME_MAX_CHARS = 40
CELL_FONT_SIZE = 8.0
MIN_CELL_FONT_SIZE = 5.5

TABLE_COLUMNS = (
    ("Nr.", 8, "C"),
    ("Denumire", 52, "L"),
    ("UM", 12, "C"),
    ("Cant.", 16, "R"),
    ("Preț unit.", 22, "R"),
    ("Valoare", 22, "R"),
    ("TVA %", 13, "R"),
    ("TVA", 18, "R"),
    ("Total", 17, "R"),
)
# Free-text columns may be cut to fit; amounts are only ever shrunk
TEXT_COLUMNS = frozenset({1, 2})

ROW_SHADE = (248, 248, 248)
PANEL_FILL = (245, 245, 245)
TABLE_HEADER_FILL = (50, 50, 50)

UNICODE_FAMILY = "InvoiceFont"
CORE_FAMILY = "Helvetica"

# Romanian letters missing from the core fonts' Latin-1 encoding
_TRANSLITERATION = str.maketrans(
    {
        "ă": "a",
        "Ă": "A",
        "ș": "s",
        "ş": "s",
        "Ș": "S",
        "Ş": "S",
        "ț": "t",
        "ţ": "t",
        "Ț": "T",
        "Ţ": "T",
    }
)


def _to_core_font_text(text: str) -> str:
    """Map text onto the Latin-1 repertoire of fpdf2's core fonts."""
    return text.translate(_TRANSLITERATION).encode("latin-1", "replace").decode("latin-1")


def _format_date(value: date | None) -> str:
    return value.strftime("%d.%m.%Y") if value else "-"


def _amount_in_words(total: float) -> str:
    """Spell the total; amounts outside the words range are shown as a figure."""
    try:
        if total < 0:
            return f"minus {number_to_words(-total)}"
        return number_to_words(total)
    except (ValueError, OverflowError) as e:
        logger.warning("amount_in_words_unavailable", total=total, error=str(e))
        return f"{total:.2f} lei"


# ---------------------------------------------------------------------------
# Custom FPDF subclass with page-number footer
# ---------------------------------------------------------------------------


class _InvoicePdf(FPDF):
    """FPDF subclass that stamps every page with its number."""

    def __init__(self) -> None:
        super().__init__(orientation="P", unit="mm", format="A4")
        self._stamp_family = CORE_FAMILY
        self._footer_text = ""

    def configure_footer(self, family: str, footer_text: str) -> None:
        self._stamp_family = family
        self._footer_text = footer_text

    # fpdf2 calls this automatically at the bottom of each page.
    def footer(self) -> None:
        self.set_y(-12)
        self.set_font(self._stamp_family, "", 8)
        self.set_text_color(100, 100, 100)
        if self._footer_text:
            self.cell(0, 5, self._footer_text, align="L")
            self.set_x(self.l_margin)
        self.cell(0, 5, f"Pagina {self.page_no()} din {{nb}}", align="R")
        self.set_text_color(0, 0, 0)


class Fpdf2InvoiceRenderer(IInvoiceDocumentRenderer):
    """Renders Romanian invoices to PDF bytes using fpdf2."""

    def __init__(self, pdf_settings: PdfSettings | None = None) -> None:
        if pdf_settings is None:
            pdf_settings = get_settings().pdf
        self._settings = pdf_settings
        self._margin = pdf_settings.page_margin
        self._content_width = PAGE_WIDTH - 2 * self._margin
        self._geometry = PageGeometry(top_margin=self._margin)
        self._unicode_font_loaded = False

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def render(self, invoice: Invoice) -> bytes:
        """Render the invoice into PDF bytes. Does not validate."""
        self._unicode_font_loaded = False
        pdf = _InvoicePdf()
        self._maybe_load_unicode_font(pdf)
        pdf.configure_footer(self._family, self._text(self._settings.footer_text))

        pdf.alias_nb_pages()
        pdf.set_auto_page_break(auto=False)
        pdf.set_margins(self._margin, self._margin, self._margin)
        pdf.set_title(f"Factura {format_invoice_number(invoice.series, invoice.number)}")
        if invoice.supplier is not None:
            pdf.set_author(invoice.supplier.name)
        pdf.add_page()

        cursor = PageCursor(page=1, y=self._margin)
        cursor = self._render_header(pdf, invoice, cursor)
        cursor = self._render_title(pdf, invoice, cursor)
        cursor = self._render_parties(pdf, invoice, cursor)
        cursor = self._render_dates(pdf, invoice, cursor)
        cursor = self._render_items_table(pdf, invoice, cursor)
        cursor = self._render_totals(pdf, invoice, cursor)
        cursor = self._render_payment_details(pdf, invoice, cursor)
        self._render_signatures(pdf, invoice, cursor)

        return bytes(pdf.output())

    # ------------------------------------------------------------------
    # Fonts
    # ------------------------------------------------------------------

    @property
    def _family(self) -> str:
        return UNICODE_FAMILY if self._unicode_font_loaded else CORE_FAMILY

    def _maybe_load_unicode_font(self, pdf: FPDF) -> None:
        """Register the configured TTF font so diacritics render as-is.

        Without a font path, or when loading fails, the core Helvetica
        font is used and Romanian letters are transliterated.
        """
        font_path = self._settings.font_path
        if font_path is None:
            return
        bold_path = self._settings.bold_font_path or font_path
        try:
            pdf.add_font(UNICODE_FAMILY, "", str(font_path))
            pdf.add_font(UNICODE_FAMILY, "B", str(bold_path))
            self._unicode_font_loaded = True
        except Exception as e:
            logger.warning("invoice_font_load_failed", font_path=str(font_path), error=str(e))
            self._unicode_font_loaded = False

    def _text(self, text: str | None) -> str:
        if not text:
            return ""
        if self._unicode_font_loaded:
            return text
        return _to_core_font_text(text)

    def _fit(self, pdf: FPDF, text: str, width: float) -> str:
        """Trim *text* so it fits in *width* at the current font."""
        text = self._text(text)
        while text and pdf.get_string_width(text) > width:
            text = text[:-1]
        return text

    @staticmethod
    def _shrink_to_fit(pdf: FPDF, text: str, width: float) -> None:
        """Step the font size down until *text* fits or the minimum is reached."""
        size = CELL_FONT_SIZE
        pdf.set_font_size(size)
        while size > MIN_CELL_FONT_SIZE and pdf.get_string_width(text) > width:
            size -= 0.5
            pdf.set_font_size(size)

    # ------------------------------------------------------------------
    # Layout helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _move_to(pdf: FPDF, cursor: PageCursor) -> None:
        while pdf.page < cursor.page:
            pdf.add_page()
        pdf.set_y(cursor.y)

    def _place(self, pdf: FPDF, cursor: PageCursor, height: float) -> PageCursor:
        """Reserve a block and move the PDF there."""
        cursor = reserve(cursor, height, self._geometry)
        self._move_to(pdf, cursor)
        return cursor

    # ------------------------------------------------------------------
    # Sections
    # ------------------------------------------------------------------

    def _render_header(self, pdf: FPDF, invoice: Invoice, cursor: PageCursor) -> PageCursor:
        """Colored band with supplier name and formatted invoice number."""
        band_height = 18.0
        cursor = self._place(pdf, cursor, band_height)

        pdf.set_fill_color(*self._settings.header_color)
        pdf.rect(self._margin, cursor.y, self._content_width, band_height, style="F")
        pdf.set_text_color(*self._settings.header_text_color)

        number_text = format_invoice_number(invoice.series, invoice.number)
        pdf.set_font(self._family, "B", 12)
        number_width = pdf.get_string_width(number_text) + 4

        pdf.set_font(self._family, "B", 14)
        supplier_name = invoice.supplier.name if invoice.supplier else ""
        name_width = self._content_width - number_width - 8
        pdf.set_xy(self._margin + 4, cursor.y + 4)
        pdf.cell(name_width, 10, self._fit(pdf, supplier_name, name_width))

        pdf.set_font(self._family, "B", 12)
        pdf.set_xy(self._margin + self._content_width - number_width - 4, cursor.y + 4)
        pdf.cell(number_width, 10, number_text, align="R")

        pdf.set_text_color(0, 0, 0)
        return advance(cursor, band_height + 6)

    def _render_title(self, pdf: FPDF, invoice: Invoice, cursor: PageCursor) -> PageCursor:
        """Centered document title and series/number subtitle."""
        cursor = self._place(pdf, cursor, 16)
        title = DOCUMENT_TITLES.get(invoice.invoice_type, DOCUMENT_TITLES["FACTURA"])

        pdf.set_font(self._family, "B", 18)
        pdf.cell(
            self._content_width, 9, self._text(title), align="C",
            new_x=XPos.LMARGIN, new_y=YPos.NEXT,
        )
        pdf.set_font(self._family, "", 11)
        pdf.cell(
            self._content_width, 6,
            self._text(f"Seria {invoice.series} Nr. {invoice.number}"), align="C",
        )
        return advance(cursor, 20)

    def _party_lines(self, party: CompanyDetails | PersonDetails | None) -> list[str]:
        if party is None:
            return []
        lines = [party.name]
        if is_company(party):
            if party.cif:
                lines.append(f"CUI: {party.cif}")
            if party.reg_com:
                lines.append(f"Reg. Com.: {party.reg_com}")
        elif party.cnp:
            lines.append(f"CNP: {party.cnp}")
        if party.address is not None:
            lines.append(party.address.street_line)
            lines.append(party.address.locality_line)
        return lines

    def _render_parties(self, pdf: FPDF, invoice: Invoice, cursor: PageCursor) -> PageCursor:
        """Two boxed panels side by side: FURNIZOR and CLIENT."""
        gap = 10.0
        panel_width = (self._content_width - gap) / 2
        panels = [
            ("FURNIZOR:", self._party_lines(invoice.supplier)),
            ("CLIENT:", self._party_lines(invoice.customer)),
        ]
        longest = max(len(lines) for _, lines in panels)
        panel_height = max(40.0, 12 + longest * LINE_HEIGHT + 4)
        cursor = self._place(pdf, cursor, panel_height)

        pdf.set_fill_color(*PANEL_FILL)
        pdf.set_draw_color(160, 160, 160)
        for index, (label, lines) in enumerate(panels):
            x = self._margin + index * (panel_width + gap)
            pdf.rect(x, cursor.y, panel_width, panel_height, style="DF")

            pdf.set_xy(x + 4, cursor.y + 3)
            pdf.set_font(self._family, "B", 10)
            pdf.cell(panel_width - 8, 6, label)

            y = cursor.y + 11
            for line_index, line in enumerate(lines):
                pdf.set_font(self._family, "B" if line_index == 0 else "", 9)
                pdf.set_xy(x + 4, y)
                pdf.cell(panel_width - 8, LINE_HEIGHT, self._fit(pdf, line, panel_width - 8))
                y += LINE_HEIGHT

        pdf.set_draw_color(0, 0, 0)
        return advance(cursor, panel_height + 6)

    def _render_dates(self, pdf: FPDF, invoice: Invoice, cursor: PageCursor) -> PageCursor:
        lines = [
            f"Data emiterii: {_format_date(invoice.issue_date)}",
            f"Data scadenței: {_format_date(invoice.due_date)}",
        ]
        if invoice.is_storno and invoice.storno_reference:
            lines.append(f"Stornează factura: {invoice.storno_reference}")

        height = len(lines) * LINE_HEIGHT
        cursor = self._place(pdf, cursor, height)
        pdf.set_font(self._family, "", 10)
        for line in lines:
            pdf.cell(0, LINE_HEIGHT, self._text(line), new_x=XPos.LMARGIN, new_y=YPos.NEXT)
        return advance(cursor, height + 6)

    def _render_table_header(self, pdf: FPDF) -> None:
        pdf.set_font(self._family, "B", 8)
        pdf.set_fill_color(*TABLE_HEADER_FILL)
        pdf.set_text_color(255, 255, 255)
        for header, width, _ in TABLE_COLUMNS:
            pdf.cell(width, TABLE_HEADER_HEIGHT, self._text(header), border=1, fill=True, align="C")
        pdf.set_text_color(0, 0, 0)

    def _render_items_table(self, pdf: FPDF, invoice: Invoice, cursor: PageCursor) -> PageCursor:
        """Ruled item table; rows continue on new pages without a repeated header."""
        # Keep the header together with at least the first row
        cursor = self._place(pdf, cursor, TABLE_HEADER_HEIGHT + ROW_HEIGHT)
        self._render_table_header(pdf)
        cursor = advance(cursor, TABLE_HEADER_HEIGHT)

        positions = layout_rows(cursor, len(invoice.items), ROW_HEIGHT, self._geometry)
        pdf.set_font(self._family, "", CELL_FONT_SIZE)
        for index, (item, row) in enumerate(zip(invoice.items, positions)):
            self._move_to(pdf, row)
            fill = index % 2 == 0
            if fill:
                pdf.set_fill_color(*ROW_SHADE)
            values = (
                str(index + 1),
                item.name[:NAME_MAX_CHARS],
                item.unit,
                f"{item.quantity:.2f}",
                f"{item.unit_price:.2f}",
                f"{item.subtotal:.2f}",
                f"{item.vat_rate:.0f}%",
                f"{item.vat_amount:.2f}",
                f"{item.total:.2f}",
            )
            for column, (value, (_, width, align)) in enumerate(zip(values, TABLE_COLUMNS)):
                text = self._text(value)
                self._shrink_to_fit(pdf, text, width - 1)
                if column in TEXT_COLUMNS:
                    text = self._fit(pdf, text, width - 1)
                pdf.cell(width, ROW_HEIGHT, text, border=1, fill=fill, align=align)
        pdf.set_font_size(CELL_FONT_SIZE)

        if positions:
            cursor = advance(positions[-1], ROW_HEIGHT)
        return advance(cursor, 6)

    def _render_totals(self, pdf: FPDF, invoice: Invoice, cursor: PageCursor) -> PageCursor:
        """Subtotal, VAT per rate, discount, ruled bold total, amount in words."""
        currency = invoice.currency
        lines = [("Subtotal (fără TVA):", f"{invoice.subtotal:.2f} {currency}")]
        for entry in invoice.vat_breakdown:
            lines.append((f"TVA {entry.rate:g}%:", f"{entry.amount:.2f} {currency}"))
        if invoice.total_discount:
            lines.append(("Discount:", f"-{invoice.total_discount:.2f} {currency}"))

        height = len(lines) * LINE_HEIGHT + 3 + 8 + 4 + LINE_HEIGHT
        cursor = self._place(pdf, cursor, height)

        label_width, value_width = 60.0, 40.0
        label_x = self._margin + self._content_width - label_width - value_width

        pdf.set_font(self._family, "", 10)
        y = cursor.y
        for label, value in lines:
            pdf.set_xy(label_x, y)
            pdf.cell(label_width, LINE_HEIGHT, self._text(label))
            pdf.cell(value_width, LINE_HEIGHT, value, align="R")
            y += LINE_HEIGHT

        y += 1
        pdf.line(label_x, y, self._margin + self._content_width, y)
        y += 2

        pdf.set_font(self._family, "B", 12)
        pdf.set_xy(label_x, y)
        pdf.cell(label_width, 8, self._text("TOTAL DE PLATĂ:"))
        pdf.cell(value_width, 8, f"{invoice.total:.2f} {currency}", align="R")
        y += 8 + 4

        pdf.set_font(self._family, "", 9)
        pdf.set_xy(self._margin, y)
        words = f"Suma în litere: {_amount_in_words(invoice.total)}"
        pdf.cell(self._content_width, LINE_HEIGHT, self._fit(pdf, words, self._content_width))
        return advance(cursor, height + 6)

    def _render_payment_details(
        self, pdf: FPDF, invoice: Invoice, cursor: PageCursor
    ) -> PageCursor:
        """Supplier bank accounts and the payment method label."""
        accounts = invoice.supplier.bank_accounts if invoice.supplier else []
        if not accounts and not invoice.payment_method:
            return cursor

        lines: list[tuple[str, str]] = []
        if accounts:
            lines.append(("B", "Date bancare:"))
            for account in accounts:
                lines.append(("", f"{account.bank_name}: {account.iban} ({account.currency})"))
        if invoice.payment_method:
            label = PAYMENT_METHOD_LABELS.get(invoice.payment_method, invoice.payment_method)
            lines.append(("", f"Modalitate de plată: {label}"))

        height = len(lines) * LINE_HEIGHT
        cursor = self._place(pdf, cursor, height)
        for style, line in lines:
            pdf.set_font(self._family, style, 10)
            pdf.cell(0, LINE_HEIGHT, self._text(line), new_x=XPos.LMARGIN, new_y=YPos.NEXT)
        return advance(cursor, height + 8)

    def _render_signatures(self, pdf: FPDF, invoice: Invoice, cursor: PageCursor) -> PageCursor:
        """Supplier and customer signature lines, then the notes line."""
        height = 26.0 + (LINE_HEIGHT + 2 if invoice.notes else 0)
        cursor = self._place(pdf, cursor, height)

        column_width = (self._content_width - 20) / 2
        pdf.set_font(self._family, "", 9)
        for index, label in enumerate(("Furnizor:", "Client:")):
            x = self._margin + index * (column_width + 20)
            pdf.set_xy(x, cursor.y)
            pdf.cell(column_width, LINE_HEIGHT, label)
            pdf.line(x, cursor.y + 15, x + column_width, cursor.y + 15)
            pdf.set_xy(x, cursor.y + 16)
            pdf.cell(column_width, LINE_HEIGHT, self._text("Semnătura și ștampila"), align="C")

        if invoice.notes:
            pdf.set_font(self._family, "", 8)
            pdf.set_xy(self._margin, cursor.y + 26)
            pdf.cell(
                self._content_width, LINE_HEIGHT,
                self._fit(pdf, invoice.notes, self._content_width), align="C",
            )
        return advance(cursor, height)
