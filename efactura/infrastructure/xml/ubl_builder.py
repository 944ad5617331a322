"""
UBL 2.1 XML generator for Romanian e-Factura with CIUS-RO customization.

Produces the Invoice document uploaded to ANAF. Invoices are validated
first; an invalid invoice never produces XML.

Reference:
- UBL 2.1: https://docs.oasis-open.org/ubl/os-UBL-2.1/UBL-2.1.html
- CIUS-RO: https://mfinante.gov.ro/web/efactura/informatii-tehnice
"""

from decimal import Decimal

from lxml import etree

from efactura.config import get_logger
from efactura.core.constants import (
    COUNTY_CODES,
    DEFAULT_UNIT_CODE,
    DOMESTIC_CURRENCY,
    INVOICE_TYPE_CODES,
    PAYMENT_MEANS_CODES,
    PAYMENT_MEANS_UNSPECIFIED,
    UNIT_CODES,
    tax_category_code,
)
from efactura.core.entities.invoice import (
    Address,
    CompanyDetails,
    Invoice,
    InvoiceItem,
    PersonDetails,
    is_company,
)
from efactura.core.exceptions import InvoiceValidationError
from efactura.core.interfaces import IInvoiceXmlGenerator
from efactura.core.services.invoice_number import format_invoice_number
from efactura.core.services.invoice_validator import InvoiceValidatorService

logger = get_logger(__name__)

# UBL 2.1 Namespaces
NAMESPACES = {
    "ubl": "urn:oasis:names:specification:ubl:schema:xsd:Invoice-2",
    "cbc": "urn:oasis:names:specification:ubl:schema:xsd:CommonBasicComponents-2",
    "cac": "urn:oasis:names:specification:ubl:schema:xsd:CommonAggregateComponents-2",
}

UBL_VERSION_ID = "2.1"
# CIUS-RO Customization ID (version 1.0.1)
CIUS_RO_CUSTOMIZATION_ID = "urn:cen.eu:en16931:2017#compliant#urn:efactura.mfinante.ro:CIUS-RO:1.0.1"

_COUNTY_BY_NAME = {name: code for code, name in COUNTY_CODES.items()}


def _cbc(tag: str) -> str:
    return f"{{{NAMESPACES['cbc']}}}{tag}"


def _cac(tag: str) -> str:
    return f"{{{NAMESPACES['cac']}}}{tag}"


def _add_cbc(
    parent: etree._Element, tag: str, text: object | None = None, **attribs: str
) -> etree._Element:
    """Add CommonBasicComponents element with optional text and attributes."""
    elem = etree.SubElement(parent, _cbc(tag))
    if text is not None:
        elem.text = str(text)
    for key, value in attribs.items():
        elem.set(key, value)
    return elem


def _add_cac(parent: etree._Element, tag: str) -> etree._Element:
    return etree.SubElement(parent, _cac(tag))


def _format_amount(amount: float) -> str:
    """Format monetary amount with 2 decimal places."""
    return f"{Decimal(str(amount)):.2f}"


def _format_quantity(quantity: float) -> str:
    """Format quantity with up to 6 decimal places."""
    return f"{Decimal(str(quantity)):.6f}".rstrip("0").rstrip(".")


def _format_percent(percent: float) -> str:
    return f"{Decimal(str(percent)):.2f}"


def _county_subentity(county: str) -> str:
    """ISO 3166-2 code required by CIUS-RO, e.g. "Cluj" -> "RO-CJ"."""
    code = _COUNTY_BY_NAME.get(county)
    return f"RO-{code}" if code else county


def _numeric_cif(cif: str) -> str:
    cif = cif.strip()
    if cif.upper().startswith("RO"):
        cif = cif[2:]
    return cif.strip()


class UblInvoiceXmlGenerator(IInvoiceXmlGenerator):
    """
    Build UBL 2.1 Invoice XML compliant with Romanian CIUS-RO.

    Usage:
        generator = UblInvoiceXmlGenerator()
        xml_bytes = generator.generate(invoice)
    """

    def __init__(self, validator: InvoiceValidatorService | None = None):
        self._validator = validator or InvoiceValidatorService()

    def generate(self, invoice: Invoice) -> bytes:
        """
        Generate the complete UBL 2.1 Invoice XML.

        Returns:
            XML document encoded as UTF-8, with declaration

        Raises:
            InvoiceValidationError: If the invoice fails validation
        """
        invoice_number = format_invoice_number(invoice.series, invoice.number)
        result = self._validator.validate(invoice)
        if not result.valid:
            raise InvoiceValidationError(result.errors, invoice_number=invoice_number)

        root = self._create_root()
        self._add_document_metadata(root, invoice, invoice_number)
        self._add_billing_reference(root, invoice)
        self._add_party(_add_cac(root, "AccountingSupplierParty"), invoice.supplier)
        self._add_party(_add_cac(root, "AccountingCustomerParty"), invoice.customer)
        self._add_payment_means(root, invoice)
        self._add_payment_terms(root, invoice)
        self._add_exchange_rate(root, invoice)
        self._add_tax_total(root, invoice)
        self._add_legal_monetary_total(root, invoice)
        for index, item in enumerate(invoice.items, 1):
            self._add_invoice_line(root, invoice, index, item)

        xml = etree.tostring(root, pretty_print=True, xml_declaration=True, encoding="UTF-8")
        logger.info(
            "invoice_xml_generated",
            invoice_number=invoice_number,
            lines=invoice.items_count,
            size_bytes=len(xml),
        )
        return xml

    @staticmethod
    def _create_root() -> etree._Element:
        """Create Invoice root element with namespaces."""
        nsmap = {
            None: NAMESPACES["ubl"],
            "cac": NAMESPACES["cac"],
            "cbc": NAMESPACES["cbc"],
        }
        return etree.Element(f"{{{NAMESPACES['ubl']}}}Invoice", nsmap=nsmap)

    @staticmethod
    def _add_document_metadata(root: etree._Element, invoice: Invoice, invoice_number: str) -> None:
        _add_cbc(root, "UBLVersionID", UBL_VERSION_ID)
        _add_cbc(root, "CustomizationID", CIUS_RO_CUSTOMIZATION_ID)
        _add_cbc(root, "ID", invoice_number)
        _add_cbc(root, "IssueDate", invoice.issue_date.isoformat())
        _add_cbc(root, "DueDate", invoice.due_date.isoformat())
        _add_cbc(root, "InvoiceTypeCode", INVOICE_TYPE_CODES[invoice.invoice_type])
        if invoice.notes:
            _add_cbc(root, "Note", invoice.notes)
        _add_cbc(root, "DocumentCurrencyCode", invoice.currency)

    @staticmethod
    def _add_billing_reference(root: etree._Element, invoice: Invoice) -> None:
        """Reference the reversed invoice on STORNO documents."""
        if not (invoice.is_storno and invoice.storno_reference):
            return
        reference = _add_cac(root, "BillingReference")
        document = _add_cac(reference, "InvoiceDocumentReference")
        _add_cbc(document, "ID", invoice.storno_reference)

    @staticmethod
    def _add_postal_address(parent: etree._Element, address: Address) -> None:
        postal = _add_cac(parent, "PostalAddress")
        _add_cbc(postal, "StreetName", address.street_line)
        _add_cbc(postal, "CityName", address.city)
        _add_cbc(postal, "PostalZone", address.postal_code)
        _add_cbc(postal, "CountrySubentity", _county_subentity(address.county))
        country = _add_cac(postal, "Country")
        _add_cbc(country, "IdentificationCode", address.country or "RO")

    def _add_party(self, parent: etree._Element, party: CompanyDetails | PersonDetails) -> None:
        """Add a cac:Party with the elements in UBL schema order."""
        node = _add_cac(parent, "Party")

        party_name = _add_cac(node, "PartyName")
        _add_cbc(party_name, "Name", party.name)

        self._add_postal_address(node, party.address)

        if is_company(party):
            cif = _numeric_cif(party.cif)
            tax_scheme = _add_cac(node, "PartyTaxScheme")
            _add_cbc(tax_scheme, "CompanyID", f"RO{cif}" if party.vat_payer else cif)
            scheme = _add_cac(tax_scheme, "TaxScheme")
            _add_cbc(scheme, "ID", "VAT")

        legal = _add_cac(node, "PartyLegalEntity")
        _add_cbc(legal, "RegistrationName", party.name)
        if is_company(party):
            _add_cbc(legal, "CompanyID", party.reg_com or _numeric_cif(party.cif))
        elif party.cnp:
            _add_cbc(legal, "CompanyID", party.cnp)

        if party.phone or party.email:
            contact = _add_cac(node, "Contact")
            if party.phone:
                _add_cbc(contact, "Telephone", party.phone)
            if party.email:
                _add_cbc(contact, "ElectronicMail", party.email)

        if not is_company(party):
            first_name, _, family_name = party.name.partition(" ")
            person = _add_cac(node, "Person")
            _add_cbc(person, "FirstName", first_name)
            _add_cbc(person, "FamilyName", family_name)

    @staticmethod
    def _add_payment_means(root: etree._Element, invoice: Invoice) -> None:
        if not invoice.payment_method:
            return
        means = _add_cac(root, "PaymentMeans")
        _add_cbc(
            means,
            "PaymentMeansCode",
            PAYMENT_MEANS_CODES.get(invoice.payment_method, PAYMENT_MEANS_UNSPECIFIED),
        )
        if invoice.payment_reference:
            _add_cbc(means, "PaymentID", invoice.payment_reference)
        if invoice.supplier.bank_accounts:
            account = invoice.supplier.bank_accounts[0]
            financial = _add_cac(means, "PayeeFinancialAccount")
            _add_cbc(financial, "ID", account.iban.replace(" ", "").upper())
            _add_cbc(financial, "Name", account.bank_name)

    @staticmethod
    def _add_payment_terms(root: etree._Element, invoice: Invoice) -> None:
        terms = _add_cac(root, "PaymentTerms")
        _add_cbc(terms, "Note", f"Termen de plată: {invoice.payment_term_days} zile")

    @staticmethod
    def _add_exchange_rate(root: etree._Element, invoice: Invoice) -> None:
        if not invoice.is_foreign_currency or invoice.exchange_rate is None:
            return
        rate = _add_cac(root, "TaxExchangeRate")
        _add_cbc(rate, "SourceCurrencyCode", invoice.currency)
        _add_cbc(rate, "TargetCurrencyCode", DOMESTIC_CURRENCY)
        _add_cbc(rate, "CalculationRate", f"{invoice.exchange_rate:.4f}")

    @staticmethod
    def _add_tax_category(parent: etree._Element, tag: str, rate: float) -> None:
        category = _add_cac(parent, tag)
        _add_cbc(category, "ID", tax_category_code(rate))
        _add_cbc(category, "Percent", _format_percent(rate))
        scheme = _add_cac(category, "TaxScheme")
        _add_cbc(scheme, "ID", "VAT")

    def _add_tax_total(self, root: etree._Element, invoice: Invoice) -> None:
        currency = invoice.currency
        tax_total = _add_cac(root, "TaxTotal")
        _add_cbc(tax_total, "TaxAmount", _format_amount(invoice.total_vat), currencyID=currency)

        for entry in invoice.vat_breakdown:
            subtotal = _add_cac(tax_total, "TaxSubtotal")
            _add_cbc(subtotal, "TaxableAmount", _format_amount(entry.base), currencyID=currency)
            _add_cbc(subtotal, "TaxAmount", _format_amount(entry.amount), currencyID=currency)
            self._add_tax_category(subtotal, "TaxCategory", entry.rate)

    @staticmethod
    def _add_legal_monetary_total(root: etree._Element, invoice: Invoice) -> None:
        currency = invoice.currency
        totals = _add_cac(root, "LegalMonetaryTotal")
        _add_cbc(totals, "LineExtensionAmount", _format_amount(invoice.subtotal), currencyID=currency)
        _add_cbc(totals, "TaxExclusiveAmount", _format_amount(invoice.subtotal), currencyID=currency)
        _add_cbc(totals, "TaxInclusiveAmount", _format_amount(invoice.total), currencyID=currency)
        if invoice.total_discount:
            _add_cbc(
                totals,
                "AllowanceTotalAmount",
                _format_amount(invoice.total_discount),
                currencyID=currency,
            )
        _add_cbc(totals, "PayableAmount", _format_amount(invoice.total), currencyID=currency)

    def _add_invoice_line(
        self, root: etree._Element, invoice: Invoice, line_id: int, item: InvoiceItem
    ) -> None:
        currency = invoice.currency
        line = _add_cac(root, "InvoiceLine")
        _add_cbc(line, "ID", line_id)
        _add_cbc(
            line,
            "InvoicedQuantity",
            _format_quantity(item.quantity),
            unitCode=UNIT_CODES.get(item.unit, DEFAULT_UNIT_CODE),
        )
        _add_cbc(line, "LineExtensionAmount", _format_amount(item.subtotal), currencyID=currency)

        if item.discount is not None:
            allowance = _add_cac(line, "AllowanceCharge")
            _add_cbc(allowance, "ChargeIndicator", "false")
            _add_cbc(allowance, "AllowanceChargeReason", item.discount.reason or "Discount")
            _add_cbc(allowance, "Amount", _format_amount(item.discount_value), currencyID=currency)

        node = _add_cac(line, "Item")
        _add_cbc(node, "Description", item.description or item.name)
        _add_cbc(node, "Name", item.name)
        if item.code:
            sellers_id = _add_cac(node, "SellersItemIdentification")
            _add_cbc(sellers_id, "ID", item.code)
        self._add_tax_category(node, "ClassifiedTaxCategory", item.vat_rate)

        price = _add_cac(line, "Price")
        _add_cbc(price, "PriceAmount", _format_amount(item.unit_price), currencyID=currency)
