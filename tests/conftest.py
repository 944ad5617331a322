"""Pytest configuration and fixtures."""

from collections.abc import Generator
from datetime import date, timedelta

import pytest

from efactura.application.services import reset_services
from efactura.config.settings import reset_settings
from efactura.core.entities import (
    Address,
    BankAccount,
    CompanyDetails,
    Invoice,
    InvoiceItem,
    PersonDetails,
    VatBreakdownEntry,
)

# Checksum-valid identifiers used across the suite
SUPPLIER_CIF = "RO18547290"
CUSTOMER_CIF = "14399840"
PERSON_CNP = "1960101123456"
SUPPLIER_IBAN = "RO49AAAA1B31007593840000"


@pytest.fixture(autouse=True)
def clean_singletons() -> Generator[None, None, None]:
    """Start every test with fresh settings and service singletons."""
    reset_settings()
    reset_services()
    yield
    reset_settings()
    reset_services()


@pytest.fixture
def address() -> Address:
    return Address(
        street="Strada Memorandumului",
        number="28",
        city="Cluj-Napoca",
        county="Cluj",
        postal_code="400114",
    )


@pytest.fixture
def supplier(address: Address) -> CompanyDetails:
    """Issuing company with one bank account."""
    return CompanyDetails(
        name="Ceramica Design SRL",
        cif=SUPPLIER_CIF,
        reg_com="J12/1234/2020",
        address=address,
        email="contact@ceramicadesign.ro",
        phone="0264123456",
        bank_accounts=[
            BankAccount(iban=SUPPLIER_IBAN, bank_name="Banca Transilvania", currency="RON")
        ],
        vat_payer=True,
    )


@pytest.fixture
def company_customer() -> CompanyDetails:
    return CompanyDetails(
        name="Construct Expert SRL",
        cif=CUSTOMER_CIF,
        address=Address(
            street="Bulevardul Unirii",
            number="10",
            city="București",
            county="București",
            postal_code="030833",
        ),
        vat_payer=False,
    )


@pytest.fixture
def person_customer() -> PersonDetails:
    return PersonDetails(
        name="Ion Popescu",
        cnp=PERSON_CNP,
        address=Address(
            street="Strada Florilor",
            number="5",
            city="Brașov",
            county="Brașov",
            postal_code="500001",
        ),
        phone="+40722123456",
    )


@pytest.fixture
def valid_item() -> InvoiceItem:
    """2 x 100 RON at 19% VAT."""
    return InvoiceItem(
        name="Gresie porțelanată 60x60",
        code="GR-6060",
        quantity=2,
        unit="mp",
        unit_price=100,
        vat_rate=19,
        vat_amount=38,
        subtotal=200,
        total=238,
    )


@pytest.fixture
def valid_invoice(
    supplier: CompanyDetails, company_customer: CompanyDetails, valid_item: InvoiceItem
) -> Invoice:
    """Schema-valid and arithmetically consistent invoice."""
    today = date.today()
    return Invoice(
        series="PMT",
        number=42,
        issue_date=today,
        due_date=today + timedelta(days=30),
        invoice_type="FACTURA",
        supplier=supplier,
        customer=company_customer,
        items=[valid_item],
        currency="RON",
        subtotal=200,
        vat_breakdown=[VatBreakdownEntry(rate=19, base=200, amount=38)],
        total_vat=38,
        total=238,
        payment_method="BANK_TRANSFER",
        payment_status="UNPAID",
    )


@pytest.fixture
def person_invoice(valid_invoice: Invoice, person_customer: PersonDetails) -> Invoice:
    return valid_invoice.model_copy(update={"customer": person_customer})
