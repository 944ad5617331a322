"""
Unit tests for invoice entities.

Tests:
- Customer variant selection (company vs person)
- Date and numeric coercion
- Derived properties
"""

from datetime import date

import pytest
from pydantic import ValidationError

from efactura.core.constants import InvoiceType, PaymentMethod
from efactura.core.entities import (
    Address,
    CompanyDetails,
    Discount,
    Invoice,
    InvoiceItem,
    PersonDetails,
    is_company,
    is_person,
)


class TestCustomerVariant:
    def test_dict_with_cif_is_company(self):
        invoice = Invoice(customer={"name": "Construct Expert SRL", "cif": "14399840"})
        assert isinstance(invoice.customer, CompanyDetails)
        assert is_company(invoice.customer)
        assert not is_person(invoice.customer)

    def test_dict_without_cif_is_person(self):
        invoice = Invoice(customer={"name": "Ion Popescu", "cnp": "1960101123456"})
        assert isinstance(invoice.customer, PersonDetails)
        assert is_person(invoice.customer)

    def test_explicit_kind_wins(self):
        invoice = Invoice(customer={"kind": "person", "name": "Ion Popescu", "cif": "x"})
        assert isinstance(invoice.customer, PersonDetails)

    def test_model_instances_are_kept(self, person_customer):
        invoice = Invoice(customer=person_customer)
        assert invoice.customer == person_customer
        assert is_person(invoice.customer)

    def test_dump_round_trip_keeps_variant(self, valid_invoice):
        restored = Invoice.model_validate(valid_invoice.model_dump())
        assert is_company(restored.customer)

    def test_none_is_neither(self):
        assert not is_company(None)
        assert not is_person(None)


class TestCoercion:
    @pytest.mark.parametrize(
        "value", ["2026-01-15", "15.01.2026", "15/01/2026", "15-01-2026"]
    )
    def test_date_formats(self, value):
        assert Invoice(issue_date=value).issue_date == date(2026, 1, 15)

    def test_unparseable_date_becomes_none(self):
        assert Invoice(issue_date="mâine").issue_date is None

    def test_blank_date_becomes_none(self):
        assert Invoice(due_date="  ").due_date is None

    def test_numeric_strings(self):
        item = InvoiceItem(quantity="2", unit_price="1,250.50", vat_rate=None)
        assert item.quantity == 2.0
        assert item.unit_price == 1250.5
        assert item.vat_rate == 0.0

    def test_non_numeric_string_rejected(self):
        with pytest.raises(ValidationError):
            InvoiceItem(quantity="două")

    def test_enum_members_accepted(self):
        invoice = Invoice(invoice_type=InvoiceType.STORNO, payment_method=PaymentMethod.CARD)
        assert invoice.invoice_type == "STORNO"
        assert invoice.payment_method == "CARD"

    def test_strings_are_stripped(self):
        invoice = Invoice(series=" PMT ", currency=None)
        assert invoice.series == "PMT"
        assert invoice.currency == ""

    def test_address_none_fields(self):
        address = Address(street=None, postal_code=400114)
        assert address.street == ""
        assert address.postal_code == "400114"


class TestDerivedProperties:
    def test_payment_term_days(self):
        invoice = Invoice(issue_date="2026-01-01", due_date="2026-01-31")
        assert invoice.payment_term_days == 30

    def test_payment_term_unknown(self):
        assert Invoice(issue_date="2026-01-01").payment_term_days is None

    def test_is_storno(self):
        assert Invoice(invoice_type="STORNO").is_storno
        assert not Invoice().is_storno

    def test_is_foreign_currency(self):
        assert Invoice(currency="EUR").is_foreign_currency
        assert not Invoice().is_foreign_currency

    def test_items_count(self, valid_invoice):
        assert valid_invoice.items_count == 1

    def test_address_lines(self, address):
        assert address.street_line == "Strada Memorandumului 28"
        assert address.locality_line == "400114 Cluj-Napoca, Cluj"

    def test_item_calculations(self, valid_item):
        assert valid_item.calculated_subtotal == 200
        assert valid_item.calculated_vat == pytest.approx(38)

    def test_discount_amount_preferred(self, valid_item):
        item = valid_item.model_copy(update={"discount": Discount(amount=15, percentage=50)})
        assert item.discount_value == 15

    def test_discount_percentage(self, valid_item):
        item = valid_item.model_copy(update={"discount": Discount(percentage=10)})
        assert item.discount_value == pytest.approx(20)

    def test_no_discount(self, valid_item):
        assert valid_item.discount_value == 0.0
