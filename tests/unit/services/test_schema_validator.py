"""
Unit tests for SchemaValidator.

Tests:
- Required fields and dot paths for nested objects and lists
- Identifier checksums for CIF, CNP and IBAN
- Enumerations (county, unit, VAT rate, currency)
- Cross-field rules (due date, storno reference, exchange rate)
- Collection of every violation in one pass
"""

from datetime import date, timedelta

import pytest

from efactura.core.entities import Address, Discount, Invoice
from efactura.core.services.schema_validator import ADDRESS_RULES, SchemaValidator


def _codes_at(issues, field):
    return [issue.code for issue in issues if issue.field == field]


@pytest.fixture
def validator() -> SchemaValidator:
    return SchemaValidator()


class TestValidInvoice:
    def test_company_invoice_has_no_issues(self, validator, valid_invoice):
        assert validator.validate(valid_invoice) == []

    def test_person_invoice_has_no_issues(self, validator, person_invoice):
        assert validator.validate(person_invoice) == []

    def test_person_without_cnp_is_allowed(self, validator, person_invoice):
        customer = person_invoice.customer.model_copy(update={"cnp": None})
        invoice = person_invoice.model_copy(update={"customer": customer})
        assert validator.validate(invoice) == []


class TestRequiredFields:
    """Missing values are reported as REQUIRED at their path."""

    def test_missing_supplier(self, validator, valid_invoice):
        invoice = valid_invoice.model_copy(update={"supplier": None})
        issues = validator.validate(invoice)
        assert _codes_at(issues, "supplier") == ["REQUIRED"]

    def test_missing_customer(self, validator, valid_invoice):
        invoice = valid_invoice.model_copy(update={"customer": None})
        assert _codes_at(validator.validate(invoice), "customer") == ["REQUIRED"]

    def test_blank_series(self, validator, valid_invoice):
        invoice = valid_invoice.model_copy(update={"series": "   "})
        assert _codes_at(validator.validate(invoice), "series") == ["REQUIRED"]

    def test_missing_issue_date(self, validator, valid_invoice):
        invoice = valid_invoice.model_copy(update={"issue_date": None})
        assert _codes_at(validator.validate(invoice), "issue_date") == ["REQUIRED"]

    def test_required_message_is_romanian(self, validator, valid_invoice):
        invoice = valid_invoice.model_copy(update={"supplier": None})
        issue = validator.validate(invoice)[0]
        assert issue.message == "Câmp obligatoriu"

    def test_vat_payer_required_for_companies(self, validator, valid_invoice):
        supplier = valid_invoice.supplier.model_copy(update={"vat_payer": None})
        invoice = valid_invoice.model_copy(update={"supplier": supplier})
        assert _codes_at(validator.validate(invoice), "supplier.vat_payer") == ["REQUIRED"]

    def test_missing_address_street(self, validator, valid_invoice):
        address = valid_invoice.customer.address.model_copy(update={"street": ""})
        customer = valid_invoice.customer.model_copy(update={"address": address})
        invoice = valid_invoice.model_copy(update={"customer": customer})
        assert _codes_at(validator.validate(invoice), "customer.address.street") == ["REQUIRED"]


class TestIdentifiers:
    def test_invalid_supplier_cif(self, validator, valid_invoice):
        supplier = valid_invoice.supplier.model_copy(update={"cif": "RO18547291"})
        invoice = valid_invoice.model_copy(update={"supplier": supplier})
        assert _codes_at(validator.validate(invoice), "supplier.cif") == ["INVALID_CIF"]

    def test_invalid_customer_cif(self, validator, valid_invoice):
        customer = valid_invoice.customer.model_copy(update={"cif": "18"})
        invoice = valid_invoice.model_copy(update={"customer": customer})
        assert _codes_at(validator.validate(invoice), "customer.cif") == ["INVALID_CIF"]

    def test_invalid_person_cnp(self, validator, person_invoice):
        customer = person_invoice.customer.model_copy(update={"cnp": "1960101123457"})
        invoice = person_invoice.model_copy(update={"customer": customer})
        assert _codes_at(validator.validate(invoice), "customer.cnp") == ["INVALID_CNP"]

    def test_invalid_iban_path(self, validator, valid_invoice):
        account = valid_invoice.supplier.bank_accounts[0].model_copy(
            update={"iban": "RO49AAAA1B31007593840001"}
        )
        supplier = valid_invoice.supplier.model_copy(update={"bank_accounts": [account]})
        invoice = valid_invoice.model_copy(update={"supplier": supplier})
        issues = validator.validate(invoice)
        assert _codes_at(issues, "supplier.bank_accounts.0.iban") == ["INVALID_IBAN"]


class TestFormats:
    def test_postal_code_must_be_six_digits(self, validator, valid_invoice):
        address = valid_invoice.supplier.address.model_copy(update={"postal_code": "40011"})
        supplier = valid_invoice.supplier.model_copy(update={"address": address})
        invoice = valid_invoice.model_copy(update={"supplier": supplier})
        issues = validator.validate(invoice)
        assert _codes_at(issues, "supplier.address.postal_code") == ["INVALID_FORMAT"]

    def test_postal_code_rejects_non_ascii_digits(self, validator, valid_invoice):
        address = valid_invoice.supplier.address.model_copy(update={"postal_code": "٤٠٠١١٤"})
        supplier = valid_invoice.supplier.model_copy(update={"address": address})
        invoice = valid_invoice.model_copy(update={"supplier": supplier})
        issues = validator.validate(invoice)
        assert _codes_at(issues, "supplier.address.postal_code") == ["INVALID_FORMAT"]

    def test_unknown_county(self, validator, valid_invoice):
        address = valid_invoice.supplier.address.model_copy(update={"county": "Transilvania"})
        supplier = valid_invoice.supplier.model_copy(update={"address": address})
        invoice = valid_invoice.model_copy(update={"supplier": supplier})
        issues = validator.validate(invoice)
        assert _codes_at(issues, "supplier.address.county") == ["NOT_ALLOWED"]

    def test_invalid_reg_com(self, validator, valid_invoice):
        supplier = valid_invoice.supplier.model_copy(update={"reg_com": "12/1234/2020"})
        invoice = valid_invoice.model_copy(update={"supplier": supplier})
        assert _codes_at(validator.validate(invoice), "supplier.reg_com") == ["INVALID_FORMAT"]

    def test_invalid_email(self, validator, valid_invoice):
        supplier = valid_invoice.supplier.model_copy(update={"email": "contact@"})
        invoice = valid_invoice.model_copy(update={"supplier": supplier})
        assert _codes_at(validator.validate(invoice), "supplier.email") == ["INVALID_FORMAT"]

    def test_invalid_phone(self, validator, person_invoice):
        customer = person_invoice.customer.model_copy(update={"phone": "12345"})
        invoice = person_invoice.model_copy(update={"customer": customer})
        assert _codes_at(validator.validate(invoice), "customer.phone") == ["INVALID_FORMAT"]

    def test_series_with_symbols(self, validator, valid_invoice):
        invoice = valid_invoice.model_copy(update={"series": "PM-T"})
        assert _codes_at(validator.validate(invoice), "series") == ["INVALID_FORMAT"]

    def test_series_too_long(self, validator, valid_invoice):
        invoice = valid_invoice.model_copy(update={"series": "ABCDEFGHIJK"})
        assert _codes_at(validator.validate(invoice), "series") == ["TOO_LONG"]

    def test_short_company_name(self, validator, valid_invoice):
        supplier = valid_invoice.supplier.model_copy(update={"name": "AB"})
        invoice = valid_invoice.model_copy(update={"supplier": supplier})
        assert _codes_at(validator.validate(invoice), "supplier.name") == ["TOO_SHORT"]


class TestItems:
    def test_empty_items(self, validator, valid_invoice):
        invoice = valid_invoice.model_copy(update={"items": []})
        assert _codes_at(validator.validate(invoice), "items") == ["TOO_FEW_ITEMS"]

    def test_zero_quantity(self, validator, valid_invoice, valid_item):
        item = valid_item.model_copy(update={"quantity": 0})
        invoice = valid_invoice.model_copy(update={"items": [item]})
        assert _codes_at(validator.validate(invoice), "items.0.quantity") == ["NOT_POSITIVE"]

    def test_unsupported_vat_rate(self, validator, valid_invoice, valid_item):
        item = valid_item.model_copy(update={"vat_rate": 20})
        invoice = valid_invoice.model_copy(update={"items": [item]})
        assert _codes_at(validator.validate(invoice), "items.0.vat_rate") == ["NOT_ALLOWED"]

    def test_unknown_unit(self, validator, valid_invoice, valid_item):
        item = valid_item.model_copy(update={"unit": "cutie"})
        invoice = valid_invoice.model_copy(update={"items": [item]})
        assert _codes_at(validator.validate(invoice), "items.0.unit") == ["NOT_ALLOWED"]

    def test_second_item_path(self, validator, valid_invoice, valid_item):
        bad = valid_item.model_copy(update={"unit_price": -1})
        invoice = valid_invoice.model_copy(update={"items": [valid_item, bad]})
        issues = validator.validate(invoice)
        assert _codes_at(issues, "items.1.unit_price") == ["BELOW_MINIMUM"]
        assert _codes_at(issues, "items.0.unit_price") == []

    def test_discount_percentage_range(self, validator, valid_invoice, valid_item):
        item = valid_item.model_copy(update={"discount": Discount(percentage=120)})
        invoice = valid_invoice.model_copy(update={"items": [item]})
        issues = validator.validate(invoice)
        assert _codes_at(issues, "items.0.discount.percentage") == ["ABOVE_MAXIMUM"]

    def test_breakdown_rate_must_be_supported(self, validator, valid_invoice):
        entry = valid_invoice.vat_breakdown[0].model_copy(update={"rate": 24})
        invoice = valid_invoice.model_copy(update={"vat_breakdown": [entry]})
        assert _codes_at(validator.validate(invoice), "vat_breakdown.0.rate") == ["NOT_ALLOWED"]


class TestCrossFieldRules:
    def test_due_before_issue(self, validator, valid_invoice):
        invoice = valid_invoice.model_copy(
            update={"due_date": valid_invoice.issue_date - timedelta(days=1)}
        )
        assert _codes_at(validator.validate(invoice), "due_date") == ["DUE_BEFORE_ISSUE"]

    def test_due_on_issue_date_is_fine(self, validator, valid_invoice):
        invoice = valid_invoice.model_copy(update={"due_date": valid_invoice.issue_date})
        assert validator.validate(invoice) == []

    def test_future_issue_date(self, validator, valid_invoice):
        tomorrow = date.today() + timedelta(days=1)
        invoice = valid_invoice.model_copy(
            update={"issue_date": tomorrow, "due_date": tomorrow + timedelta(days=30)}
        )
        assert _codes_at(validator.validate(invoice), "issue_date") == ["FUTURE_DATE"]

    def test_storno_requires_reference(self, validator, valid_invoice):
        invoice = valid_invoice.model_copy(update={"invoice_type": "STORNO"})
        codes = _codes_at(validator.validate(invoice), "storno_reference")
        assert codes == ["STORNO_REFERENCE_REQUIRED"]

    def test_storno_with_reference(self, validator, valid_invoice):
        invoice = valid_invoice.model_copy(
            update={"invoice_type": "STORNO", "storno_reference": "PMT000041"}
        )
        assert validator.validate(invoice) == []

    def test_reference_on_regular_invoice(self, validator, valid_invoice):
        invoice = valid_invoice.model_copy(update={"storno_reference": "PMT000041"})
        codes = _codes_at(validator.validate(invoice), "storno_reference")
        assert codes == ["STORNO_REFERENCE_NOT_ALLOWED"]

    def test_foreign_currency_requires_exchange_rate(self, validator, valid_invoice):
        invoice = valid_invoice.model_copy(update={"currency": "EUR"})
        codes = _codes_at(validator.validate(invoice), "exchange_rate")
        assert codes == ["EXCHANGE_RATE_REQUIRED"]

    def test_foreign_currency_with_exchange_rate(self, validator, valid_invoice):
        invoice = valid_invoice.model_copy(update={"currency": "EUR", "exchange_rate": 4.97})
        assert validator.validate(invoice) == []

    def test_exchange_rate_on_domestic_invoice(self, validator, valid_invoice):
        invoice = valid_invoice.model_copy(update={"exchange_rate": 4.97})
        codes = _codes_at(validator.validate(invoice), "exchange_rate")
        assert codes == ["EXCHANGE_RATE_NOT_ALLOWED"]

    def test_unsupported_currency(self, validator, valid_invoice):
        invoice = valid_invoice.model_copy(update={"currency": "GBP", "exchange_rate": 5.8})
        assert _codes_at(validator.validate(invoice), "currency") == ["NOT_ALLOWED"]


class TestCollectsEverything:
    def test_multiple_issues_reported_together(self, validator, valid_invoice, valid_item):
        supplier = valid_invoice.supplier.model_copy(update={"cif": "18"})
        item = valid_item.model_copy(update={"quantity": -2, "unit": "cutie"})
        invoice = valid_invoice.model_copy(
            update={"supplier": supplier, "items": [item], "series": ""}
        )
        fields = {issue.field for issue in validator.validate(invoice)}
        assert {"supplier.cif", "items.0.quantity", "items.0.unit", "series"} <= fields

    def test_empty_invoice(self, validator):
        issues = validator.validate(Invoice())
        fields = {issue.field for issue in issues}
        assert {"series", "issue_date", "due_date", "supplier", "customer"} <= fields
        assert _codes_at(issues, "items") == ["TOO_FEW_ITEMS"]

    def test_custom_rule_set(self):
        validator = SchemaValidator(rules=ADDRESS_RULES)
        issues = validator.validate(Address(city="Cluj-Napoca", county="Cluj"))
        fields = [issue.field for issue in issues]
        assert fields == ["street", "number", "postal_code"]
