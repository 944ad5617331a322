"""
Unit tests for BusinessRuleValidator.

Tests:
- Item arithmetic within the 0.01 tolerance
- VAT breakdown consistency
- Invoice totals including discounts
- Advisory warnings
"""

from datetime import timedelta

import pytest

from efactura.core.entities import VatBreakdownEntry
from efactura.core.services.business_rules import BusinessRuleValidator


@pytest.fixture
def rules() -> BusinessRuleValidator:
    return BusinessRuleValidator()


class TestItemArithmetic:
    def test_consistent_invoice_is_valid(self, rules, valid_invoice):
        result = rules.validate(valid_invoice)
        assert result.valid is True
        assert result.errors == []

    def test_difference_within_tolerance_passes(self, rules, valid_invoice, valid_item):
        item = valid_item.model_copy(update={"subtotal": 200.005})
        invoice = valid_invoice.model_copy(update={"items": [item]})
        assert rules.validate(invoice).valid is True

    def test_subtotal_off_by_two_bani(self, rules, valid_invoice, valid_item):
        item = valid_item.model_copy(update={"subtotal": 200.02})
        invoice = valid_invoice.model_copy(update={"items": [item]})
        result = rules.validate(invoice)
        assert result.valid is False
        errors = {(e.field, e.code) for e in result.errors}
        assert ("items.0.subtotal", "CALC_ERROR") in errors

    def test_subtotal_message_shows_amounts(self, rules, valid_invoice, valid_item):
        item = valid_item.model_copy(update={"subtotal": 250})
        invoice = valid_invoice.model_copy(update={"items": [item]})
        error = next(e for e in rules.validate(invoice).errors if e.code == "CALC_ERROR")
        assert "200.00" in error.message
        assert "250.00" in error.message

    def test_wrong_item_vat(self, rules, valid_invoice, valid_item):
        item = valid_item.model_copy(update={"vat_amount": 40})
        invoice = valid_invoice.model_copy(update={"items": [item]})
        errors = {(e.field, e.code) for e in rules.validate(invoice).errors}
        assert ("items.0.vat_amount", "VAT_CALC_ERROR") in errors


class TestVatBreakdown:
    def test_extra_rate(self, rules, valid_invoice):
        breakdown = valid_invoice.vat_breakdown + [VatBreakdownEntry(rate=9, base=0, amount=0)]
        invoice = valid_invoice.model_copy(update={"vat_breakdown": breakdown})
        assert rules.validate(invoice).error_codes == ["VAT_MISMATCH"]

    def test_missing_rate(self, rules, valid_invoice):
        invoice = valid_invoice.model_copy(update={"vat_breakdown": []})
        assert rules.validate(invoice).error_codes == ["VAT_MISMATCH"]

    def test_duplicate_rate(self, rules, valid_invoice):
        breakdown = valid_invoice.vat_breakdown * 2
        invoice = valid_invoice.model_copy(update={"vat_breakdown": breakdown})
        assert rules.validate(invoice).error_codes == ["VAT_MISMATCH"]

    def test_wrong_base(self, rules, valid_invoice):
        breakdown = [VatBreakdownEntry(rate=19, base=210, amount=38)]
        invoice = valid_invoice.model_copy(update={"vat_breakdown": breakdown})
        assert rules.validate(invoice).error_codes == ["VAT_BASE_ERROR"]

    def test_wrong_amount(self, rules, valid_invoice):
        breakdown = [VatBreakdownEntry(rate=19, base=200, amount=40)]
        invoice = valid_invoice.model_copy(update={"vat_breakdown": breakdown})
        assert rules.validate(invoice).error_codes == ["VAT_AMOUNT_ERROR"]

    def test_mixed_rates(self, rules, valid_invoice, valid_item):
        food = valid_item.model_copy(
            update={
                "name": "Adeziv",
                "vat_rate": 9,
                "vat_amount": 18,
                "total": 218,
            }
        )
        invoice = valid_invoice.model_copy(
            update={
                "items": [valid_item, food],
                "subtotal": 400,
                "vat_breakdown": [
                    VatBreakdownEntry(rate=19, base=200, amount=38),
                    VatBreakdownEntry(rate=9, base=200, amount=18),
                ],
                "total_vat": 56,
                "total": 456,
            }
        )
        assert rules.validate(invoice).valid is True


class TestTotals:
    def test_wrong_total(self, rules, valid_invoice):
        invoice = valid_invoice.model_copy(update={"total": 240})
        result = rules.validate(invoice)
        assert result.error_codes == ["TOTAL_ERROR"]
        assert result.errors[0].field == "total"

    def test_wrong_subtotal(self, rules, valid_invoice):
        invoice = valid_invoice.model_copy(update={"subtotal": 210, "total": 248})
        assert rules.validate(invoice).error_codes == ["SUBTOTAL_ERROR"]

    def test_wrong_total_vat(self, rules, valid_invoice):
        invoice = valid_invoice.model_copy(update={"total_vat": 40, "total": 240})
        assert rules.validate(invoice).error_codes == ["TOTAL_VAT_ERROR"]

    def test_discount_is_subtracted(self, rules, valid_invoice):
        invoice = valid_invoice.model_copy(update={"total_discount": 10, "total": 228})
        assert rules.validate(invoice).valid is True

    def test_discount_ignored_in_total(self, rules, valid_invoice):
        invoice = valid_invoice.model_copy(update={"total_discount": 10})
        assert rules.validate(invoice).error_codes == ["TOTAL_ERROR"]


class TestWarnings:
    def test_no_warnings_for_regular_invoice(self, rules, valid_invoice):
        assert rules.validate(valid_invoice).warnings == []

    def test_missing_payment_method(self, rules, valid_invoice):
        invoice = valid_invoice.model_copy(update={"payment_method": None})
        result = rules.validate(invoice)
        assert result.valid is True
        assert [w.field for w in result.warnings] == ["payment_method"]

    def test_proforma_without_payment_method(self, rules, valid_invoice):
        invoice = valid_invoice.model_copy(
            update={"payment_method": None, "invoice_type": "PROFORMA"}
        )
        assert rules.validate(invoice).warnings == []

    def test_large_person_invoice(self, person_invoice):
        rules = BusinessRuleValidator(large_person_total=100)
        result = rules.validate(person_invoice)
        assert result.valid is True
        assert [w.field for w in result.warnings] == ["customer"]

    def test_large_company_invoice_not_flagged(self, valid_invoice):
        rules = BusinessRuleValidator(large_person_total=100)
        assert rules.validate(valid_invoice).warnings == []

    def test_default_person_threshold(self, rules, person_invoice):
        assert rules.validate(person_invoice).warnings == []

    def test_long_payment_term(self, rules, valid_invoice):
        invoice = valid_invoice.model_copy(
            update={"due_date": valid_invoice.issue_date + timedelta(days=120)}
        )
        result = rules.validate(invoice)
        assert [w.field for w in result.warnings] == ["due_date"]
        assert "90" in result.warnings[0].message

    def test_payment_term_at_limit(self, rules, valid_invoice):
        invoice = valid_invoice.model_copy(
            update={"due_date": valid_invoice.issue_date + timedelta(days=90)}
        )
        assert rules.validate(invoice).warnings == []

    def test_custom_payment_term_limit(self, valid_invoice):
        rules = BusinessRuleValidator(max_payment_term_days=14)
        assert [w.field for w in rules.validate(valid_invoice).warnings] == ["due_date"]


class TestIdempotence:
    def test_same_result_twice(self, rules, valid_invoice):
        invoice = valid_invoice.model_copy(update={"total": 240, "payment_method": None})
        assert rules.validate(invoice) == rules.validate(invoice)
