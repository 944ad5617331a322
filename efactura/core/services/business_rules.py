"""
Business rule validator.

Re-derives invoice arithmetic from the line items and cross-checks every
caller-supplied amount. Also raises non-blocking warnings for invoices that
are valid but deserve a second look. Assumes the invoice already passed
schema validation.
"""

from datetime import timedelta

from efactura.core.constants import InvoiceType
from efactura.core.entities.invoice import Invoice, is_person
from efactura.core.entities.validation import (
    ValidationIssue,
    ValidationResult,
    ValidationWarning,
)

# Absolute tolerance for every amount comparison
AMOUNT_TOLERANCE = 0.01


def _differs(expected: float, actual: float) -> bool:
    return abs(expected - actual) > AMOUNT_TOLERANCE


class BusinessRuleValidator:
    """
    Arithmetic cross-checks and advisory warnings.

    Errors:
    - CALC_ERROR / VAT_CALC_ERROR: item subtotal or VAT does not match
    - VAT_MISMATCH: breakdown rates differ from the rates used by items
    - VAT_BASE_ERROR / VAT_AMOUNT_ERROR: breakdown sums do not match items
    - SUBTOTAL_ERROR, TOTAL_VAT_ERROR, TOTAL_ERROR: invoice totals

    Warnings never affect validity.
    """

    # Person-customer invoices above this total are flagged for review
    DEFAULT_LARGE_PERSON_TOTAL = 10000.0
    # Due dates further out than this are flagged
    DEFAULT_MAX_PAYMENT_TERM_DAYS = 90

    def __init__(
        self,
        large_person_total: float | None = None,
        max_payment_term_days: int | None = None,
    ):
        self._large_person_total = (
            large_person_total
            if large_person_total is not None
            else self.DEFAULT_LARGE_PERSON_TOTAL
        )
        self._max_payment_term_days = (
            max_payment_term_days
            if max_payment_term_days is not None
            else self.DEFAULT_MAX_PAYMENT_TERM_DAYS
        )

    def validate(self, invoice: Invoice) -> ValidationResult:
        errors: list[ValidationIssue] = []
        errors.extend(self._check_items(invoice))
        errors.extend(self._check_vat_breakdown(invoice))
        errors.extend(self._check_totals(invoice))
        warnings = self._collect_warnings(invoice)
        return ValidationResult.from_findings(errors, warnings)

    def _check_items(self, invoice: Invoice) -> list[ValidationIssue]:
        issues: list[ValidationIssue] = []
        for index, item in enumerate(invoice.items):
            expected_subtotal = item.calculated_subtotal
            if _differs(expected_subtotal, item.subtotal):
                issues.append(
                    ValidationIssue(
                        field=f"items.{index}.subtotal",
                        message=(
                            f"Subtotal incorect. Așteptat: {expected_subtotal:.2f}, "
                            f"Primit: {item.subtotal:.2f}"
                        ),
                        code="CALC_ERROR",
                    )
                )

            expected_vat = item.calculated_vat
            if _differs(expected_vat, item.vat_amount):
                issues.append(
                    ValidationIssue(
                        field=f"items.{index}.vat_amount",
                        message=(
                            f"TVA incorect. Așteptat: {expected_vat:.2f}, "
                            f"Primit: {item.vat_amount:.2f}"
                        ),
                        code="VAT_CALC_ERROR",
                    )
                )
        return issues

    def _check_vat_breakdown(self, invoice: Invoice) -> list[ValidationIssue]:
        """Exactly one breakdown entry per item rate, with matching sums."""
        expected: dict[float, tuple[float, float]] = {}
        for item in invoice.items:
            base, amount = expected.get(item.vat_rate, (0.0, 0.0))
            expected[item.vat_rate] = (base + item.subtotal, amount + item.vat_amount)

        issues: list[ValidationIssue] = []
        seen: set[float] = set()
        for entry in invoice.vat_breakdown:
            if entry.rate in seen:
                issues.append(
                    ValidationIssue(
                        field="vat_breakdown",
                        message=f"Rată TVA {entry.rate:g}% apare de mai multe ori",
                        code="VAT_MISMATCH",
                    )
                )
                continue
            seen.add(entry.rate)

            if entry.rate not in expected:
                issues.append(
                    ValidationIssue(
                        field="vat_breakdown",
                        message=f"Rată TVA {entry.rate:g}% nu se găsește în articole",
                        code="VAT_MISMATCH",
                    )
                )
                continue

            base, amount = expected[entry.rate]
            if _differs(base, entry.base):
                issues.append(
                    ValidationIssue(
                        field="vat_breakdown",
                        message=f"Bază TVA incorectă pentru rata {entry.rate:g}%",
                        code="VAT_BASE_ERROR",
                    )
                )
            if _differs(amount, entry.amount):
                issues.append(
                    ValidationIssue(
                        field="vat_breakdown",
                        message=f"Sumă TVA incorectă pentru rata {entry.rate:g}%",
                        code="VAT_AMOUNT_ERROR",
                    )
                )

        for rate in expected:
            if rate not in seen:
                issues.append(
                    ValidationIssue(
                        field="vat_breakdown",
                        message=f"Rata TVA {rate:g}% din articole lipsește din defalcare",
                        code="VAT_MISMATCH",
                    )
                )
        return issues

    def _check_totals(self, invoice: Invoice) -> list[ValidationIssue]:
        issues: list[ValidationIssue] = []

        items_subtotal = sum(item.subtotal for item in invoice.items)
        if _differs(items_subtotal, invoice.subtotal):
            issues.append(
                ValidationIssue(
                    field="subtotal", message="Subtotal factură incorect", code="SUBTOTAL_ERROR"
                )
            )

        items_vat = sum(item.vat_amount for item in invoice.items)
        if _differs(items_vat, invoice.total_vat):
            issues.append(
                ValidationIssue(
                    field="total_vat", message="Total TVA incorect", code="TOTAL_VAT_ERROR"
                )
            )

        expected_total = invoice.subtotal + invoice.total_vat - (invoice.total_discount or 0.0)
        if _differs(expected_total, invoice.total):
            issues.append(
                ValidationIssue(field="total", message="Total factură incorect", code="TOTAL_ERROR")
            )
        return issues

    def _collect_warnings(self, invoice: Invoice) -> list[ValidationWarning]:
        warnings: list[ValidationWarning] = []

        if invoice.invoice_type == InvoiceType.FACTURA.value and not invoice.payment_method:
            warnings.append(
                ValidationWarning(
                    field="payment_method", message="Metoda de plată nu este specificată"
                )
            )

        if is_person(invoice.customer) and invoice.total > self._large_person_total:
            warnings.append(
                ValidationWarning(
                    field="customer",
                    message="Factură mare pentru persoană fizică - verificați datele",
                )
            )

        if invoice.issue_date and invoice.due_date:
            limit = invoice.issue_date + timedelta(days=self._max_payment_term_days)
            if invoice.due_date > limit:
                warnings.append(
                    ValidationWarning(
                        field="due_date",
                        message=(
                            f"Termen de plată mai mare de {self._max_payment_term_days} zile"
                        ),
                    )
                )
        return warnings
