"""
Structural invoice validation driven by declarative rule tables.

Each entity has a RuleSet: per-field rules (required flag, value checks,
nested rule sets, list element rule sets) plus cross-field rules. The
validator walks the whole invoice graph and collects every violation with its
dot path; it never stops at the first failure.
"""

import re
from collections.abc import Callable
from dataclasses import dataclass
from datetime import date
from typing import Any, NamedTuple

from efactura.core.constants import (
    COUNTY_NAMES,
    CURRENCIES,
    DOMESTIC_CURRENCY,
    INVOICE_UNITS,
    VAT_RATES,
    AnafStatus,
    InvoiceType,
    PaymentMethod,
    PaymentStatus,
)
from efactura.core.entities.invoice import Invoice, is_company
from efactura.core.entities.validation import ValidationIssue
from efactura.core.services.identifiers import validate_cif, validate_cnp, validate_iban


class Violation(NamedTuple):
    code: str
    message: str


Check = Callable[[Any], Violation | None]


@dataclass(frozen=True)
class FieldRule:
    """Constraints on one attribute of an entity."""

    field: str
    required: bool = False
    checks: tuple[Check, ...] = ()
    # Rule set for a nested object, or a selector for union-typed fields
    schema: "RuleSet | Callable[[Any], RuleSet] | None" = None
    # Rule set applied to every element of a list field
    each: "RuleSet | None" = None
    min_items: int = 0


@dataclass(frozen=True)
class CrossFieldRule:
    """A constraint spanning several attributes, reported against ``field``."""

    field: str
    check: Callable[[Any], Violation | None]


@dataclass(frozen=True)
class RuleSet:
    name: str
    fields: tuple[FieldRule, ...]
    cross_field: tuple[CrossFieldRule, ...] = ()


# ---------------------------------------------------------------------------
# Check factories
# ---------------------------------------------------------------------------


def min_length(n: int) -> Check:
    def check(value: str) -> Violation | None:
        if len(value) < n:
            return Violation("TOO_SHORT", f"Trebuie să aibă cel puțin {n} caractere")
        return None

    return check


def max_length(n: int) -> Check:
    def check(value: str) -> Violation | None:
        if len(value) > n:
            return Violation("TOO_LONG", f"Poate avea cel mult {n} caractere")
        return None

    return check


def matches(pattern: str, message: str) -> Check:
    regex = re.compile(pattern)

    def check(value: str) -> Violation | None:
        if not regex.fullmatch(value):
            return Violation("INVALID_FORMAT", message)
        return None

    return check


def one_of(allowed: tuple[Any, ...]) -> Check:
    def check(value: Any) -> Violation | None:
        if value not in allowed:
            options = ", ".join(str(a) for a in allowed)
            return Violation("NOT_ALLOWED", f"Valoare nepermisă {value!r}; permise: {options}")
        return None

    return check


def positive() -> Check:
    def check(value: float) -> Violation | None:
        if value <= 0:
            return Violation("NOT_POSITIVE", "Trebuie să fie mai mare decât 0")
        return None

    return check


def at_least(minimum: float) -> Check:
    def check(value: float) -> Violation | None:
        if value < minimum:
            return Violation("BELOW_MINIMUM", f"Trebuie să fie cel puțin {minimum:g}")
        return None

    return check


def at_most(maximum: float) -> Check:
    def check(value: float) -> Violation | None:
        if value > maximum:
            return Violation("ABOVE_MAXIMUM", f"Trebuie să fie cel mult {maximum:g}")
        return None

    return check


def identifier(predicate: Callable[[str], bool], code: str, message: str) -> Check:
    """Wrap an identifier checksum predicate as a field check."""

    def check(value: str) -> Violation | None:
        if not predicate(value):
            return Violation(code, message)
        return None

    return check


def not_in_future() -> Check:
    def check(value: date) -> Violation | None:
        if value > date.today():
            return Violation("FUTURE_DATE", "Data nu poate fi în viitor")
        return None

    return check


def _is_missing(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


ALPHANUMERIC = r"[A-Za-z0-9]+"
POSTAL_CODE = r"[0-9]{6}"
REG_COM = r"J[0-9]{1,2}/[0-9]+/[0-9]{4}"
EMAIL = r"[^@\s]+@[^@\s]+\.[^@\s]+"
PHONE = r"(\+40|0)[0-9]{9}"


# ---------------------------------------------------------------------------
# Rule tables
# ---------------------------------------------------------------------------

ADDRESS_RULES = RuleSet(
    name="address",
    fields=(
        FieldRule("street", required=True),
        FieldRule("number", required=True),
        FieldRule("city", required=True),
        FieldRule("county", required=True, checks=(one_of(COUNTY_NAMES),)),
        FieldRule(
            "postal_code",
            required=True,
            checks=(matches(POSTAL_CODE, "Codul poștal trebuie să aibă exact 6 cifre"),),
        ),
        FieldRule("country"),
    ),
)

BANK_ACCOUNT_RULES = RuleSet(
    name="bank_account",
    fields=(
        FieldRule(
            "iban",
            required=True,
            checks=(identifier(validate_iban, "INVALID_IBAN", "IBAN invalid"),),
        ),
        FieldRule("bank_name", required=True),
        FieldRule("currency", required=True, checks=(one_of(CURRENCIES),)),
    ),
)

_CONTACT_RULES = (
    FieldRule("email", checks=(matches(EMAIL, "Adresă de email invalidă"),)),
    FieldRule("phone", checks=(matches(PHONE, "Număr de telefon invalid"),)),
)

COMPANY_RULES = RuleSet(
    name="company",
    fields=(
        FieldRule("name", required=True, checks=(min_length(3), max_length(200))),
        FieldRule(
            "cif",
            required=True,
            checks=(identifier(validate_cif, "INVALID_CIF", "CIF invalid"),),
        ),
        FieldRule(
            "reg_com",
            checks=(matches(REG_COM, "Număr de înregistrare invalid (format J40/123/2024)"),),
        ),
        FieldRule("address", required=True, schema=ADDRESS_RULES),
        *_CONTACT_RULES,
        FieldRule("bank_accounts", each=BANK_ACCOUNT_RULES),
        FieldRule("social_capital", checks=(positive(),)),
        FieldRule("vat_payer", required=True),
    ),
)

PERSON_RULES = RuleSet(
    name="person",
    fields=(
        FieldRule("name", required=True, checks=(min_length(3), max_length(200))),
        FieldRule("cnp", checks=(identifier(validate_cnp, "INVALID_CNP", "CNP invalid"),)),
        FieldRule("address", required=True, schema=ADDRESS_RULES),
        *_CONTACT_RULES,
    ),
)

DISCOUNT_RULES = RuleSet(
    name="discount",
    fields=(
        FieldRule("percentage", checks=(at_least(0), at_most(100))),
        FieldRule("amount", checks=(at_least(0),)),
    ),
)

ITEM_RULES = RuleSet(
    name="item",
    fields=(
        FieldRule("name", required=True, checks=(max_length(500),)),
        FieldRule("description", checks=(max_length(1000),)),
        FieldRule("quantity", required=True, checks=(positive(),)),
        FieldRule("unit", required=True, checks=(one_of(INVOICE_UNITS),)),
        FieldRule("unit_price", required=True, checks=(at_least(0),)),
        FieldRule("vat_rate", required=True, checks=(one_of(VAT_RATES),)),
        FieldRule("vat_amount", required=True, checks=(at_least(0),)),
        FieldRule("subtotal", required=True, checks=(at_least(0),)),
        FieldRule("total", required=True, checks=(at_least(0),)),
        FieldRule("discount", schema=DISCOUNT_RULES),
    ),
)

VAT_BREAKDOWN_RULES = RuleSet(
    name="vat_breakdown",
    fields=(
        FieldRule("rate", required=True, checks=(one_of(VAT_RATES),)),
        FieldRule("base", required=True, checks=(at_least(0),)),
        FieldRule("amount", required=True, checks=(at_least(0),)),
    ),
)


def _customer_rules(party: Any) -> RuleSet:
    return COMPANY_RULES if is_company(party) else PERSON_RULES


def _due_not_before_issue(invoice: Invoice) -> Violation | None:
    if invoice.issue_date and invoice.due_date and invoice.due_date < invoice.issue_date:
        return Violation("DUE_BEFORE_ISSUE", "Data scadenței este înaintea datei emiterii")
    return None


def _storno_reference(invoice: Invoice) -> Violation | None:
    present = not _is_missing(invoice.storno_reference)
    if invoice.is_storno and not present:
        return Violation(
            "STORNO_REFERENCE_REQUIRED", "Factura storno trebuie să indice factura stornată"
        )
    if present and not invoice.is_storno:
        return Violation(
            "STORNO_REFERENCE_NOT_ALLOWED", "Referința storno se folosește doar pentru STORNO"
        )
    return None


def _exchange_rate(invoice: Invoice) -> Violation | None:
    present = invoice.exchange_rate is not None
    if invoice.currency and invoice.is_foreign_currency and not present:
        return Violation(
            "EXCHANGE_RATE_REQUIRED", f"Cursul de schimb este obligatoriu pentru {invoice.currency}"
        )
    if present and invoice.currency == DOMESTIC_CURRENCY:
        return Violation(
            "EXCHANGE_RATE_NOT_ALLOWED", "Cursul de schimb nu se folosește pentru facturi în RON"
        )
    return None


INVOICE_RULES = RuleSet(
    name="invoice",
    fields=(
        FieldRule(
            "series",
            required=True,
            checks=(
                max_length(10),
                matches(ALPHANUMERIC, "Seria poate conține doar litere și cifre"),
            ),
        ),
        FieldRule("number", required=True, checks=(positive(),)),
        FieldRule("issue_date", required=True, checks=(not_in_future(),)),
        FieldRule("due_date", required=True),
        FieldRule(
            "invoice_type",
            required=True,
            checks=(one_of(tuple(t.value for t in InvoiceType)),),
        ),
        FieldRule("supplier", required=True, schema=COMPANY_RULES),
        FieldRule("customer", required=True, schema=_customer_rules),
        FieldRule("items", required=True, each=ITEM_RULES, min_items=1),
        FieldRule("currency", required=True, checks=(one_of(CURRENCIES),)),
        FieldRule("exchange_rate", checks=(positive(),)),
        FieldRule("subtotal", required=True, checks=(at_least(0),)),
        FieldRule("total_discount", checks=(at_least(0),)),
        FieldRule("vat_breakdown", required=True, each=VAT_BREAKDOWN_RULES),
        FieldRule("total_vat", required=True, checks=(at_least(0),)),
        FieldRule("total", required=True, checks=(at_least(0),)),
        FieldRule("payment_method", checks=(one_of(tuple(m.value for m in PaymentMethod)),)),
        FieldRule("payment_status", checks=(one_of(tuple(s.value for s in PaymentStatus)),)),
        FieldRule("notes", checks=(max_length(2000),)),
        FieldRule("internal_notes", checks=(max_length(2000),)),
        FieldRule("anaf_status", checks=(one_of(tuple(s.value for s in AnafStatus)),)),
    ),
    cross_field=(
        CrossFieldRule("due_date", _due_not_before_issue),
        CrossFieldRule("storno_reference", _storno_reference),
        CrossFieldRule("exchange_rate", _exchange_rate),
    ),
)


class SchemaValidator:
    """Applies a RuleSet tree to an entity and collects every violation."""

    def __init__(self, rules: RuleSet = INVOICE_RULES):
        self._rules = rules

    def validate(self, invoice: Invoice) -> list[ValidationIssue]:
        """Return all structural violations; an empty list means schema-valid."""
        issues: list[ValidationIssue] = []
        self._apply(invoice, self._rules, "", issues)
        return issues

    def _apply(
        self, obj: Any, rules: RuleSet, prefix: str, issues: list[ValidationIssue]
    ) -> None:
        for rule in rules.fields:
            path = f"{prefix}{rule.field}"
            value = getattr(obj, rule.field, None)

            if _is_missing(value):
                if rule.required:
                    issues.append(
                        ValidationIssue(field=path, message="Câmp obligatoriu", code="REQUIRED")
                    )
                continue

            for check in rule.checks:
                violation = check(value)
                if violation is not None:
                    issues.append(
                        ValidationIssue(field=path, message=violation.message, code=violation.code)
                    )

            if rule.schema is not None:
                nested = rule.schema if isinstance(rule.schema, RuleSet) else rule.schema(value)
                self._apply(value, nested, f"{path}.", issues)

            if rule.min_items and len(value) < rule.min_items:
                issues.append(
                    ValidationIssue(
                        field=path,
                        message=f"Sunt necesare cel puțin {rule.min_items} elemente",
                        code="TOO_FEW_ITEMS",
                    )
                )

            if rule.each is not None:
                for index, element in enumerate(value):
                    self._apply(element, rule.each, f"{path}.{index}.", issues)

        for cross in rules.cross_field:
            violation = cross.check(obj)
            if violation is not None:
                issues.append(
                    ValidationIssue(
                        field=f"{prefix}{cross.field}",
                        message=violation.message,
                        code=violation.code,
                    )
                )
