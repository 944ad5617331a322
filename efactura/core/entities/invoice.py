"""
Invoice domain entities with Pydantic v2 validation.

Entities are deliberately permissive: an invoice can be constructed in an
invalid state and is only judged by the schema and business-rule validators.
Numeric fields coerce None/empty to 0.0 so downstream arithmetic never sees
None.
"""

from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Annotated, Any, Literal

from pydantic import BaseModel, Discriminator, Field, Tag, field_validator

from efactura.core.constants import DOMESTIC_CURRENCY, InvoiceType


def _coerce_float(v: Any) -> Any:
    """Convert None/empty to 0.0; leave unparseable input for pydantic to reject."""
    if v is None or v == "":
        return 0.0
    if isinstance(v, bool):
        return v
    if isinstance(v, (int, float)):
        return float(v)
    if isinstance(v, Decimal):
        return float(v)
    try:
        s = str(v).strip().replace(",", "")
        if s.lower() in {"none", "nan", "null", ""}:
            return 0.0
        return float(s)
    except (ValueError, TypeError, AttributeError):
        return v


def _enum_value(v: Any) -> Any:
    if isinstance(v, Enum):
        return v.value
    return v


class Address(BaseModel):
    """Structured Romanian postal address."""

    street: str = ""
    number: str = ""
    city: str = ""
    county: str = ""  # Județ, full name (e.g. "Cluj")
    postal_code: str = ""
    country: str = "RO"

    @field_validator("street", "number", "city", "county", "postal_code", mode="before")
    @classmethod
    def coerce_string(cls, v: Any) -> Any:
        """Ensure string fields are never None."""
        if v is None:
            return ""
        if isinstance(v, int):
            return str(v)
        return v.strip() if isinstance(v, str) else v

    @property
    def street_line(self) -> str:
        return f"{self.street} {self.number}".strip()

    @property
    def locality_line(self) -> str:
        return f"{self.postal_code} {self.city}, {self.county}".strip()


class BankAccount(BaseModel):
    """Supplier bank account."""

    iban: str = ""
    bank_name: str = ""
    currency: str = DOMESTIC_CURRENCY


class CompanyDetails(BaseModel):
    """A business party, identified by its CIF."""

    kind: Literal["company"] = "company"

    name: str = ""
    cif: str = ""  # CUI, optionally prefixed with "RO"
    reg_com: str | None = None  # J40/123/2024

    address: Address | None = None

    email: str | None = None
    phone: str | None = None

    bank_accounts: list[BankAccount] = Field(default_factory=list)

    social_capital: float | None = None
    vat_payer: bool | None = None

    @field_validator("name", "cif", mode="before")
    @classmethod
    def coerce_string(cls, v: Any) -> Any:
        if v is None:
            return ""
        return v.strip() if isinstance(v, str) else v


class PersonDetails(BaseModel):
    """A private individual; the CNP is optional."""

    kind: Literal["person"] = "person"

    name: str = ""
    cnp: str | None = None

    address: Address | None = None

    email: str | None = None
    phone: str | None = None

    @field_validator("name", mode="before")
    @classmethod
    def coerce_string(cls, v: Any) -> Any:
        if v is None:
            return ""
        return v.strip() if isinstance(v, str) else v


def _party_kind(value: Any) -> str | None:
    """Pick the customer variant: explicit ``kind`` first, then presence of a CIF."""
    if isinstance(value, dict):
        kind = value.get("kind")
        if kind:
            return kind
        return "company" if "cif" in value else "person"
    return getattr(value, "kind", None)


Customer = Annotated[
    Annotated[CompanyDetails, Tag("company")] | Annotated[PersonDetails, Tag("person")],
    Discriminator(_party_kind),
]


def is_company(party: CompanyDetails | PersonDetails | None) -> bool:
    """True when the party is a company (has a tax id)."""
    return isinstance(party, CompanyDetails)


def is_person(party: CompanyDetails | PersonDetails | None) -> bool:
    """True when the party is a private individual."""
    return isinstance(party, PersonDetails)


class Discount(BaseModel):
    """Line discount; percentage and amount may both be given."""

    percentage: float | None = None
    amount: float | None = None
    reason: str | None = None


class InvoiceItem(BaseModel):
    """
    Invoice line item.

    ``subtotal``, ``vat_amount`` and ``total`` are supplied by the caller; the
    business-rule validator checks them against quantity, price and rate.
    """

    name: str = ""
    code: str | None = None  # SKU
    description: str | None = None

    quantity: float = 0.0
    unit: str = ""
    unit_price: float = 0.0  # Without VAT

    vat_rate: float = 0.0
    vat_amount: float = 0.0

    subtotal: float = 0.0  # quantity * unit_price
    total: float = 0.0  # subtotal + vat_amount

    discount: Discount | None = None

    @field_validator(
        "quantity", "unit_price", "vat_rate", "vat_amount", "subtotal", "total", mode="before"
    )
    @classmethod
    def coerce_numeric(cls, v: Any) -> Any:
        return _coerce_float(v)

    @field_validator("name", "unit", mode="before")
    @classmethod
    def coerce_string(cls, v: Any) -> Any:
        if v is None:
            return ""
        return v.strip() if isinstance(v, str) else v

    @property
    def calculated_subtotal(self) -> float:
        """Expected subtotal from quantity * unit price."""
        return self.quantity * self.unit_price

    @property
    def calculated_vat(self) -> float:
        """Expected VAT from the stated subtotal and rate."""
        return self.subtotal * (self.vat_rate / 100)

    @property
    def discount_value(self) -> float:
        """Discount in currency units, from the amount or the percentage."""
        if self.discount is None:
            return 0.0
        if self.discount.amount:
            return self.discount.amount
        return self.subtotal * (self.discount.percentage or 0.0) / 100


class VatBreakdownEntry(BaseModel):
    """Per-rate aggregation of taxable base and VAT."""

    rate: float = 0.0
    base: float = 0.0
    amount: float = 0.0

    @field_validator("rate", "base", "amount", mode="before")
    @classmethod
    def coerce_numeric(cls, v: Any) -> Any:
        return _coerce_float(v)


class Invoice(BaseModel):
    """
    Romanian fiscal invoice (root aggregate).

    ``vat_breakdown`` is a denormalized cache of the items, kept consistent by
    the caller and checked by the business-rule validator.
    """

    # Identification
    series: str = ""
    number: int = 0
    issue_date: date | None = None
    due_date: date | None = None

    invoice_type: str = InvoiceType.FACTURA.value
    storno_reference: str | None = None

    # Parties
    supplier: CompanyDetails | None = None
    customer: Customer | None = None

    items: list[InvoiceItem] = Field(default_factory=list)

    # Totals
    currency: str = DOMESTIC_CURRENCY
    exchange_rate: float | None = None

    subtotal: float = 0.0
    total_discount: float | None = None

    vat_breakdown: list[VatBreakdownEntry] = Field(default_factory=list)

    total_vat: float = 0.0
    total: float = 0.0

    # Payment
    payment_method: str | None = None
    payment_status: str | None = None
    payment_reference: str | None = None

    notes: str | None = None
    internal_notes: str | None = None

    # ANAF submission envelope, passed through untouched
    anaf_upload_id: str | None = None
    anaf_status: str | None = None
    anaf_errors: list[str] = Field(default_factory=list)
    anaf_xml: str | None = None

    @field_validator("issue_date", "due_date", mode="before")
    @classmethod
    def coerce_date(cls, v: Any) -> date | None:
        """Convert string to date, accepting ISO format or common formats."""
        if v is None:
            return None
        if isinstance(v, datetime):
            return v.date()
        if isinstance(v, date):
            return v
        if isinstance(v, str):
            v = v.strip()
            if not v or v.lower() in {"none", "null", ""}:
                return None
            for fmt in ("%Y-%m-%d", "%d.%m.%Y", "%d/%m/%Y", "%d-%m-%Y"):
                try:
                    return datetime.strptime(v, fmt).date()
                except ValueError:
                    continue
        return None

    @field_validator("subtotal", "total_vat", "total", mode="before")
    @classmethod
    def coerce_numeric(cls, v: Any) -> Any:
        return _coerce_float(v)

    @field_validator(
        "invoice_type", "payment_method", "payment_status", "anaf_status", mode="before"
    )
    @classmethod
    def coerce_enum(cls, v: Any) -> Any:
        """Accept enum members as well as their string values."""
        return _enum_value(v)

    @field_validator("series", "currency", mode="before")
    @classmethod
    def coerce_string(cls, v: Any) -> Any:
        if v is None:
            return ""
        return v.strip() if isinstance(v, str) else v

    @field_validator("number", mode="before")
    @classmethod
    def coerce_number(cls, v: Any) -> Any:
        if v is None or v == "":
            return 0
        return v

    @property
    def items_count(self) -> int:
        return len(self.items)

    @property
    def is_storno(self) -> bool:
        return self.invoice_type == InvoiceType.STORNO.value

    @property
    def is_foreign_currency(self) -> bool:
        return self.currency != DOMESTIC_CURRENCY

    @property
    def payment_term_days(self) -> int | None:
        """Days between issue and due date, when both are known."""
        if self.issue_date is None or self.due_date is None:
            return None
        return (self.due_date - self.issue_date).days
