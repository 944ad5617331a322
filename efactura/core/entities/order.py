"""Storefront order data consumed by the invoice builder."""

from pydantic import BaseModel, Field, field_validator

from efactura.core.entities.invoice import Customer


class OrderLine(BaseModel):
    """A purchased product line as recorded by the shop."""

    name: str
    sku: str | None = None
    description: str | None = None
    quantity: float
    price: float  # Unit price without VAT
    unit: str | None = None  # Falls back to the configured default unit
    vat_rate: float | None = None  # Falls back to the configured default rate

    @field_validator("quantity", "price")
    @classmethod
    def non_negative(cls, v: float) -> float:
        if v < 0:
            raise ValueError("must be non-negative")
        return v


class Order(BaseModel):
    """A placed order ready to be invoiced."""

    id: str | None = None
    customer: Customer
    items: list[OrderLine] = Field(default_factory=list)
    payment_method: str | None = None
    payment_status: str | None = None
    payment_reference: str | None = None
    notes: str | None = None
