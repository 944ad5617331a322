"""
Invoice builder service.

Assembles an arithmetically consistent Invoice from a shop order: item
amounts are rounded to bani, the VAT breakdown and totals are derived from
the rounded items, and defaults come from InvoiceSettings.
"""

from datetime import date, timedelta

from efactura.config import InvoiceSettings, get_logger, get_settings
from efactura.core.constants import InvoiceType, PaymentStatus
from efactura.core.entities.invoice import (
    CompanyDetails,
    Invoice,
    InvoiceItem,
    VatBreakdownEntry,
)
from efactura.core.entities.order import Order, OrderLine

logger = get_logger(__name__)


def _money(value: float) -> float:
    return round(value, 2)


class InvoiceBuilderService:
    """Builds invoices from orders using configured defaults."""

    def __init__(self, settings: InvoiceSettings | None = None):
        self._settings = settings or get_settings().invoice

    def build_item(self, line: OrderLine) -> InvoiceItem:
        """Convert one order line into a priced invoice item."""
        vat_rate = line.vat_rate if line.vat_rate is not None else self._settings.default_vat_rate
        subtotal = _money(line.quantity * line.price)
        vat_amount = _money(subtotal * vat_rate / 100)

        return InvoiceItem(
            name=line.name,
            code=line.sku,
            description=line.description,
            quantity=line.quantity,
            unit=line.unit or self._settings.default_unit,
            unit_price=line.price,
            vat_rate=vat_rate,
            vat_amount=vat_amount,
            subtotal=subtotal,
            total=_money(subtotal + vat_amount),
        )

    @staticmethod
    def vat_breakdown(items: list[InvoiceItem]) -> list[VatBreakdownEntry]:
        """One entry per distinct rate, in order of first appearance."""
        sums: dict[float, tuple[float, float]] = {}
        for item in items:
            base, amount = sums.get(item.vat_rate, (0.0, 0.0))
            sums[item.vat_rate] = (base + item.subtotal, amount + item.vat_amount)

        return [
            VatBreakdownEntry(rate=rate, base=_money(base), amount=_money(amount))
            for rate, (base, amount) in sums.items()
        ]

    def from_order(
        self,
        order: Order,
        supplier: CompanyDetails,
        number: int,
        series: str | None = None,
        issue_date: date | None = None,
    ) -> Invoice:
        """
        Assemble a FACTURA for an order.

        Args:
            order: Placed order with customer and lines
            supplier: Issuing company
            number: Next number in the series
            series: Invoice series, defaults to the configured series
            issue_date: Defaults to today

        Returns:
            Invoice ready for validation
        """
        issue_date = issue_date or date.today()
        items = [self.build_item(line) for line in order.items]
        subtotal = _money(sum(item.subtotal for item in items))
        total_vat = _money(sum(item.vat_amount for item in items))

        invoice = Invoice(
            series=series or self._settings.default_series,
            number=number,
            issue_date=issue_date,
            due_date=issue_date + timedelta(days=self._settings.payment_term_days),
            invoice_type=InvoiceType.FACTURA.value,
            supplier=supplier,
            customer=order.customer,
            items=items,
            currency=self._settings.default_currency,
            subtotal=subtotal,
            vat_breakdown=self.vat_breakdown(items),
            total_vat=total_vat,
            total=_money(subtotal + total_vat),
            payment_method=order.payment_method,
            payment_status=order.payment_status or PaymentStatus.UNPAID.value,
            payment_reference=order.payment_reference,
            notes=order.notes,
        )

        logger.info(
            "invoice_built_from_order",
            order_id=order.id,
            series=invoice.series,
            number=number,
            items_count=len(items),
            total=invoice.total,
        )
        return invoice
