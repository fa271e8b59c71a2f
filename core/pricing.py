"""
Invoice pricing.

Pure functions, no I/O: the invoice service resolves parties and products
first and passes plain values in here. Money is Decimal quantized to two
places with ROUND_HALF_UP.

    line_total = quantity * unit_price * (1 - discount_percent / 100)
    subtotal   = sum(line_total)
    total      = subtotal + tax
"""

from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable
from uuid import UUID

from core.models.invoice import InvoiceLineItem, TaxMode

TWO_PLACES = Decimal("0.01")
HUNDRED = Decimal(100)
ZERO = Decimal(0)
# Amounts are stored as NUMERIC(12, 2)
MAX_AMOUNT = Decimal("9999999999.99")


def quantize_money(value: Decimal | int | str) -> Decimal:
    """Round to two decimal places, halves away from zero."""
    return Decimal(value).quantize(TWO_PLACES, rounding=ROUND_HALF_UP)


def clamp_discount(percent: Decimal | int | None) -> Decimal:
    """Discount percent limited to [0, 100]; None means no discount."""
    if percent is None:
        return ZERO
    return min(HUNDRED, max(ZERO, Decimal(percent)))


@dataclass(frozen=True)
class PricedLine:
    """A line after pricing, before it is embedded in an invoice."""

    product_id: UUID
    name: str
    quantity: int
    unit_price: Decimal
    discount_percent: Decimal
    gross: Decimal
    discount_amount: Decimal
    line_total: Decimal

    def to_line_item(self) -> InvoiceLineItem:
        return InvoiceLineItem(
            product_id=self.product_id,
            name=self.name,
            quantity=self.quantity,
            unit_price=self.unit_price,
            discount_percent=self.discount_percent,
            line_total=self.line_total,
        )


@dataclass(frozen=True)
class InvoiceTotals:
    subtotal: Decimal
    discount: Decimal
    tax_mode: TaxMode
    tax_rate: Decimal | None
    tax: Decimal
    total: Decimal


def price_line(
    product_id: UUID,
    name: str,
    quantity: int,
    unit_price: Decimal,
    discount_percent: Decimal | None = None,
) -> PricedLine:
    """
    Price one line.

    Raises:
        ValueError: If quantity is not positive or unit price is negative
    """
    if quantity < 1:
        raise ValueError(f"Quantity must be a positive integer, got {quantity}")
    unit_price = Decimal(unit_price)
    if unit_price < 0:
        raise ValueError(f"Unit price must not be negative, got {unit_price}")

    discount = clamp_discount(discount_percent)
    gross = quantize_money(quantity * unit_price)
    line_total = quantize_money(gross - gross * discount / HUNDRED)

    return PricedLine(
        product_id=product_id,
        name=name,
        quantity=quantity,
        unit_price=unit_price,
        discount_percent=discount,
        gross=gross,
        discount_amount=gross - line_total,
        line_total=line_total,
    )


def compute_tax(subtotal: Decimal, tax: Decimal, mode: TaxMode) -> tuple[Decimal | None, Decimal]:
    """
    Resolve the request's tax figure into (rate, amount).

    FLAT: tax is the amount, rate is None.
    PERCENT: tax is the rate, amount is subtotal * rate / 100.
    """
    if tax < 0:
        raise ValueError(f"Tax must not be negative, got {tax}")
    if mode == TaxMode.PERCENT:
        rate = Decimal(tax)
        if rate > HUNDRED:
            raise ValueError(f"Tax rate must not exceed 100 percent, got {rate}")
        return rate, quantize_money(subtotal * rate / HUNDRED)
    return None, quantize_money(tax)


def total_invoice(lines: Iterable[PricedLine], tax: Decimal, tax_mode: TaxMode) -> InvoiceTotals:
    """Aggregate priced lines and apply tax."""
    lines = list(lines)
    subtotal = sum((line.line_total for line in lines), ZERO)
    discount = sum((line.discount_amount for line in lines), ZERO)
    tax_rate, tax_amount = compute_tax(subtotal, tax, tax_mode)
    total = subtotal + tax_amount

    for label, amount in (
        ("Subtotal", subtotal), ("Discount", discount), ("Tax", tax_amount), ("Total", total),
    ):
        if amount > MAX_AMOUNT:
            raise ValueError(f"{label} {quantize_money(amount)} exceeds the largest invoice amount {MAX_AMOUNT}")

    return InvoiceTotals(
        subtotal=quantize_money(subtotal),
        discount=quantize_money(discount),
        tax_mode=tax_mode,
        tax_rate=tax_rate,
        tax=tax_amount,
        total=quantize_money(total),
    )


def format_invoice_number(sequence: int, prefix: str = "INV-", width: int = 5) -> str:
    """'INV-00001' style number for a 1-based sequence value."""
    if sequence < 1:
        raise ValueError(f"Invoice sequence starts at 1, got {sequence}")
    return f"{prefix}{sequence:0{width}d}"
