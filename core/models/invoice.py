"""Invoice domain models.

Money values are decimals quantized to two places (see core.pricing).
Line items are embedded in the invoice and copy the product's name and
unit price at creation time, as do the party name and phone.
"""

from datetime import datetime
from decimal import Decimal
from enum import Enum
from uuid import UUID

from pydantic import BaseModel, Field, field_validator, model_validator

from core.models.party import PartyCreate, PartySummary


class PaymentStatus(str, Enum):
    """Payment state; the only mutable part of an invoice."""

    PAID = "paid"
    UNPAID = "unpaid"
    PARTIAL = "partial"


class TaxMode(str, Enum):
    """How the request's tax figure is applied to the subtotal."""

    FLAT = "flat"        # tax is an amount added to the subtotal
    PERCENT = "percent"  # tax is a rate; subtotal * rate / 100 is added


# Largest quantity a single line may order
MAX_LINE_QUANTITY = 100_000


def _clamp_percent(value: Decimal | None) -> Decimal | None:
    if value is None:
        return None
    return min(Decimal(100), max(Decimal(0), value))


class InlineProduct(BaseModel):
    """Product created on the fly while building an invoice."""

    name: str = Field(..., min_length=1, max_length=255)
    weight: Decimal | None = Field(None, ge=0, max_digits=12, decimal_places=3)
    price: Decimal = Field(..., ge=0, max_digits=12, decimal_places=2)
    # Default discount for the line when the line gives none
    discount: Decimal | None = None

    @field_validator("discount")
    @classmethod
    def clamp_discount(cls, value: Decimal | None) -> Decimal | None:
        return _clamp_percent(value)


class LineItemRequest(BaseModel):
    """One requested line: an existing product or an inline one."""

    product_id: UUID | None = None
    product: InlineProduct | None = None
    quantity: int = Field(..., ge=1, le=MAX_LINE_QUANTITY)
    discount_percent: Decimal | None = None

    @field_validator("discount_percent")
    @classmethod
    def clamp_discount(cls, value: Decimal | None) -> Decimal | None:
        """Discounts outside 0-100 are clamped, not rejected."""
        return _clamp_percent(value)

    @model_validator(mode="after")
    def require_one_product_reference(self) -> "LineItemRequest":
        """Exactly one of product_id or product must be given."""
        if (self.product_id is None) == (self.product is None):
            raise ValueError("Each item needs exactly one of product_id or product")
        return self


class InvoiceCreate(BaseModel):
    """Cart-like request the invoice builder turns into a stored invoice."""

    party_id: UUID | None = None
    party: PartyCreate | None = None
    items: list[LineItemRequest] = Field(..., min_length=1)
    tax: Decimal = Field(Decimal("0"), ge=0, max_digits=12, decimal_places=2)
    tax_mode: TaxMode | None = None
    payment_status: PaymentStatus = PaymentStatus.UNPAID

    @model_validator(mode="after")
    def require_one_party_reference(self) -> "InvoiceCreate":
        """Exactly one of party_id or party must be given."""
        if (self.party_id is None) == (self.party is None):
            raise ValueError("Invoice needs exactly one of party_id or party")
        return self

    @model_validator(mode="after")
    def check_percent_rate(self) -> "InvoiceCreate":
        """A percentage tax is a rate between 0 and 100."""
        if self.tax_mode == TaxMode.PERCENT and self.tax > 100:
            raise ValueError("Tax rate must not exceed 100 percent")
        return self


class PaymentStatusUpdate(BaseModel):
    """Body of the payment status update."""

    payment_status: PaymentStatus


class InvoiceLineItem(BaseModel):
    """Priced line as embedded in a stored invoice."""

    product_id: UUID
    name: str
    quantity: int = Field(..., ge=1)
    unit_price: Decimal
    discount_percent: Decimal = Decimal("0")
    line_total: Decimal


class Invoice(BaseModel):
    """Full invoice entity as stored."""

    id: UUID
    invoice_number: str
    party_id: UUID
    party_name: str
    party_phone: str
    items: list[InvoiceLineItem]
    subtotal: Decimal
    tax_mode: TaxMode
    tax_rate: Decimal | None = None
    tax: Decimal
    discount: Decimal
    total: Decimal
    payment_status: PaymentStatus
    created_at: datetime
    updated_at: datetime
    # Live party, joined on read; None when the party was deleted
    party: PartySummary | None = None

    model_config = {"from_attributes": True}
