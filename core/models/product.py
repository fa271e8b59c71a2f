"""Product catalog domain models.

Prices are decimals in the billing currency, two places.
Weight is in grams.
"""

from datetime import date, datetime
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, Field, model_validator


class ProductCreate(BaseModel):
    """Data required to create a product. SKU is generated when omitted."""

    name: str = Field(..., min_length=1, max_length=255)
    sku: str | None = Field(None, min_length=1, max_length=32)
    weight: Decimal | None = Field(None, ge=0, max_digits=12, decimal_places=3)
    price: Decimal = Field(..., ge=0, max_digits=12, decimal_places=2)
    stock: int | None = Field(None, ge=0)
    manufacture_date: date | None = None
    expire_date: date | None = None

    @model_validator(mode="after")
    def check_dates(self) -> "ProductCreate":
        """Expiry cannot precede manufacture."""
        if (
            self.manufacture_date is not None
            and self.expire_date is not None
            and self.expire_date < self.manufacture_date
        ):
            raise ValueError("expire_date must not be before manufacture_date")
        return self


class ProductReplace(ProductCreate):
    """
    Full replacement of a product.

    Every field is overwritten; omitted optional fields become null.
    An omitted sku keeps the stored one.
    """


class Product(BaseModel):
    """Full product entity as stored."""

    id: UUID
    name: str
    sku: str
    weight: Decimal | None
    price: Decimal
    stock: int | None
    manufacture_date: date | None
    expire_date: date | None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}

    @property
    def weight_label(self) -> str:
        """Weight for display: grams below a kilogram, kilograms above."""
        if self.weight is None:
            return "-"
        if self.weight < 1000:
            return f"{self.weight.normalize():f}g"
        return f"{(self.weight / 1000).normalize():f}kg"
