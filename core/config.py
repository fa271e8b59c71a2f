"""Billing configuration."""

from pydantic import BaseModel, Field

from core.models.invoice import TaxMode


class BillingConfig(BaseModel):
    """
    Invoice and catalog settings.

    Defaults reproduce the numbering and SKU formats the mobile clients
    already print ("INV-00001", "SV7K2Q").
    """

    # Invoice numbering
    invoice_number_prefix: str = Field(
        default="INV-",
        description="Prefix of the human-facing invoice number",
        max_length=10,
    )
    invoice_number_width: int = Field(
        default=5,
        description="Zero-padded width of the sequence part",
        ge=1,
        le=12,
    )

    # Tax
    default_tax_mode: TaxMode = Field(
        default=TaxMode.FLAT,
        description="How 'tax' is applied when a request doesn't say",
    )

    # SKU generation
    sku_prefix: str = Field(
        default="SV",
        description="Prefix of generated product SKUs",
        max_length=10,
    )
    sku_random_length: int = Field(
        default=4,
        description="Random alphanumeric characters after the prefix",
        ge=2,
        le=16,
    )
    sku_max_attempts: int = Field(
        default=5,
        description="Inserts to try before a SKU collision is reported",
        ge=1,
        le=20,
    )
