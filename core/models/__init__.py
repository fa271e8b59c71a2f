"""Core domain models."""

from core.models.party import Party, PartyCreate, PartySummary
from core.models.product import Product, ProductCreate, ProductReplace
from core.models.invoice import (
    Invoice, InvoiceCreate, InvoiceLineItem, InlineProduct, LineItemRequest,
    PaymentStatus, PaymentStatusUpdate, TaxMode,
)
from core.models.company import Company, CompanyCreate, CompanyUpdate

__all__ = [
    # Party
    "Party", "PartyCreate", "PartySummary",
    # Product
    "Product", "ProductCreate", "ProductReplace",
    # Invoice
    "Invoice", "InvoiceCreate", "InvoiceLineItem", "InlineProduct", "LineItemRequest",
    "PaymentStatus", "PaymentStatusUpdate", "TaxMode",
    # Company
    "Company", "CompanyCreate", "CompanyUpdate",
]
