"""Row builders shared by the service tests.

Rows mimic what RealDictCursor returns for the tables in db/schema.sql.
"""

from datetime import datetime, timezone
from decimal import Decimal
from uuid import uuid4

import pytest


NOW = datetime(2024, 6, 1, 10, 30, tzinfo=timezone.utc)


def make_party_row(**overrides) -> dict:
    row = {
        "id": uuid4(),
        "name": "Ravi",
        "phone": "9999900000",
        "place": "Kochi",
        "created_at": NOW,
        "updated_at": NOW,
    }
    row.update(overrides)
    return row


def make_product_row(**overrides) -> dict:
    row = {
        "id": uuid4(),
        "name": "Product A",
        "sku": "SVAB12",
        "weight": Decimal("500.000"),
        "price": Decimal("100.00"),
        "stock": None,
        "manufacture_date": None,
        "expire_date": None,
        "created_at": NOW,
        "updated_at": NOW,
    }
    row.update(overrides)
    return row


def make_company_row(**overrides) -> dict:
    row = {
        "id": uuid4(),
        "singleton": True,
        "fssai_number": "10012345000123",
        "gst_number": "32ABCDE1234F1Z5",
        "phone_number": "9999900000",
        "alternate_number": None,
        "owner_name": "Anu",
        "email": "owner@example.com",
        "logo": None,
        "password_hash": "$2b$04$hash",
        "created_at": NOW,
        "updated_at": NOW,
    }
    row.update(overrides)
    return row


def echo_insert_row(query, params):
    """
    Fake execute_returning for INSERT INTO invoices: builds the returned row
    from the bound parameters, as Postgres would.
    """
    (
        invoice_id, invoice_number, party_id, party_name, party_phone,
        items, subtotal, tax_mode, tax_rate, tax, discount, total,
        payment_status, created_at, updated_at,
    ) = params
    return [{
        "id": invoice_id,
        "invoice_number": invoice_number,
        "party_id": party_id,
        "party_name": party_name,
        "party_phone": party_phone,
        "items": items.adapted,
        "subtotal": subtotal,
        "tax_mode": tax_mode,
        "tax_rate": tax_rate,
        "tax": tax,
        "discount": discount,
        "total": total,
        "payment_status": payment_status,
        "created_at": created_at,
        "updated_at": updated_at,
    }]


@pytest.fixture
def party_row():
    return make_party_row()


@pytest.fixture
def product_row():
    return make_product_row()


@pytest.fixture
def rows():
    """Row factories and fakes, for tests that need more than one row."""
    class Rows:
        party = staticmethod(make_party_row)
        product = staticmethod(make_product_row)
        company = staticmethod(make_company_row)
        echo_invoice_insert = staticmethod(echo_insert_row)
    return Rows
