"""API test fixtures: the full app from main.create_app with mocked services."""

from datetime import datetime, timedelta, timezone
from decimal import Decimal
from unittest.mock import Mock
from uuid import uuid4

import pytest
from starlette.testclient import TestClient

from auth.service import AuthService
from auth.session import SessionManager
from auth.types import Session
from core.models import Company, Invoice, Party, Product
from core.services.company_service import CompanyService
from core.services.invoice_service import InvoiceService
from core.services.party_service import PartyService
from core.services.product_service import ProductService
from main import create_app
from utils.timezone import now_utc

NOW = datetime(2024, 6, 1, 10, 30, tzinfo=timezone.utc)


# =============================================================================
# SERVICE FIXTURES
# =============================================================================


@pytest.fixture
def party_service():
    return Mock(spec=PartyService)


@pytest.fixture
def product_service():
    return Mock(spec=ProductService)


@pytest.fixture
def invoice_service():
    return Mock(spec=InvoiceService)


@pytest.fixture
def company_service():
    return Mock(spec=CompanyService)


@pytest.fixture
def services(party_service, product_service, invoice_service, company_service):
    return {
        "party": party_service,
        "product": product_service,
        "invoice": invoice_service,
        "company": company_service,
    }


# =============================================================================
# ENTITY FIXTURES
# =============================================================================


@pytest.fixture
def party():
    return Party(id=uuid4(), name="Ravi", phone="9999900000", place="Kochi", created_at=NOW, updated_at=NOW)


@pytest.fixture
def product():
    return Product(
        id=uuid4(), name="Product A", sku="SVAB12", weight=Decimal("500"), price=Decimal("100.00"),
        stock=None, manufacture_date=None, expire_date=None, created_at=NOW, updated_at=NOW,
    )


@pytest.fixture
def invoice(party, product):
    return Invoice(
        id=uuid4(), invoice_number="INV-00001", party_id=party.id, party_name=party.name,
        party_phone=party.phone,
        items=[{
            "product_id": product.id, "name": product.name, "quantity": 2,
            "unit_price": product.price, "discount_percent": Decimal("10"), "line_total": Decimal("180.00"),
        }],
        subtotal=Decimal("180.00"), tax_mode="flat", tax_rate=None, tax=Decimal("0.00"),
        discount=Decimal("20.00"), total=Decimal("180.00"), payment_status="unpaid",
        created_at=NOW, updated_at=NOW,
        party={"id": party.id, "name": party.name, "phone": party.phone, "place": party.place},
    )


@pytest.fixture
def company(test_company_id):
    return Company(
        id=test_company_id, fssai_number="10012345000123", gst_number=None,
        phone_number="9999900000", alternate_number=None, owner_name="Anu",
        email="owner@example.com", logo=None, created_at=NOW, updated_at=NOW,
    )


# =============================================================================
# AUTH FIXTURES
# =============================================================================


@pytest.fixture
def mock_session_manager(test_company_id):
    """SessionManager that accepts 'test-token' for the test company."""
    now = now_utc()
    mock = Mock(spec=SessionManager)
    mock.validate_session.return_value = Session(
        token="test-token",
        company_id=test_company_id,
        created_at=now,
        expires_at=now + timedelta(hours=24),
        last_activity_at=now,
    )
    return mock


@pytest.fixture
def auth_service():
    return Mock(spec=AuthService)


# =============================================================================
# APP & CLIENT FIXTURES
# =============================================================================


@pytest.fixture
def app(services, mock_session_manager, auth_service):
    return create_app(services, mock_session_manager, auth_service)


@pytest.fixture
def client(app):
    """Authenticated test client."""
    c = TestClient(app, raise_server_exceptions=False)
    c.headers["Authorization"] = "Bearer test-token"
    return c


@pytest.fixture
def unauthed_client(app):
    """Unauthenticated test client (no bearer token)."""
    return TestClient(app, raise_server_exceptions=False)
