"""
Integration fixtures: real PostgreSQL, schema from db/schema.sql.

The database comes from TEST_DATABASE_URL, or from Vault when VAULT_ADDR is
set. Without either every test in this directory is skipped. Tables are
truncated before each test, so point this at a scratch database.
"""

import os
from pathlib import Path

import pytest

from clients.postgres_client import PostgresClient
from clients.vault_client import get_database_url
from core.audit import AuditLogger
from core.config import BillingConfig
from core.services.invoice_service import InvoiceService
from core.services.party_service import PartyService
from core.services.product_service import ProductService

SCHEMA_PATH = Path(__file__).parent.parent.parent / "db" / "schema.sql"

_TABLES = "invoices, parties, products, audit_log, security_events, companies"


def _database_url() -> str | None:
    url = os.getenv("TEST_DATABASE_URL")
    if url:
        return url
    if os.getenv("VAULT_ADDR"):
        return get_database_url()
    return None


@pytest.fixture(scope="session")
def postgres():
    url = _database_url()
    if url is None:
        pytest.skip("No test database configured (set TEST_DATABASE_URL or VAULT_ADDR)")

    db = PostgresClient(url)
    db.execute(SCHEMA_PATH.read_text())
    yield db
    db.close()


@pytest.fixture(autouse=True)
def clean_tables(postgres):
    postgres.execute(f"TRUNCATE {_TABLES}")
    postgres.execute("UPDATE invoice_sequence SET last_value = 0")
    yield


@pytest.fixture
def audit(postgres):
    return AuditLogger(postgres)


@pytest.fixture
def party_service(postgres, audit):
    return PartyService(postgres, audit)


@pytest.fixture
def product_service(postgres, audit):
    return ProductService(postgres, audit, BillingConfig())


@pytest.fixture
def invoice_service(postgres, audit, party_service, product_service):
    return InvoiceService(postgres, audit, party_service, product_service, BillingConfig())
