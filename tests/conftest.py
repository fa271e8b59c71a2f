"""Shared test fixtures for the billing test suite.

Unit tests run without external services: Postgres is a MagicMock, Valkey
an in-memory fake. Tests that need a real database live in
tests/integration and skip when Vault is not configured.
"""

import json

import pytest
from uuid import UUID
from pathlib import Path
from unittest.mock import MagicMock, Mock

from dotenv import load_dotenv

# Load .env file BEFORE any other imports that might use env vars
load_dotenv(Path(__file__).parent.parent / ".env")

# Reset vault client singleton to pick up env vars
import clients.vault_client as vault_module
vault_module._vault_client_instance = None
vault_module._secret_cache.clear()

from clients.postgres_client import PostgresClient
from core.audit import AuditLogger
from utils.company_context import company_context, clear_current_company_id


# =============================================================================
# TEST COMPANY CONSTANTS
# =============================================================================

TEST_COMPANY_ID = UUID("00000000-0000-0000-0000-000000000001")
TEST_COMPANY_EMAIL = "owner@example.com"


# =============================================================================
# COMPANY CONTEXT FIXTURES
# =============================================================================


@pytest.fixture(autouse=True)
def reset_company_context():
    """Ensure clean company context before and after each test."""
    clear_current_company_id()
    yield
    clear_current_company_id()


@pytest.fixture
def test_company_id() -> UUID:
    return TEST_COMPANY_ID


@pytest.fixture
def as_test_company(test_company_id):
    """Run the test inside the test company's context."""
    with company_context(test_company_id):
        yield test_company_id


# =============================================================================
# STORE DOUBLES
# =============================================================================


@pytest.fixture
def mock_postgres():
    """
    PostgresClient double.

    transaction() works as a context manager that lets exceptions through,
    so service code can be exercised unchanged.
    """
    return MagicMock(spec=PostgresClient)


@pytest.fixture
def mock_audit():
    return Mock(spec=AuditLogger)


class FakeValkey:
    """In-memory stand-in for ValkeyClient. TTLs are recorded, not enforced."""

    def __init__(self):
        self.data: dict[str, str] = {}
        self.ttls: dict[str, int] = {}

    def set_json(self, key, value, expire_seconds):
        self.data[key] = json.dumps(value)
        self.ttls[key] = expire_seconds

    def get_json(self, key):
        value = self.data.get(key)
        return None if value is None else json.loads(value)

    def delete(self, key):
        self.ttls.pop(key, None)
        return self.data.pop(key, None) is not None

    def count_attempt(self, key, window_seconds):
        count = int(self.data.get(key, 0)) + 1
        self.data[key] = str(count)
        self.ttls[key] = window_seconds
        return count, window_seconds


@pytest.fixture
def fake_valkey():
    return FakeValkey()
