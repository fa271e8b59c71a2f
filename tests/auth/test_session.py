"""Tests for SessionManager - bearer session lifecycle."""

from datetime import timedelta
from uuid import uuid4

import pytest

from auth.session import SessionManager
from auth.config import AuthConfig
from auth.exceptions import SessionExpiredError
from utils.timezone import now_utc


@pytest.fixture
def config():
    return AuthConfig(session_expiry_hours=1)


@pytest.fixture
def session_manager(fake_valkey, config):
    return SessionManager(fake_valkey, config)


class TestCreateSession:

    def test_returns_session_with_token(self, session_manager, test_company_id):
        session = session_manager.create_session(test_company_id)

        assert len(session.token) > 20
        assert session.company_id == test_company_id

    def test_tokens_are_unique(self, session_manager, test_company_id):
        a = session_manager.create_session(test_company_id)
        b = session_manager.create_session(test_company_id)

        assert a.token != b.token

    def test_stored_with_ttl(self, session_manager, fake_valkey, test_company_id):
        session = session_manager.create_session(test_company_id)

        assert fake_valkey.ttls[f"session:{session.token}"] == 3600

    def test_expiry_is_configured_lifetime(self, session_manager, test_company_id):
        session = session_manager.create_session(test_company_id)

        assert session.expires_at - session.created_at == timedelta(hours=1)


class TestValidateSession:

    def test_valid_session_returns_session(self, session_manager, test_company_id):
        created = session_manager.create_session(test_company_id)

        validated = session_manager.validate_session(created.token)

        assert validated.company_id == test_company_id
        assert validated.token == created.token

    def test_invalid_token_raises(self, session_manager):
        with pytest.raises(SessionExpiredError):
            session_manager.validate_session("nonexistent-token")

    def test_expired_session_raises_and_is_removed(self, session_manager, fake_valkey):
        past = now_utc() - timedelta(hours=2)
        fake_valkey.set_json("session:old", {
            "company_id": str(uuid4()),
            "created_at": past.isoformat(),
            "expires_at": (past + timedelta(hours=1)).isoformat(),
            "last_activity_at": past.isoformat(),
        }, expire_seconds=3600)

        with pytest.raises(SessionExpiredError):
            session_manager.validate_session("old")

        assert fake_valkey.get_json("session:old") is None

    def test_validation_slides_expiry(self, session_manager, fake_valkey, test_company_id):
        created = session_manager.create_session(test_company_id)

        validated = session_manager.validate_session(created.token)

        assert validated.expires_at >= created.expires_at
        stored = fake_valkey.get_json(f"session:{created.token}")
        assert stored["expires_at"] == validated.expires_at.isoformat()

    def test_no_slide_when_disabled(self, fake_valkey, test_company_id):
        manager = SessionManager(fake_valkey, AuthConfig(session_extend_on_activity=False))
        created = manager.create_session(test_company_id)

        validated = manager.validate_session(created.token)

        assert validated.expires_at == created.expires_at


class TestRevokeSession:

    def test_revoked_session_raises(self, session_manager, test_company_id):
        session = session_manager.create_session(test_company_id)
        session_manager.revoke_session(session.token)

        with pytest.raises(SessionExpiredError):
            session_manager.validate_session(session.token)

    def test_revoking_unknown_token_is_ignored(self, session_manager):
        session_manager.revoke_session("never-issued")
