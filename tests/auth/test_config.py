"""Tests for auth/config.py - Auth configuration with validation."""

import pytest
from pydantic import ValidationError

from auth.config import AuthConfig


class TestAuthConfigDefaults:

    def test_session_expiry_default(self):
        assert AuthConfig().session_expiry_hours == 24

    def test_sliding_expiry_default(self):
        assert AuthConfig().session_extend_on_activity is True

    def test_rate_limit_defaults(self):
        config = AuthConfig()
        assert config.rate_limit_attempts == 5
        assert config.rate_limit_window_minutes == 15

    def test_bcrypt_rounds_default(self):
        assert AuthConfig().bcrypt_rounds == 12


class TestAuthConfigValidation:

    def test_session_expiry_min_bound(self):
        with pytest.raises(ValidationError):
            AuthConfig(session_expiry_hours=0)

    def test_rate_limit_attempts_min_bound(self):
        with pytest.raises(ValidationError):
            AuthConfig(rate_limit_attempts=0)

    def test_bcrypt_rounds_bounds(self):
        with pytest.raises(ValidationError):
            AuthConfig(bcrypt_rounds=3)
        with pytest.raises(ValidationError):
            AuthConfig(bcrypt_rounds=17)
