"""Typed exceptions for auth failures."""


class AuthError(Exception):
    """Base class for authentication errors."""


class InvalidCredentialsError(AuthError):
    """
    Email/password pair does not match the registered company.

    Raised for an unknown email too, so responses don't reveal which part was wrong.
    """


class RateLimitedError(AuthError):
    """Too many login attempts. Client should wait before retrying."""

    def __init__(self, retry_after_seconds: int):
        self.retry_after_seconds = retry_after_seconds
        super().__init__(f"Rate limited. Retry after {retry_after_seconds} seconds.")


class SessionExpiredError(AuthError):
    """Bearer token unknown, revoked or past its expiry."""
