"""Authentication for the company account."""

from auth.exceptions import (
    AuthError,
    InvalidCredentialsError,
    RateLimitedError,
    SessionExpiredError,
)
from auth.types import Session, LoginRequest, AuthenticatedCompany
from auth.config import AuthConfig
from auth.passwords import hash_password, verify_password
from auth.rate_limiter import RateLimiter
from auth.security_logger import SecurityLogger, SecurityEvent
from auth.session import SessionManager
from auth.service import AuthService
from auth.security_middleware import AuthMiddleware
from auth.api import create_auth_router
