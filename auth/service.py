"""Authentication service: company registration, login, logout."""

from auth.config import AuthConfig
from auth.exceptions import InvalidCredentialsError, RateLimitedError
from auth.passwords import hash_password, verify_password
from auth.rate_limiter import RateLimiter
from auth.security_logger import SecurityLogger, SecurityEvent
from auth.session import SessionManager
from auth.types import AuthenticatedCompany, Session
from core.exceptions import ConflictError
from core.models import CompanyCreate
from core.services.company_service import CompanyService


class AuthService:
    """Orchestrates the password login flow for the single company.

    Handles:
    - Registration (creates the company record and a first session)
    - Login with per-email rate limiting
    - Logout
    - Session validation for the middleware
    """

    def __init__(
        self,
        config: AuthConfig,
        company_service: CompanyService,
        session_manager: SessionManager,
        rate_limiter: RateLimiter,
        security_logger: SecurityLogger,
    ):
        self._config = config
        self._company_service = company_service
        self._session_manager = session_manager
        self._rate_limiter = rate_limiter
        self._security_logger = security_logger

    def check_company(self) -> bool:
        """Whether registration has already happened."""
        return self._company_service.exists()

    def register(
        self,
        data: CompanyCreate,
        ip_address: str | None = None,
        user_agent: str | None = None,
    ) -> AuthenticatedCompany:
        """Register the company and log it in.

        Raises:
            ConflictError: If a company is already registered.
        """
        try:
            company = self._company_service.initialize(
                data,
                password_hash=hash_password(data.password, self._config.bcrypt_rounds),
            )
        except ConflictError:
            self._security_logger.log(
                SecurityEvent.REGISTRATION_REJECTED,
                email=data.email,
                ip_address=ip_address,
                user_agent=user_agent,
                details={"reason": "company_exists"},
            )
            raise

        session = self._session_manager.create_session(company.id)

        self._security_logger.log(
            SecurityEvent.COMPANY_REGISTERED,
            email=company.email,
            company_id=company.id,
            ip_address=ip_address,
            user_agent=user_agent,
        )

        return AuthenticatedCompany(company=company, session=session)

    def login(
        self,
        email: str,
        password: str,
        ip_address: str | None = None,
        user_agent: str | None = None,
    ) -> AuthenticatedCompany:
        """Check credentials and issue a session.

        Flow:
        1. Count the attempt against the email's rate limit
        2. Look up the company by email and verify the bcrypt hash
        3. Create session, reset the rate limit, log the event

        Raises:
            RateLimitedError: If too many attempts for this email.
            InvalidCredentialsError: If email unknown or password wrong.
        """
        email = email.lower().strip()

        try:
            self._rate_limiter.check_rate_limit(email)
        except RateLimitedError:
            self._security_logger.log(
                SecurityEvent.RATE_LIMITED,
                email=email,
                ip_address=ip_address,
                user_agent=user_agent,
            )
            raise

        credentials = self._company_service.get_credentials(email)
        if credentials is None or not verify_password(password, credentials[1]):
            self._security_logger.log(
                SecurityEvent.LOGIN_FAILED,
                email=email,
                ip_address=ip_address,
                user_agent=user_agent,
                details={"reason": "unknown_email" if credentials is None else "bad_password"},
            )
            raise InvalidCredentialsError("Invalid credentials")

        company = credentials[0]
        session = self._session_manager.create_session(company.id)
        self._rate_limiter.reset_rate_limit(email)

        self._security_logger.log(
            SecurityEvent.LOGIN_SUCCEEDED,
            email=email,
            company_id=company.id,
            ip_address=ip_address,
            user_agent=user_agent,
        )

        return AuthenticatedCompany(company=company, session=session)

    def logout(self, token: str, ip_address: str | None = None) -> None:
        """Revoke a session. Safe to call with an unknown token."""
        self._session_manager.revoke_session(token)
        self._security_logger.log(SecurityEvent.SESSION_REVOKED, ip_address=ip_address)

    def validate_session(self, token: str) -> Session:
        """Raises SessionExpiredError if the token is not a live session."""
        return self._session_manager.validate_session(token)
