"""Security middleware for FastAPI - bearer token validation and company context."""

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse

from auth.session import SessionManager
from auth.exceptions import SessionExpiredError
from api.base import error_response, ErrorCodes
from utils.company_context import set_current_company_id, clear_current_company_id


def extract_bearer_token(request: Request) -> str | None:
    """Token from 'Authorization: Bearer <token>', or None."""
    header = request.headers.get("Authorization")
    if not header:
        return None
    scheme, _, token = header.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


class AuthMiddleware(BaseHTTPMiddleware):
    """Middleware that validates the bearer token and sets company context.

    For protected routes:
    1. Extracts the token from the Authorization header
    2. Validates it via SessionManager
    3. Sets company_id in request.state and the company context (for audit)
    4. Clears context after request completes

    Public paths bypass authentication entirely.
    """

    PUBLIC_PATHS = [
        "/api/auth/register",
        "/api/auth/login",
        "/api/auth/check-company",
        "/health",
        "/docs",
        "/openapi.json",
    ]

    def __init__(self, app, session_manager: SessionManager):
        super().__init__(app)
        self._session_manager = session_manager

    def _is_public_path(self, path: str) -> bool:
        for public_path in self.PUBLIC_PATHS:
            if path == public_path or path.startswith(public_path + "/"):
                return True
        return False

    async def dispatch(self, request: Request, call_next):
        path = request.url.path

        if request.method == "OPTIONS" or self._is_public_path(path):
            return await call_next(request)

        token = extract_bearer_token(request)

        if not token:
            return JSONResponse(
                status_code=401,
                headers={"WWW-Authenticate": "Bearer"},
                content=error_response(
                    ErrorCodes.NOT_AUTHENTICATED,
                    "Authentication required",
                ).model_dump(mode="json"),
            )

        try:
            session = self._session_manager.validate_session(token)
        except SessionExpiredError:
            return JSONResponse(
                status_code=401,
                headers={"WWW-Authenticate": "Bearer"},
                content=error_response(
                    ErrorCodes.SESSION_EXPIRED,
                    "Session has expired",
                ).model_dump(mode="json"),
            )

        set_current_company_id(session.company_id)
        request.state.company_id = session.company_id
        request.state.session = session

        try:
            return await call_next(request)
        finally:
            clear_current_company_id()
