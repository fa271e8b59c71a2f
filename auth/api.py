"""HTTP routes for authentication."""

import ipaddress

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from auth.exceptions import InvalidCredentialsError, RateLimitedError
from auth.security_middleware import extract_bearer_token
from auth.service import AuthService
from auth.types import AuthenticatedCompany, LoginRequest
from api.base import success_response, error_response, ErrorCodes
from core.models import CompanyCreate


def _get_client_ip(request: Request) -> str | None:
    """Extract valid IP address from request, or None if invalid."""
    if not request.client:
        return None
    host = request.client.host
    try:
        ipaddress.ip_address(host)
        return host
    except ValueError:
        return None


def _token_payload(result: AuthenticatedCompany) -> dict:
    return {
        "token": result.session.token,
        "expires_at": result.session.expires_at.isoformat(),
        "company": result.company.model_dump(mode="json"),
    }


def create_auth_router(auth_service: AuthService) -> APIRouter:
    """Create auth router with injected service."""
    router = APIRouter(tags=["auth"])

    @router.post("/register", status_code=201)
    async def register(request: Request, body: CompanyCreate):
        """Register the company (once) and return a bearer token."""
        result = auth_service.register(
            body,
            ip_address=_get_client_ip(request),
            user_agent=request.headers.get("User-Agent"),
        )
        return success_response(_token_payload(result)).model_dump(mode="json")

    @router.post("/login")
    async def login(request: Request, body: LoginRequest):
        """Exchange email and password for a bearer token."""
        try:
            result = auth_service.login(
                email=body.email,
                password=body.password,
                ip_address=_get_client_ip(request),
                user_agent=request.headers.get("User-Agent"),
            )
        except RateLimitedError as e:
            return JSONResponse(
                status_code=429,
                headers={"Retry-After": str(e.retry_after_seconds)},
                content=error_response(
                    ErrorCodes.RATE_LIMITED,
                    f"Too many attempts. Please wait {e.retry_after_seconds} seconds.",
                ).model_dump(mode="json"),
            )
        except InvalidCredentialsError:
            return JSONResponse(
                status_code=401,
                content=error_response(
                    ErrorCodes.INVALID_CREDENTIALS,
                    "Invalid credentials",
                ).model_dump(mode="json"),
            )

        return success_response(_token_payload(result)).model_dump(mode="json")

    @router.get("/check-company")
    async def check_company():
        """Whether the company is registered (clients show register vs login)."""
        return success_response({"exists": auth_service.check_company()}).model_dump(mode="json")

    @router.post("/logout")
    async def logout(request: Request):
        """Revoke the caller's bearer token."""
        token = extract_bearer_token(request)
        if token:
            auth_service.logout(token, ip_address=_get_client_ip(request))
        return success_response({"message": "Logged out successfully"}).model_dump(mode="json")

    return router
