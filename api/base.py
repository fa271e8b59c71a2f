"""Response envelope shared by every billing endpoint.

Success:  {"success": true,  "data": ..., "error": null, "meta": {...}}
Failure:  {"success": false, "data": null, "error": {"code", "message"}, "meta": {...}}

meta.request_id matches the X-Request-ID response header while a request is
being served; list endpoints also fill meta.count.
"""

from typing import Any
from datetime import datetime
from uuid import UUID, uuid4

from pydantic import BaseModel, Field

from api.middleware import current_request_id
from utils.timezone import now_utc


class APIError(BaseModel):
    """Error details in API response."""

    code: str = Field(..., description="Machine-readable error code")
    message: str = Field(..., description="Human-readable error message")


class APIMeta(BaseModel):
    timestamp: datetime = Field(..., description="Response timestamp (UTC)")
    request_id: str = Field(..., description="Same value as the X-Request-ID header")
    count: int | None = Field(None, description="Number of records in data, for lists")


class APIResponse(BaseModel):
    success: bool
    data: Any | None = None
    error: APIError | None = None
    meta: APIMeta


def _meta(count: int | None = None) -> APIMeta:
    return APIMeta(
        timestamp=now_utc(),
        request_id=current_request_id() or str(uuid4()),
        count=count,
    )


def success_response(data: Any, count: int | None = None) -> APIResponse:
    """Wrap data. Pass count for list results."""
    return APIResponse(success=True, data=data, meta=_meta(count))


def list_response(items: list[BaseModel]) -> APIResponse:
    """Serialize a list of models with meta.count set."""
    return success_response([item.model_dump(mode="json") for item in items], count=len(items))


def deleted_response(entity_id: UUID) -> APIResponse:
    """Body returned by every DELETE route."""
    return success_response({"deleted": True, "id": str(entity_id)})


def error_response(code: str, message: str) -> APIResponse:
    return APIResponse(
        success=False,
        error=APIError(code=code, message=message),
        meta=_meta(),
    )


class ErrorCodes:
    """Values of `error.code`."""

    # Session / login
    NOT_AUTHENTICATED = "NOT_AUTHENTICATED"
    SESSION_EXPIRED = "SESSION_EXPIRED"
    INVALID_CREDENTIALS = "INVALID_CREDENTIALS"
    RATE_LIMITED = "RATE_LIMITED"

    # Unknown party/product/invoice/company; duplicate SKU, invoice number or company
    NOT_FOUND = "NOT_FOUND"
    ALREADY_EXISTS = "ALREADY_EXISTS"

    VALIDATION_ERROR = "VALIDATION_ERROR"
    INVALID_REQUEST = "INVALID_REQUEST"

    INTERNAL_ERROR = "INTERNAL_ERROR"
