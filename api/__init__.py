"""HTTP layer: routers, middleware and the response envelope."""

from api.base import (
    APIError,
    APIMeta,
    APIResponse,
    ErrorCodes,
    deleted_response,
    error_response,
    list_response,
    success_response,
)
