"""API error format and error codes."""

from typing import Any

from pydantic import BaseModel, Field


class APIError(BaseModel):
    """
    Error body returned by every failing endpoint.

    `error` is the human-readable message; `code` is machine-readable.
    `matches` is only present for ambiguous tracking lookups.
    """

    error: str = Field(..., description="Human-readable error message")
    code: str = Field(..., description="Machine-readable error code")
    details: Any | None = None
    matches: list[dict] | None = None
    trackingNumber: str | None = None
    request_id: str | None = Field(None, description="Request identifier for tracing")


def error_response(
    code: str,
    message: str,
    details: Any | None = None,
    request_id: str | None = None,
    **extra: Any,
) -> dict:
    """Build a JSON-ready error body, omitting empty optional keys."""
    body = APIError(
        error=message,
        code=code,
        details=details,
        request_id=request_id,
        **extra,
    )
    return body.model_dump(mode="json", exclude_none=True)


class ErrorCodes:
    """Standard error codes for consistent error handling."""

    # Resource Errors
    NOT_FOUND = "NOT_FOUND"

    # Validation Errors
    VALIDATION_ERROR = "VALIDATION_ERROR"
    INVALID_REQUEST = "INVALID_REQUEST"
    AMBIGUOUS_TRACKING = "AMBIGUOUS_TRACKING"
    INVALID_SIGNATURE = "INVALID_SIGNATURE"

    # Authentication (reserved; enforced at the deployment boundary)
    NOT_AUTHENTICATED = "NOT_AUTHENTICATED"

    # Infrastructure
    UPSTREAM_FAILURE = "UPSTREAM_FAILURE"
    INTERNAL_ERROR = "INTERNAL_ERROR"
