# =============================================================================
# app/exceptions.py - Custom Exception Handlers
# =============================================================================
# Centralized exception handling for the API.
# Every error response has the same shape: {"detail", "code", ...}.
#
# Error kinds:
# - Validation (400): malformed or missing input, names the failing field
# - Not found (404): the requested user row does not exist
# - Backend (500): remote call failed; detail is logged, never returned
# =============================================================================

import logging
from typing import Any

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class AdminApiException(Exception):
    """
    Base exception for the admin API.

    All custom exceptions inherit from this class.
    Provides structured error responses with actionable suggestions.
    """

    def __init__(
        self,
        message: str,
        code: str = "ADMIN_API_ERROR",
        status_code: int = 500,
        suggestion: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.status_code = status_code
        self.suggestion = suggestion
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to API response dict."""
        result = {
            "detail": self.message,
            "code": self.code,
        }
        if self.suggestion:
            result["suggestion"] = self.suggestion
        if self.details:
            result["details"] = self.details
        return result


# =============================================================================
# User Exceptions
# =============================================================================

class UserNotFoundError(AdminApiException):
    """Raised when a user ID doesn't exist in the selected table."""

    def __init__(self, user_id: str, table: str):
        super().__init__(
            message="User not found",
            code="USER_NOT_FOUND",
            status_code=404,
            suggestion="Check the user id and the table being queried",
            details={"user_id": user_id, "table": table}
        )


# =============================================================================
# Backend Exceptions
# =============================================================================

class BackendError(AdminApiException):
    """
    Raised when the database call behind an operation fails.

    The message is deliberately generic; the cause is logged by whoever
    raises this and is not sent to the client.
    """

    def __init__(self, message: str):
        super().__init__(
            message=message,
            code="BACKEND_ERROR",
            status_code=500,
            suggestion="Try again later or check the server logs",
        )


# =============================================================================
# Exception Handlers
# =============================================================================

async def admin_api_exception_handler(
    request: Request,
    exc: AdminApiException
) -> JSONResponse:
    """
    Convert AdminApiException to JSON response.

    Returns structured error with:
    - detail: Human-readable message
    - code: Machine-readable error code
    - suggestion: How to fix (if available)
    - details: Additional context
    """
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_dict()
    )


def _describe_errors(errors: list[dict[str, Any]]) -> tuple[str, list[str]]:
    """Build a readable message and the list of failing field names."""
    messages = []
    fields = []
    for error in errors:
        # loc is e.g. ("query", "sortBy") or ("body", "isVip")
        loc = [str(part) for part in error.get("loc", ()) if part not in ("query", "body", "path")]
        field = ".".join(loc) or "request"
        fields.append(field)
        messages.append(f"{field}: {error.get('msg', 'invalid value')}")
    return "Validation error: " + "; ".join(messages), fields


async def validation_exception_handler(
    request: Request,
    exc: RequestValidationError
) -> JSONResponse:
    """
    Handle request validation errors.

    FastAPI reports these as 422 by default; this API reports every
    validation failure as 400 with the failing field named.
    """
    message, fields = _describe_errors(exc.errors())

    logger.debug(f"Rejected {request.method} {request.url.path}: {message}")
    return JSONResponse(
        status_code=400,
        content={
            "detail": message,
            "code": "VALIDATION_ERROR",
            "fields": fields,
        }
    )
