# =============================================================================
# lib/utils.py - Shared Utilities
# =============================================================================
# Common utilities used across the application:
# - UUID normalization for query parameters
# - Timestamp parsing/formatting shared by models and analytics
# - The base error class every layer builds on
# =============================================================================

from datetime import date, datetime, time, timezone
from typing import Any
from uuid import UUID


# =============================================================================
# UUID Utilities
# =============================================================================

def normalize_uuid(value: str | UUID) -> str:
    """
    Normalize a UUID to string format.

    Example:
        user_id = normalize_uuid(uuid_obj)  # "550e8400-..."
        user_id = normalize_uuid("550e8400-...")  # "550e8400-..."
    """
    return str(value) if isinstance(value, UUID) else value


# =============================================================================
# Timestamp Utilities
# =============================================================================

def parse_timestamp(value: str | datetime | date) -> datetime:
    """
    Parse a database or client timestamp into an aware datetime.

    Accepts ISO-8601 strings (with or without offset, with a trailing "Z",
    or date-only), datetime and date objects. Values without an offset are
    read as UTC, which is how Postgres `timestamp` columns are written.

    Raises:
        ValueError: If the value is not a recognizable date or timestamp
    """
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime.combine(value, time.min)
    else:
        text = value.strip()
        if not text:
            raise ValueError("Empty timestamp")
        if text.endswith("Z") or text.endswith("z"):
            text = text[:-1] + "+00:00"
        parsed = datetime.fromisoformat(text)

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def to_iso_timestamp(value: datetime) -> str:
    """
    Format a datetime as a canonical UTC timestamp string.

    Example:
        to_iso_timestamp(datetime(2025, 1, 31, tzinfo=timezone.utc))
        # "2025-01-31T00:00:00.000Z"
    """
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    utc = value.astimezone(timezone.utc)
    return utc.isoformat(timespec="milliseconds").replace("+00:00", "Z")


# =============================================================================
# Base Error Class
# =============================================================================

class ApplicationError(Exception):
    """
    Base error class for application-specific errors.

    Provides actionable error messages following the principle:
    "Errors should tell HOW to fix, not just WHAT failed."

    Attributes:
        code: Error code for categorization
        message: Human-readable error message
        suggestion: Actionable suggestion for fixing the error
        details: Additional context for debugging

    Example:
        class RepositoryError(ApplicationError):
            def __init__(self, message: str, **kwargs):
                super().__init__(message, code="REPOSITORY_ERROR", **kwargs)
    """

    def __init__(
        self,
        message: str,
        code: str = "APPLICATION_ERROR",
        suggestion: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.code = code
        self.message = message
        self.suggestion = suggestion
        self.details = details or {}

    def __str__(self) -> str:
        result = f"[{self.code}] {self.message}"
        if self.suggestion:
            result += f"\n  Suggestion: {self.suggestion}"
        return result
