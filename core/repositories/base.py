# =============================================================================
# core/repositories/base.py - User Repository Interface
# =============================================================================
# Services talk to user storage only through this interface, so the Supabase
# backend can be swapped for the in-memory one in tests and local runs.
#
# Every operation takes the table explicitly; there is no default table at
# this layer.
# =============================================================================

from datetime import datetime
from typing import Any, Protocol

from core.models.user import UserFilter, UserTable
from lib.utils import ApplicationError


class RepositoryError(ApplicationError):
    """Raised when the underlying store rejects or fails a request."""

    def __init__(self, message: str, **kwargs: Any):
        kwargs.setdefault("code", "REPOSITORY_ERROR")
        super().__init__(message, **kwargs)


class UserRepository(Protocol):
    """
    Storage operations over user rows.

    Rows are plain dicts with the column names of the users table.
    """

    def list_users(
        self, table: UserTable, filters: UserFilter
    ) -> tuple[list[dict[str, Any]], int]:
        """Return (rows on the requested page, total matching rows)."""
        ...

    def get_user(self, table: UserTable, user_id: str) -> dict[str, Any] | None:
        """Return the row, or None if no row has this id."""
        ...

    def update_user(
        self, table: UserTable, user_id: str, changes: dict[str, Any]
    ) -> dict[str, Any] | None:
        """Write `changes` and return the updated row, or None if absent."""
        ...

    def count_users(
        self,
        table: UserTable,
        *,
        is_banned: bool | None = None,
        is_vip: bool | None = None,
        created_since: datetime | None = None,
    ) -> int:
        """Count rows matching every given condition."""
        ...

    def list_creation_times(self, table: UserTable, since: datetime) -> list[str]:
        """Return created_at values of rows created at or after `since`."""
        ...
