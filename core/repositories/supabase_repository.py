# =============================================================================
# core/repositories/supabase_repository.py - Supabase User Repository
# =============================================================================
# UserRepository backed by the hosted Supabase database (PostgREST).
#
# Each method issues a single query builder chain and wraps any failure in
# RepositoryError with the table and arguments attached for the logs.
# =============================================================================

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Callable

from supabase import Client

from core.models.user import SortOrder, UserFilter, UserTable
from core.repositories.base import RepositoryError
from lib.supabase_client import SupabaseClient
from lib.utils import normalize_uuid

logger = logging.getLogger(__name__)


class SupabaseUserRepository:
    """
    User storage in Supabase.

    Example:
        repo = SupabaseUserRepository()
        rows, total = repo.list_users(UserTable.USERS2, UserFilter(name="ann"))
    """

    def __init__(self, client_factory: Callable[[], Client] = SupabaseClient.get_client):
        self._client_factory = client_factory

    @property
    def client(self) -> Client:
        return self._client_factory()

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    def list_users(
        self, table: UserTable, filters: UserFilter
    ) -> tuple[list[dict[str, Any]], int]:
        """
        Fetch one page of users matching the filter.

        Name and phone are matched as case-insensitive substrings, VIP and
        ban state by equality when not "all". Returns the page rows and the
        exact count of all matching rows. Rows are ordered by the sort
        column, then by id so pages stay disjoint when sort values tie.
        """
        start, end = filters.row_range()

        try:
            query = self.client.table(table.value).select("*", count="exact")

            if filters.name:
                query = query.ilike("name", f"%{filters.name}%")
            if filters.phone:
                query = query.ilike("phone", f"%{filters.phone}%")

            vip_flag = filters.is_vip.as_flag()
            if vip_flag is not None:
                query = query.eq("is_vip", vip_flag)

            ban_flag = filters.is_banned.as_flag()
            if ban_flag is not None:
                query = query.eq("is_banned", ban_flag)

            response = (
                query.order(
                    filters.sort_by.value,
                    desc=(filters.sort_order == SortOrder.DESC),
                )
                .order("id")
                .range(start, end)
                .execute()
            )
        except Exception as e:
            raise RepositoryError(
                message=f"Failed to list users: {e}",
                code="LIST_USERS_FAILED",
                details={"table": table.value, "filters": filters.model_dump(mode="json")},
            ) from e

        rows = response.data or []
        total = response.count or 0
        logger.debug(f"Fetched {len(rows)} of {total} users from {table.value}")
        return rows, total

    def get_user(self, table: UserTable, user_id: str) -> dict[str, Any] | None:
        user_id_str = normalize_uuid(user_id)

        try:
            response = (
                self.client.table(table.value)
                .select("*")
                .eq("id", user_id_str)
                .single()
                .execute()
            )
            return response.data

        except Exception as e:
            if SupabaseClient.is_no_rows_error(e):
                return None
            raise RepositoryError(
                message=f"Failed to fetch user: {e}",
                code="FETCH_USER_FAILED",
                suggestion="Check that the user id is a valid UUID",
                details={"table": table.value, "user_id": user_id_str},
            ) from e

    def count_users(
        self,
        table: UserTable,
        *,
        is_banned: bool | None = None,
        is_vip: bool | None = None,
        created_since: datetime | None = None,
    ) -> int:
        """
        Count matching rows without transferring them (HEAD request).

        Returns 0 when the server sends no count.
        """
        try:
            query = self.client.table(table.value).select("*", count="exact", head=True)

            if is_banned is not None:
                query = query.eq("is_banned", is_banned)
            if is_vip is not None:
                query = query.eq("is_vip", is_vip)
            if created_since is not None:
                query = query.gte("created_at", _utc_iso(created_since))

            response = query.execute()
        except Exception as e:
            raise RepositoryError(
                message=f"Failed to count users: {e}",
                code="COUNT_USERS_FAILED",
                details={
                    "table": table.value,
                    "is_banned": is_banned,
                    "is_vip": is_vip,
                    "created_since": created_since.isoformat() if created_since else None,
                },
            ) from e

        return response.count or 0

    def list_creation_times(self, table: UserTable, since: datetime) -> list[str]:
        try:
            response = (
                self.client.table(table.value)
                .select("created_at")
                .gte("created_at", _utc_iso(since))
                .execute()
            )
        except Exception as e:
            raise RepositoryError(
                message=f"Failed to fetch creation times: {e}",
                code="FETCH_CREATION_TIMES_FAILED",
                details={"table": table.value, "since": since.isoformat()},
            ) from e

        return [row["created_at"] for row in response.data or [] if row.get("created_at")]

    # -------------------------------------------------------------------------
    # Writes
    # -------------------------------------------------------------------------

    def update_user(
        self, table: UserTable, user_id: str, changes: dict[str, Any]
    ) -> dict[str, Any] | None:
        """
        Apply `changes` to one row and return the row as stored.

        PostgREST returns the updated representation; an empty result means
        no row has this id.
        """
        user_id_str = normalize_uuid(user_id)

        try:
            response = (
                self.client.table(table.value)
                .update(changes)
                .eq("id", user_id_str)
                .execute()
            )
        except Exception as e:
            raise RepositoryError(
                message=f"Failed to update user: {e}",
                code="UPDATE_USER_FAILED",
                suggestion="Phone numbers must be unique across users",
                details={"table": table.value, "user_id": user_id_str, "fields": sorted(changes)},
            ) from e

        if not response.data:
            return None
        return response.data[0]


def _utc_iso(value: datetime) -> str:
    """Timestamps are sent in UTC; `timestamp` columns ignore offsets."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat()
