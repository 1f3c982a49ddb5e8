# =============================================================================
# core/repositories/memory_repository.py - In-Memory User Repository
# =============================================================================
# UserRepository kept in a dict, following PostgREST semantics closely enough
# for tests and local runs without a Supabase project:
# - ilike substring matching is case-insensitive
# - NULLs sort last ascending and first descending, as in Postgres
# - phone stays unique within a table
# =============================================================================

from __future__ import annotations

import copy
import threading
import uuid
from datetime import datetime, timezone
from typing import Any, Iterable

from core.models.user import SortOrder, UserFilter, UserTable
from core.repositories.base import RepositoryError
from lib.utils import parse_timestamp


class InMemoryUserRepository:
    """
    User storage held in process memory.

    Example:
        repo = InMemoryUserRepository()
        repo.add_user(UserTable.USERS2, {"name": "Ann", "phone": "555", ...})
    """

    def __init__(self, rows: dict[UserTable, Iterable[dict[str, Any]]] | None = None):
        self._lock = threading.Lock()
        self._tables: dict[UserTable, dict[str, dict[str, Any]]] = {
            table: {} for table in UserTable
        }
        for table, table_rows in (rows or {}).items():
            for row in table_rows:
                self.add_user(table, row)

    def add_user(self, table: UserTable, row: dict[str, Any]) -> dict[str, Any]:
        """Insert a row, filling id, flags and created_at like the table defaults."""
        record = {
            "id": str(uuid.uuid4()),
            "is_vip": False,
            "is_banned": False,
            "created_at": datetime.now(timezone.utc).isoformat(),
            "expired_at": None,
            "last_login": None,
            "current_device": None,
            **row,
        }
        with self._lock:
            self._check_phone_unique(table, record["id"], record.get("phone"))
            self._tables[table][record["id"]] = record
        return copy.deepcopy(record)

    # -------------------------------------------------------------------------
    # UserRepository
    # -------------------------------------------------------------------------

    def list_users(
        self, table: UserTable, filters: UserFilter
    ) -> tuple[list[dict[str, Any]], int]:
        with self._lock:
            rows = [row for row in self._tables[table].values() if _matches(row, filters)]

        rows = _sorted(rows, filters.sort_by.value, filters.sort_order == SortOrder.DESC)
        start, end = filters.row_range()
        return copy.deepcopy(rows[start:end + 1]), len(rows)

    def get_user(self, table: UserTable, user_id: str) -> dict[str, Any] | None:
        with self._lock:
            row = self._tables[table].get(str(user_id))
            return copy.deepcopy(row) if row else None

    def update_user(
        self, table: UserTable, user_id: str, changes: dict[str, Any]
    ) -> dict[str, Any] | None:
        with self._lock:
            row = self._tables[table].get(str(user_id))
            if row is None:
                return None
            if "phone" in changes:
                self._check_phone_unique(table, row["id"], changes["phone"])
            row.update(changes)
            return copy.deepcopy(row)

    def count_users(
        self,
        table: UserTable,
        *,
        is_banned: bool | None = None,
        is_vip: bool | None = None,
        created_since: datetime | None = None,
    ) -> int:
        with self._lock:
            rows = list(self._tables[table].values())

        count = 0
        for row in rows:
            if is_banned is not None and bool(row.get("is_banned")) != is_banned:
                continue
            if is_vip is not None and bool(row.get("is_vip")) != is_vip:
                continue
            if created_since is not None and not _created_since(row, created_since):
                continue
            count += 1
        return count

    def list_creation_times(self, table: UserTable, since: datetime) -> list[str]:
        with self._lock:
            rows = list(self._tables[table].values())
        return [row["created_at"] for row in rows if _created_since(row, since)]

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    def _check_phone_unique(self, table: UserTable, user_id: str, phone: str | None) -> None:
        if phone is None:
            return
        for other in self._tables[table].values():
            if other["id"] != user_id and other.get("phone") == phone:
                raise RepositoryError(
                    message="duplicate key value violates unique constraint on phone",
                    code="UNIQUE_VIOLATION",
                    details={"table": table.value, "phone": phone},
                )


def _matches(row: dict[str, Any], filters: UserFilter) -> bool:
    if filters.name and filters.name.lower() not in (row.get("name") or "").lower():
        return False
    if filters.phone and filters.phone.lower() not in (row.get("phone") or "").lower():
        return False

    vip_flag = filters.is_vip.as_flag()
    if vip_flag is not None and bool(row.get("is_vip")) != vip_flag:
        return False

    ban_flag = filters.is_banned.as_flag()
    if ban_flag is not None and bool(row.get("is_banned")) != ban_flag:
        return False

    return True


def _sorted(rows: list[dict[str, Any]], column: str, descending: bool) -> list[dict[str, Any]]:
    # Ties keep ascending id order (sort is stable, also with reverse=True)
    rows = sorted(rows, key=lambda row: str(row.get("id", "")))
    present = [row for row in rows if row.get(column) is not None]
    missing = [row for row in rows if row.get(column) is None]

    def key(row: dict[str, Any]) -> Any:
        value = row[column]
        if column == "name":
            return value
        return parse_timestamp(value)

    present.sort(key=key, reverse=descending)
    return missing + present if descending else present + missing


def _created_since(row: dict[str, Any], since: datetime) -> bool:
    created_at = row.get("created_at")
    if not created_at:
        return False
    if since.tzinfo is None:
        since = since.replace(tzinfo=timezone.utc)
    return parse_timestamp(created_at) >= since
