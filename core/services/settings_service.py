# =============================================================================
# core/services/settings_service.py - Admin Settings
# =============================================================================
# Get and merge-update the application settings record.
#
# The record lives in a SettingsStore:
# - SupabaseSettingsStore: one JSON row in the settings table (durable)
# - InMemorySettingsStore: process memory, reset on restart
#
# Updates are a shallow merge: fields missing from the patch keep their value.
#
# ActiveTableCache keeps the activeUserTable value in process so user
# requests do not read the settings store each time.
# =============================================================================

from __future__ import annotations

import logging
import threading
from typing import Any, Callable, Protocol

from supabase import Client

from core.models.settings import AppSettings, AppSettingsUpdate
from core.models.user import UserTable
from core.repositories.base import RepositoryError
from app.exceptions import BackendError
from lib.supabase_client import SupabaseClient

logger = logging.getLogger(__name__)

# Primary key of the single settings row
SETTINGS_ROW_ID = 1


class SettingsStore(Protocol):
    """Persistence for the settings record."""

    def load(self) -> AppSettings:
        """Return the stored record, or the defaults if nothing is stored."""
        ...

    def save(self, settings: AppSettings) -> AppSettings:
        """Persist the full record and return it."""
        ...


class InMemorySettingsStore:
    """
    Settings kept in process memory.

    Nothing survives a restart; use only for development and tests.
    """

    def __init__(self, initial: AppSettings | None = None):
        self._settings = initial or AppSettings()
        self._lock = threading.Lock()

    def load(self) -> AppSettings:
        with self._lock:
            return self._settings.model_copy(deep=True)

    def save(self, settings: AppSettings) -> AppSettings:
        with self._lock:
            self._settings = settings.model_copy(deep=True)
            return self._settings.model_copy(deep=True)


class SupabaseSettingsStore:
    """
    Settings kept as one row in a Supabase table.

    Expected table:
        create table app_settings (
            id int primary key,
            value jsonb not null,
            updated_at timestamptz default now()
        );

    Stored values are validated on load, so a record written by an older
    version picks up defaults for fields it does not have.
    """

    def __init__(
        self,
        table: str = "app_settings",
        client_factory: Callable[[], Client] = SupabaseClient.get_client,
    ):
        self.table = table
        self._client_factory = client_factory

    def load(self) -> AppSettings:
        client = self._client_factory()

        try:
            response = (
                client.table(self.table)
                .select("value")
                .eq("id", SETTINGS_ROW_ID)
                .execute()
            )
        except Exception as e:
            raise RepositoryError(
                message=f"Failed to load settings: {e}",
                code="LOAD_SETTINGS_FAILED",
                suggestion=f"Check that the {self.table} table exists",
                details={"table": self.table},
            ) from e

        rows = response.data or []
        if not rows or not rows[0].get("value"):
            return AppSettings()
        return AppSettings.model_validate(rows[0]["value"])

    def save(self, settings: AppSettings) -> AppSettings:
        client = self._client_factory()
        payload: dict[str, Any] = {
            "id": SETTINGS_ROW_ID,
            "value": settings.model_dump(mode="json", by_alias=True),
        }

        try:
            client.table(self.table).upsert(payload).execute()
        except Exception as e:
            raise RepositoryError(
                message=f"Failed to save settings: {e}",
                code="SAVE_SETTINGS_FAILED",
                details={"table": self.table},
            ) from e

        return settings


class ActiveTableCache:
    """
    Process-local copy of the activeUserTable setting.

    Empty until the settings are first read or saved in this process.
    Updates made by another process are picked up on its next settings read.
    """

    def __init__(self, default: UserTable = UserTable.USERS2):
        self.default = default
        self._value: UserTable | None = None
        self._lock = threading.Lock()

    def get(self) -> UserTable | None:
        with self._lock:
            return self._value

    def set(self, table: UserTable) -> None:
        with self._lock:
            self._value = table


class SettingsService:
    """
    Service for the admin settings record.

    Concurrent updates are not serialized across processes: two admins
    saving at once each merge into what they read, and the last save wins.
    """

    def __init__(self, store: SettingsStore, active_table: ActiveTableCache | None = None):
        self.store = store
        self.active_table = active_table or ActiveTableCache()

    def get_settings(self) -> AppSettings:
        """
        Return the current settings.

        Raises:
            BackendError: If the store cannot be read
        """
        try:
            current = self.store.load()
        except RepositoryError as e:
            logger.error(f"Failed to load settings: {e}")
            raise BackendError("Failed to fetch application settings") from e

        self.active_table.set(current.active_user_table)
        return current

    def update_settings(self, patch: AppSettingsUpdate) -> AppSettings:
        """
        Merge `patch` into the current settings and persist the result.

        Returns:
            The settings after the merge

        Raises:
            BackendError: If the store cannot be read or written
        """
        changes = patch.changes()

        try:
            current = self.store.load()
            merged = current.model_copy(update=changes)
            saved = self.store.save(merged)
        except RepositoryError as e:
            logger.error(f"Failed to update settings: {e}")
            raise BackendError("Failed to update application settings") from e

        self.active_table.set(saved.active_user_table)
        logger.info(f"Updated settings: {sorted(changes)}")
        return saved

    def active_user_table(self) -> UserTable:
        """
        Table used by user requests that do not name one.

        Served from the process-local copy. The store is read only when
        nothing is cached yet; if that read fails the configured default
        is returned and the next request tries again.
        """
        cached = self.active_table.get()
        if cached is not None:
            return cached

        try:
            return self.get_settings().active_user_table
        except BackendError:
            logger.warning(
                f"Settings unavailable, using default user table {self.active_table.default.value}"
            )
            return self.active_table.default
