# =============================================================================
# tests/test_settings.py - Settings Service Tests
# =============================================================================
# Tests for merge-update semantics and both settings stores.
# The Supabase store runs against a mocked client.
# =============================================================================

from unittest.mock import MagicMock

import pytest

from app.exceptions import BackendError
from core.models.settings import AppSettings, AppSettingsUpdate
from core.models.user import UserTable
from core.repositories import RepositoryError
from core.services import (
    ActiveTableCache,
    InMemorySettingsStore,
    SettingsService,
    SupabaseSettingsStore,
)


def make_settings_client(rows=None, error: Exception | None = None):
    """Mock Supabase client for the settings table."""
    query = MagicMock()
    for method in ("select", "eq", "upsert"):
        getattr(query, method).return_value = query
    if error is not None:
        query.execute.side_effect = error
    else:
        query.execute.return_value = MagicMock(data=rows)

    client = MagicMock()
    client.table.return_value = query
    return client, query


class TestSettingsService:
    """Test get and merge-update."""

    def test_get_returns_defaults(self, settings_store):
        settings = SettingsService(settings_store).get_settings()

        assert settings == AppSettings()

    def test_partial_update_keeps_other_fields(self, settings_store):
        """Test that updating maintenanceMode leaves appVersion untouched."""
        service = SettingsService(settings_store)

        updated = service.update_settings(AppSettingsUpdate.model_validate({"maintenanceMode": True}))

        assert updated.maintenance_mode is True
        assert updated.app_version == "1.0.0"
        assert updated.vip_features == AppSettings().vip_features
        assert service.get_settings().maintenance_mode is True

    def test_successive_updates_accumulate(self, settings_store):
        service = SettingsService(settings_store)

        service.update_settings(AppSettingsUpdate(app_version="2.1.0"))
        service.update_settings(AppSettingsUpdate(notification_message="Maintenance at 2am"))

        settings = service.get_settings()
        assert settings.app_version == "2.1.0"
        assert settings.notification_message == "Maintenance at 2am"

    def test_list_field_is_replaced_not_merged(self, settings_store):
        service = SettingsService(settings_store)

        updated = service.update_settings(AppSettingsUpdate(vip_features=["Ad-free"]))

        assert updated.vip_features == ["Ad-free"]

    def test_empty_update_changes_nothing(self, settings_store):
        service = SettingsService(settings_store)

        assert service.update_settings(AppSettingsUpdate()) == AppSettings()

    def test_store_failure_is_backend_error(self):
        client, _ = make_settings_client(error=RuntimeError("relation does not exist"))
        service = SettingsService(SupabaseSettingsStore(client_factory=lambda: client))

        with pytest.raises(BackendError) as exc_info:
            service.get_settings()

        assert exc_info.value.message == "Failed to fetch application settings"


class TestActiveUserTable:
    """Test the process-local activeUserTable value."""

    def test_first_read_loads_store_then_caches(self):
        store = MagicMock(wraps=InMemorySettingsStore(AppSettings(active_user_table=UserTable.USERS)))
        service = SettingsService(store, ActiveTableCache())

        assert service.active_user_table() == UserTable.USERS
        assert service.active_user_table() == UserTable.USERS
        assert store.load.call_count == 1

    def test_update_refreshes_cached_value(self, settings_store):
        active_table = ActiveTableCache()
        service = SettingsService(settings_store, active_table)
        assert service.active_user_table() == UserTable.USERS2

        service.update_settings(AppSettingsUpdate(active_user_table=UserTable.USERS))

        assert active_table.get() == UserTable.USERS
        assert SettingsService(settings_store, active_table).active_user_table() == UserTable.USERS

    def test_store_failure_falls_back_to_default(self):
        store = MagicMock()
        store.load.side_effect = RepositoryError("relation does not exist")
        active_table = ActiveTableCache(default=UserTable.USERS)
        service = SettingsService(store, active_table)

        assert service.active_user_table() == UserTable.USERS
        # Failure is not cached; the next request retries the store
        assert active_table.get() is None
        service.active_user_table()
        assert store.load.call_count == 2


class TestInMemorySettingsStore:
    """Test the in-memory store."""

    def test_load_returns_copy(self):
        store = InMemorySettingsStore()

        loaded = store.load()
        loaded.vip_features.append("Leaked")

        assert "Leaked" not in store.load().vip_features

    def test_initial_value(self):
        store = InMemorySettingsStore(AppSettings(active_user_table=UserTable.USERS))

        assert store.load().active_user_table == UserTable.USERS


class TestSupabaseSettingsStore:
    """Test the Supabase store against a mocked client."""

    def test_load_without_row_returns_defaults(self):
        client, query = make_settings_client(rows=[])
        store = SupabaseSettingsStore(table="app_settings", client_factory=lambda: client)

        assert store.load() == AppSettings()
        client.table.assert_called_once_with("app_settings")
        query.eq.assert_called_once_with("id", 1)

    def test_load_fills_missing_fields_with_defaults(self):
        client, _ = make_settings_client(rows=[{"value": {"maintenanceMode": True}}])
        store = SupabaseSettingsStore(client_factory=lambda: client)

        settings = store.load()

        assert settings.maintenance_mode is True
        assert settings.app_version == "1.0.0"

    def test_save_upserts_camel_case_json(self):
        client, query = make_settings_client(rows=[])
        store = SupabaseSettingsStore(client_factory=lambda: client)

        store.save(AppSettings(maintenance_mode=True))

        payload = query.upsert.call_args.args[0]
        assert payload["id"] == 1
        assert payload["value"]["maintenanceMode"] is True
        assert payload["value"]["activeUserTable"] == "users2"
