# =============================================================================
# tests/test_api.py - HTTP Endpoint Tests
# =============================================================================
# End-to-end tests of the routes through FastAPI's TestClient, with the
# repository and settings store replaced by in-memory versions
# (see conftest.py).
# =============================================================================

from unittest.mock import MagicMock

import pytest

from app.dependencies import get_settings_store, get_user_repository
from app.main import app
from core.repositories import RepositoryError
from core.services import InMemorySettingsStore

MISSING_ID = "550e8400-e29b-41d4-a716-446655440000"


# =============================================================================
# GET /api/users
# =============================================================================

class TestListUsersEndpoint:
    """Test listing users."""

    def test_defaults(self, client):
        response = client.get("/api/users")

        assert response.status_code == 200
        body = response.json()
        assert body["count"] == 5
        assert len(body["data"]) == 5
        assert body["data"][0]["name"] == "Eve Adams"

    def test_filters_sort_and_paging(self, client):
        response = client.get(
            "/api/users",
            params={"is_vip": "vip", "sortBy": "name", "sortOrder": "asc", "limit": 1, "page": 2},
        )

        assert response.status_code == 200
        body = response.json()
        assert body["count"] == 2
        assert [user["name"] for user in body["data"]] == ["Carol White"]

    def test_page_never_exceeds_limit(self, client):
        for page in (1, 2, 3, 4):
            body = client.get("/api/users", params={"limit": 2, "page": page}).json()
            assert len(body["data"]) <= 2
            assert body["count"] == 5

    @pytest.mark.parametrize("params, field", [
        ({"sortBy": "phone"}, "sortBy"),
        ({"sortOrder": "up"}, "sortOrder"),
        ({"is_vip": "gold"}, "is_vip"),
        ({"is_banned": "maybe"}, "is_banned"),
        ({"page": 0}, "page"),
        ({"limit": "ten"}, "limit"),
        ({"table": "accounts"}, "table"),
    ])
    def test_invalid_params_are_400(self, client, params, field):
        response = client.get("/api/users", params=params)

        assert response.status_code == 400
        body = response.json()
        assert body["code"] == "VALIDATION_ERROR"
        assert field in body["fields"]
        assert field in body["detail"]

    def test_table_parameter(self, client):
        response = client.get("/api/users", params={"table": "users"})

        assert response.status_code == 200
        assert response.json() == {"data": [], "count": 0}

    def test_active_table_setting_is_default(self, client):
        client.put("/api/settings", json={"activeUserTable": "users"})

        assert client.get("/api/users").json()["count"] == 0

    def test_settings_store_failure_uses_default_table(self, client):
        store = MagicMock()
        store.load.side_effect = RepositoryError("relation \"app_settings\" does not exist")
        app.dependency_overrides[get_settings_store] = lambda: store

        response = client.get("/api/users")

        assert response.status_code == 200
        assert response.json()["count"] == 5

    def test_active_table_read_once_per_process(self, client):
        store = MagicMock(wraps=InMemorySettingsStore())
        app.dependency_overrides[get_settings_store] = lambda: store

        client.get("/api/users")
        client.get("/api/users")
        client.get("/api/analytics/stats")

        assert store.load.call_count == 1

    def test_backend_failure_is_generic_500(self, client):
        repository = MagicMock()
        repository.list_users.side_effect = RepositoryError("password authentication failed")
        app.dependency_overrides[get_user_repository] = lambda: repository

        response = client.get("/api/users")

        assert response.status_code == 500
        assert response.json()["detail"] == "Failed to fetch users"
        assert "password" not in response.text


# =============================================================================
# Single-user endpoints
# =============================================================================

class TestUserEndpoints:
    """Test fetch, update, ban/unban and VIP."""

    def test_get_user(self, client, user_ids):
        response = client.get(f"/api/users/{user_ids['Alice Johnson']}")

        assert response.status_code == 200
        assert response.json()["phone"] == "+15550001"

    def test_get_missing_user_is_404(self, client):
        response = client.get(f"/api/users/{MISSING_ID}")

        assert response.status_code == 404
        assert response.json()["code"] == "USER_NOT_FOUND"

    def test_ban_reflected_in_filtered_list(self, client, user_ids):
        user_id = user_ids["Eve Adams"]

        response = client.post(f"/api/users/{user_id}/ban")

        assert response.status_code == 200
        assert response.json()["is_banned"] is True
        assert client.get(f"/api/users/{user_id}").json()["is_banned"] is True
        banned = client.get("/api/users", params={"is_banned": "banned"}).json()["data"]
        assert user_id in {user["id"] for user in banned}

    def test_unban(self, client, user_ids):
        response = client.post(f"/api/users/{user_ids['bob martin']}/unban")

        assert response.status_code == 200
        assert response.json()["is_banned"] is False

    def test_ban_missing_user_is_404(self, client):
        assert client.post(f"/api/users/{MISSING_ID}/ban").status_code == 404

    def test_update_empty_expiration_reads_back_null(self, client, user_ids):
        user_id = user_ids["Carol White"]

        response = client.put(f"/api/users/{user_id}", json={"name": "Carol", "expired_at": ""})

        assert response.status_code == 200
        assert response.json()["expired_at"] is None
        assert client.get(f"/api/users/{user_id}").json()["expired_at"] is None

    def test_update_sets_expiration(self, client, user_ids):
        response = client.put(
            f"/api/users/{user_ids['Dave Black']}",
            json={"name": "Dave Black", "expired_at": "2026-03-31"},
        )

        assert response.status_code == 200
        assert response.json()["expired_at"].startswith("2026-03-31T00:00:00")

    def test_update_invalid_expiration_is_400(self, client, user_ids):
        response = client.put(
            f"/api/users/{user_ids['Dave Black']}", json={"expired_at": "soon"}
        )

        assert response.status_code == 400
        assert "expired_at" in response.json()["fields"]

    def test_set_vip(self, client, user_ids):
        response = client.post(f"/api/users/{user_ids['Dave Black']}/vip", json={"isVip": True})

        assert response.status_code == 200
        assert response.json()["is_vip"] is True

    @pytest.mark.parametrize("body", [
        {"isVip": "true"}, {"isVip": 1}, {}, {"is_vip": "yes"}, {"is_vip": True},
    ])
    def test_vip_non_boolean_is_400_and_unchanged(self, client, user_ids, body):
        user_id = user_ids["Dave Black"]

        response = client.post(f"/api/users/{user_id}/vip", json=body)

        assert response.status_code == 400
        assert client.get(f"/api/users/{user_id}").json()["is_vip"] is False

    def test_malformed_id_is_400(self, client):
        assert client.get("/api/users/not-a-uuid").status_code == 400


# =============================================================================
# Analytics
# =============================================================================

class TestAnalyticsEndpoints:
    """Test stats and activity."""

    def test_stats(self, client):
        response = client.get("/api/analytics/stats")

        assert response.status_code == 200
        body = response.json()
        assert body["totalUsers"] == 5
        assert body["activeUsers"] == 3
        assert body["bannedUsers"] == 2
        assert body["vipUsers"] == 2
        assert "newUsers" in body

    def test_activity_returns_n_days(self, client):
        response = client.get("/api/analytics/activity", params={"days": 7})

        assert response.status_code == 200
        points = response.json()
        assert len(points) == 7
        assert set(points[0]) == {"date", "userCount"}
        dates = [point["date"] for point in points]
        assert dates == sorted(dates)

    def test_activity_defaults_to_30_days(self, client):
        assert len(client.get("/api/analytics/activity").json()) == 30

    def test_activity_rejects_bad_days(self, client):
        assert client.get("/api/analytics/activity", params={"days": 0}).status_code == 400
        assert client.get("/api/analytics/activity", params={"days": "x"}).status_code == 400


# =============================================================================
# Settings
# =============================================================================

class TestSettingsEndpoints:
    """Test settings get and merge-update."""

    def test_get_defaults(self, client):
        response = client.get("/api/settings")

        assert response.status_code == 200
        assert response.json() == {
            "allowRegistration": True,
            "maintenanceMode": False,
            "vipFeatures": ["Priority Support", "Extended Expiration", "Premium Content"],
            "appVersion": "1.0.0",
            "notificationMessage": "",
            "activeUserTable": "users2",
        }

    def test_partial_update_keeps_app_version(self, client):
        response = client.put("/api/settings", json={"maintenanceMode": True})

        assert response.status_code == 200
        assert response.json()["maintenanceMode"] is True
        assert response.json()["appVersion"] == "1.0.0"
        assert client.get("/api/settings").json()["appVersion"] == "1.0.0"

    def test_invalid_update_is_400(self, client):
        response = client.put("/api/settings", json={"allowRegistration": "sometimes"})

        assert response.status_code == 400


# =============================================================================
# Health
# =============================================================================

class TestHealthEndpoints:
    """Test health checks."""

    def test_health(self, client):
        response = client.get("/api/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    def test_ready(self, client):
        response = client.get("/api/health/ready")

        assert response.status_code == 200
        assert response.json()["status"] == "ready"

    def test_live(self, client):
        assert client.get("/api/health/live").json()["status"] == "alive"
