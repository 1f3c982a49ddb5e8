# =============================================================================
# tests/conftest.py - Pytest Configuration
# =============================================================================
# This module provides pytest fixtures and configuration for all tests.
#
# Key features:
# - Sets up mock environment variables before any imports
# - Provides an in-memory repository seeded with sample users
# - Provides a TestClient wired to in-memory storage
# =============================================================================

import os

# =============================================================================
# Set up test environment BEFORE any imports
# =============================================================================
# This must happen before importing app.config which loads settings immediately

os.environ.setdefault("SUPABASE_URL", "https://test-project.supabase.co")
os.environ.setdefault("SUPABASE_KEY", "test-service-key")
os.environ.setdefault("SETTINGS_BACKEND", "memory")
os.environ.setdefault("ENVIRONMENT", "development")
os.environ.setdefault("DEBUG", "true")

import pytest

from core.models.user import UserFilter, UserTable
from core.repositories import InMemoryUserRepository
from core.services import ActiveTableCache, InMemorySettingsStore


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def sample_users():
    """Five users in users2 covering every VIP/ban combination."""
    return [
        {
            "name": "Alice Johnson",
            "phone": "+15550001",
            "passcode_hash": "hash-a",
            "imei": "356938035643801",
            "is_vip": True,
            "is_banned": False,
            "created_at": "2025-01-10T09:00:00+00:00",
            "last_login": "2025-02-01T08:00:00+00:00",
        },
        {
            "name": "bob martin",
            "phone": "+15550002",
            "passcode_hash": "hash-b",
            "imei": "356938035643802",
            "is_vip": False,
            "is_banned": True,
            "created_at": "2025-01-11T09:00:00+00:00",
        },
        {
            "name": "Carol White",
            "phone": "+15550003",
            "passcode_hash": "hash-c",
            "imei": "356938035643803",
            "is_vip": True,
            "is_banned": True,
            "created_at": "2025-01-12T09:00:00+00:00",
            "expired_at": "2025-06-30T00:00:00+00:00",
        },
        {
            "name": "Dave Black",
            "phone": "+15559004",
            "passcode_hash": "hash-d",
            "imei": "356938035643804",
            "created_at": "2025-01-13T09:00:00+00:00",
        },
        {
            "name": "Eve Adams",
            "phone": "+15559005",
            "passcode_hash": "hash-e",
            "imei": "356938035643805",
            "created_at": "2025-01-14T09:00:00+00:00",
        },
    ]


@pytest.fixture
def repository(sample_users):
    """In-memory repository with the sample users in users2."""
    return InMemoryUserRepository({UserTable.USERS2: sample_users})


@pytest.fixture
def settings_store():
    """Fresh in-memory settings store."""
    return InMemorySettingsStore()


@pytest.fixture
def active_table():
    """Empty process-local copy of the activeUserTable setting."""
    return ActiveTableCache()


@pytest.fixture
def user_ids(repository):
    """Map of user name to generated id."""
    rows, _ = repository.list_users(UserTable.USERS2, UserFilter(limit=100))
    return {row["name"]: row["id"] for row in rows}


@pytest.fixture
def client(repository, settings_store, active_table):
    """TestClient backed by the in-memory repository and settings store."""
    from fastapi.testclient import TestClient

    from app.dependencies import get_active_table, get_settings_store, get_user_repository
    from app.main import app

    app.dependency_overrides[get_user_repository] = lambda: repository
    app.dependency_overrides[get_settings_store] = lambda: settings_store
    app.dependency_overrides[get_active_table] = lambda: active_table

    with TestClient(app, raise_server_exceptions=False) as test_client:
        yield test_client

    app.dependency_overrides.clear()