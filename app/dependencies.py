# =============================================================================
# app/dependencies.py - Shared Dependencies
# =============================================================================
# FastAPI dependency injection for shared resources.
# These are injected into route handlers using Depends(), and replaced in
# tests through app.dependency_overrides.
# =============================================================================

from functools import lru_cache
from typing import Annotated

from fastapi import Depends, Query

from app.config import settings
from core.models.user import (
    BanFilter,
    SortField,
    SortOrder,
    UserFilter,
    UserTable,
    VipFilter,
)
from core.repositories import SupabaseUserRepository, UserRepository
from core.services import (
    ActiveTableCache,
    AnalyticsService,
    InMemorySettingsStore,
    SettingsService,
    SettingsStore,
    SupabaseSettingsStore,
    UserService,
)


# =============================================================================
# Storage
# =============================================================================

@lru_cache
def get_user_repository() -> UserRepository:
    """Repository for user rows (Supabase)."""
    return SupabaseUserRepository()


@lru_cache
def get_settings_store() -> SettingsStore:
    """
    Store for the admin settings record, chosen by SETTINGS_BACKEND.

    Cached so the in-memory store keeps its state between requests.
    """
    if settings.SETTINGS_BACKEND == "memory":
        return InMemorySettingsStore()
    return SupabaseSettingsStore(table=settings.SETTINGS_TABLE)


@lru_cache
def get_active_table() -> ActiveTableCache:
    """Process-wide copy of the activeUserTable setting."""
    return ActiveTableCache(default=UserTable(settings.DEFAULT_USER_TABLE))


# =============================================================================
# Services
# =============================================================================

def get_user_service(
    repository: Annotated[UserRepository, Depends(get_user_repository)],
) -> UserService:
    return UserService(repository)


def get_analytics_service(
    repository: Annotated[UserRepository, Depends(get_user_repository)],
) -> AnalyticsService:
    return AnalyticsService(repository)


def get_settings_service(
    store: Annotated[SettingsStore, Depends(get_settings_store)],
    active_table: Annotated[ActiveTableCache, Depends(get_active_table)],
) -> SettingsService:
    return SettingsService(store, active_table)


# =============================================================================
# Request Parameters
# =============================================================================

def get_user_table(
    settings_service: Annotated[SettingsService, Depends(get_settings_service)],
    table: Annotated[
        UserTable | None,
        Query(description="User table to query; defaults to the activeUserTable setting"),
    ] = None,
) -> UserTable:
    """
    Resolve which user table a request operates on.

    An explicit ?table wins; otherwise the activeUserTable setting is used,
    served from the in-process copy rather than a store read.
    """
    if table is not None:
        return table
    return settings_service.active_user_table()


def get_user_filter(
    name: Annotated[str | None, Query(description="Name contains (case-insensitive)")] = None,
    phone: Annotated[str | None, Query(description="Phone contains (case-insensitive)")] = None,
    is_vip: Annotated[VipFilter, Query(description="VIP filter")] = VipFilter.ALL,
    is_banned: Annotated[BanFilter, Query(description="Ban filter")] = BanFilter.ALL,
    sort_by: Annotated[SortField, Query(alias="sortBy", description="Sort column")] = SortField.CREATED_AT,
    sort_order: Annotated[SortOrder, Query(alias="sortOrder", description="Sort direction")] = SortOrder.DESC,
    page: Annotated[int, Query(ge=1, description="Page number")] = 1,
    limit: Annotated[int, Query(ge=1, le=100, description="Users per page")] = 10,
) -> UserFilter:
    """Parse list query parameters into a UserFilter."""
    return UserFilter(
        name=name,
        phone=phone,
        is_vip=is_vip,
        is_banned=is_banned,
        sort_by=sort_by,
        sort_order=sort_order,
        page=page,
        limit=limit,
    )


# Type aliases for dependency injection
UserServiceDep = Annotated[UserService, Depends(get_user_service)]
AnalyticsServiceDep = Annotated[AnalyticsService, Depends(get_analytics_service)]
SettingsServiceDep = Annotated[SettingsService, Depends(get_settings_service)]
UserTableDep = Annotated[UserTable, Depends(get_user_table)]
UserFilterDep = Annotated[UserFilter, Depends(get_user_filter)]
