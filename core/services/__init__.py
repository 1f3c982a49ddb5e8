# =============================================================================
# core/services/__init__.py - Service Layer Exports
# =============================================================================

from .user_service import UserService
from .analytics_service import AnalyticsService, build_activity_trend
from .settings_service import (
    ActiveTableCache,
    InMemorySettingsStore,
    SettingsService,
    SettingsStore,
    SupabaseSettingsStore,
)

__all__ = [
    "UserService",
    "AnalyticsService",
    "build_activity_trend",
    "ActiveTableCache",
    "InMemorySettingsStore",
    "SettingsService",
    "SettingsStore",
    "SupabaseSettingsStore",
]
