# =============================================================================
# core/models/ - Pydantic Data Models
# =============================================================================
# This package contains Pydantic schemas for data validation:
# - user.py: User row, filter, update and page schemas
# - analytics.py: Stats and activity trend schemas
# - settings.py: Admin-editable application settings
#
# These models define the "contract" between API and clients.
# =============================================================================

# -----------------------------------------------------------------------------
# User Models
# -----------------------------------------------------------------------------
from .user import (
    BanFilter,
    SortField,
    SortOrder,
    User,
    UserFilter,
    UserPage,
    UserTable,
    UserUpdate,
    VipFilter,
    VipStatusRequest,
)

# -----------------------------------------------------------------------------
# Analytics Models
# -----------------------------------------------------------------------------
from .analytics import ActivityPoint, UserStats

# -----------------------------------------------------------------------------
# Settings Models
# -----------------------------------------------------------------------------
from .settings import DEFAULT_VIP_FEATURES, AppSettings, AppSettingsUpdate

__all__ = [
    # User
    "BanFilter",
    "SortField",
    "SortOrder",
    "User",
    "UserFilter",
    "UserPage",
    "UserTable",
    "UserUpdate",
    "VipFilter",
    "VipStatusRequest",
    # Analytics
    "ActivityPoint",
    "UserStats",
    # Settings
    "DEFAULT_VIP_FEATURES",
    "AppSettings",
    "AppSettingsUpdate",
]
