# =============================================================================
# core/models/analytics.py - Analytics Schemas
# =============================================================================
# Derived, read-only aggregates over the user table. Field names are
# serialized in camelCase to match the dashboard's chart components.
# =============================================================================

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class UserStats(BaseModel):
    """
    Headline user counts.

    Each count comes from an independent query, so the numbers may be
    momentarily inconsistent with each other while users are being updated.

    Example:
        {
            "totalUsers": 120,
            "activeUsers": 115,
            "bannedUsers": 5,
            "vipUsers": 12,
            "newUsers": 9
        }
    """

    total_users: int = Field(default=0, ge=0)
    active_users: int = Field(default=0, ge=0)
    banned_users: int = Field(default=0, ge=0)
    vip_users: int = Field(default=0, ge=0)
    # Created within the last 7 days
    new_users: int = Field(default=0, ge=0)

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ActivityPoint(BaseModel):
    """Signups on one calendar day. Example: {"date": "2025-01-15", "userCount": 3}"""

    date: str = Field(..., description="Calendar date, YYYY-MM-DD")
    user_count: int = Field(default=0, ge=0)

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)
