# =============================================================================
# core/models/user.py - User Schemas
# =============================================================================
# These models define the API contract for user operations:
# - User: A row from the users/users2 table as returned to clients
# - UserFilter: Validated list/filter/sort/pagination parameters
# - UserUpdate: Partial update body (with expiration normalization)
# - VipStatusRequest: Body of the VIP toggle endpoint
# - UserPage: One page of users plus the total matching count
#
# Users are created by the mobile app's registration flow; this API only
# reads and mutates them.
# =============================================================================

from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, StrictBool, field_validator

from lib.utils import parse_timestamp, to_iso_timestamp


class UserTable(str, Enum):
    """
    Tables holding user rows. Both have the same columns.

    - users: legacy table
    - users2: current table
    """
    USERS = "users"
    USERS2 = "users2"


class VipFilter(str, Enum):
    """VIP tri-state filter."""
    ALL = "all"
    VIP = "vip"
    NON_VIP = "non-vip"

    def as_flag(self) -> bool | None:
        """Equality value to filter on, or None for no filter."""
        return {VipFilter.VIP: True, VipFilter.NON_VIP: False}.get(self)


class BanFilter(str, Enum):
    """Ban tri-state filter."""
    ALL = "all"
    BANNED = "banned"
    ACTIVE = "active"

    def as_flag(self) -> bool | None:
        """Equality value to filter on, or None for no filter."""
        return {BanFilter.BANNED: True, BanFilter.ACTIVE: False}.get(self)


class SortField(str, Enum):
    """Columns the user list can be sorted by."""
    NAME = "name"
    CREATED_AT = "created_at"
    LAST_LOGIN = "last_login"
    EXPIRED_AT = "expired_at"


class SortOrder(str, Enum):
    ASC = "asc"
    DESC = "desc"


class User(BaseModel):
    """
    A user account row.

    Example:
        {
            "id": "550e8400-e29b-41d4-a716-446655440000",
            "name": "Jane Doe",
            "phone": "+15550100",
            "passcode_hash": "$2b$10$...",
            "imei": "356938035643809",
            "is_vip": false,
            "is_banned": false,
            "created_at": "2025-01-15T10:30:00Z",
            "expired_at": null,
            "last_login": "2025-02-01T08:00:00Z",
            "current_device": "Pixel 8"
        }
    """

    id: str = Field(..., description="Unique user identifier (UUID)")
    name: str = Field(..., description="Display name")
    phone: str = Field(..., description="Phone number, unique across users")
    passcode_hash: str = Field(..., description="Hashed login passcode")
    imei: str = Field(..., description="Registered device IMEI")
    is_vip: bool = Field(default=False, description="VIP entitlement flag")
    is_banned: bool = Field(default=False, description="Access denied flag")
    created_at: datetime | None = Field(default=None, description="Registration time")
    expired_at: datetime | None = Field(
        default=None,
        description="Account expiration; null means no expiration"
    )
    last_login: datetime | None = Field(default=None, description="Last login time")
    current_device: str | None = Field(default=None, description="Device currently logged in")

    model_config = ConfigDict(from_attributes=True, extra="ignore")

    @field_validator("is_vip", "is_banned", mode="before")
    @classmethod
    def _null_flag_is_false(cls, value: Any) -> Any:
        # Both columns default to false but are nullable
        return False if value is None else value


class UserPage(BaseModel):
    """
    One page of users.

    `count` is the total number of rows matching the filter, not the page
    length, so clients can compute the number of pages.
    """
    data: list[User] = Field(default_factory=list)
    count: int = Field(default=0, ge=0)


class UserFilter(BaseModel):
    """
    Validated parameters for listing users.

    Defaults: all users, newest first, page 1 of 10.
    """

    name: str | None = Field(default=None, description="Case-insensitive name substring")
    phone: str | None = Field(default=None, description="Case-insensitive phone substring")
    is_vip: VipFilter = Field(default=VipFilter.ALL)
    is_banned: BanFilter = Field(default=BanFilter.ALL)
    sort_by: SortField = Field(default=SortField.CREATED_AT)
    sort_order: SortOrder = Field(default=SortOrder.DESC)
    page: int = Field(default=1, ge=1, description="Page number (1-indexed)")
    limit: int = Field(default=10, ge=1, le=100, description="Users per page")

    @field_validator("name", "phone")
    @classmethod
    def _blank_is_none(cls, value: str | None) -> str | None:
        if value is None:
            return None
        value = value.strip()
        return value or None

    def row_range(self) -> tuple[int, int]:
        """
        Inclusive (start, end) row offsets for the requested page.

        Example:
            UserFilter(page=3, limit=10).row_range()  # (20, 29)
        """
        start = (self.page - 1) * self.limit
        return start, start + self.limit - 1


class UserUpdate(BaseModel):
    """
    Partial update of a user.

    Only fields present in the request body are written. `expired_at` is the
    exception: empty, null or absent all mean "no expiration" and are written
    as null, matching how the admin edit form submits it. Date or datetime
    strings are stored as canonical UTC timestamps.

    Example:
        {"name": "Jane Doe", "is_vip": true, "expired_at": "2025-12-31"}
    """

    name: str | None = Field(default=None, min_length=1, max_length=255)
    phone: str | None = Field(default=None, min_length=1, max_length=32)
    imei: str | None = Field(default=None, min_length=1, max_length=64)
    is_vip: bool | None = None
    is_banned: bool | None = None
    expired_at: str | None = Field(
        default=None,
        description="ISO date/datetime, or empty/null for no expiration"
    )

    model_config = ConfigDict(extra="ignore")

    @field_validator("expired_at", mode="before")
    @classmethod
    def _normalize_expiration(cls, value: Any) -> str | None:
        if value is None:
            return None
        if isinstance(value, str) and not value.strip():
            return None
        if not isinstance(value, (str, datetime)):
            raise ValueError("expired_at must be a date string or null")
        try:
            return to_iso_timestamp(parse_timestamp(value))
        except ValueError as e:
            raise ValueError(f"expired_at is not a valid date: {value!r}") from e

    def to_changes(self) -> dict[str, Any]:
        """Column values to write, always including expired_at."""
        changes = self.model_dump(exclude_unset=True, exclude={"expired_at"})
        # Explicit nulls for non-nullable columns are dropped, not written
        changes = {key: value for key, value in changes.items() if value is not None}
        changes["expired_at"] = self.expired_at
        return changes


class VipStatusRequest(BaseModel):
    """Body of POST /users/{id}/vip. Only a JSON boolean is accepted."""
    is_vip: StrictBool = Field(..., alias="isVip")
