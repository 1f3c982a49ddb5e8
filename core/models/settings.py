# =============================================================================
# core/models/settings.py - Admin Settings Schemas
# =============================================================================
# The admin-editable application settings record:
# - AppSettings: The full record (with defaults)
# - AppSettingsUpdate: A partial record merged into the current one
#
# Fields are exposed in camelCase, which is what the settings page sends.
# =============================================================================

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from .user import UserTable

DEFAULT_VIP_FEATURES = ["Priority Support", "Extended Expiration", "Premium Content"]


class AppSettings(BaseModel):
    """
    Application settings.

    Example:
        {
            "allowRegistration": true,
            "maintenanceMode": false,
            "vipFeatures": ["Priority Support"],
            "appVersion": "1.0.0",
            "notificationMessage": "",
            "activeUserTable": "users2"
        }
    """

    allow_registration: bool = Field(default=True)
    maintenance_mode: bool = Field(default=False)
    vip_features: list[str] = Field(default_factory=lambda: list(DEFAULT_VIP_FEATURES))
    app_version: str = Field(default="1.0.0", min_length=1)
    notification_message: str = Field(default="")
    # Table used by user and analytics endpoints when ?table is omitted
    active_user_table: UserTable = Field(default=UserTable.USERS2)

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class AppSettingsUpdate(BaseModel):
    """
    Partial settings update. Fields left out keep their current value.

    Example:
        {"maintenanceMode": true}
    """

    allow_registration: bool | None = None
    maintenance_mode: bool | None = None
    vip_features: list[str] | None = None
    app_version: str | None = Field(default=None, min_length=1)
    notification_message: str | None = None
    active_user_table: UserTable | None = None

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )

    def changes(self) -> dict:
        """Fields explicitly provided, keyed by attribute name."""
        return {
            key: value
            for key, value in self.model_dump(exclude_unset=True).items()
            if value is not None
        }
