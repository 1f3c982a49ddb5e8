# =============================================================================
# app/routers/settings.py - Admin Settings Endpoints
# =============================================================================

from fastapi import APIRouter

from app.dependencies import SettingsServiceDep
from core.models.settings import AppSettings, AppSettingsUpdate

router = APIRouter()


@router.get("", response_model=AppSettings)
async def get_settings(service: SettingsServiceDep):
    """Current application settings."""
    return service.get_settings()


@router.put("", response_model=AppSettings)
async def update_settings(
    request: AppSettingsUpdate,
    service: SettingsServiceDep,
):
    """
    Update application settings.

    Send only the fields to change; the rest keep their current values.
    """
    return service.update_settings(request)
