# =============================================================================
# app/routers/analytics.py - Analytics Endpoints
# =============================================================================
# Headline user counts and the signup trend shown on the analytics page.
# =============================================================================

from typing import Annotated

from fastapi import APIRouter, Query

from app.config import settings
from app.dependencies import AnalyticsServiceDep, UserTableDep
from core.models.analytics import ActivityPoint, UserStats

router = APIRouter()


@router.get("/stats", response_model=UserStats)
async def get_user_stats(
    table: UserTableDep,
    service: AnalyticsServiceDep,
):
    """
    Total, active, banned, VIP and new (last 7 days) user counts.

    Counts are read independently and may be briefly inconsistent with
    each other while users are being modified.
    """
    return await service.get_stats(table)


@router.get("/activity", response_model=list[ActivityPoint])
async def get_user_activity(
    table: UserTableDep,
    service: AnalyticsServiceDep,
    days: Annotated[
        int,
        Query(ge=1, le=settings.MAX_ACTIVITY_DAYS, description="Number of days, including today"),
    ] = settings.DEFAULT_ACTIVITY_DAYS,
):
    """
    Signups per day for the last `days` days.

    Always returns one entry per day, oldest first, with 0 for days
    without signups.
    """
    return await service.get_activity_trend(table, days)
