# =============================================================================
# core/services/analytics_service.py - User Analytics
# =============================================================================
# Read-only aggregates over the user table:
# - get_stats(): five headline counts, queried concurrently
# - get_activity_trend(): signups per day over a trailing window
#
# The Supabase client is synchronous, so concurrent queries run in worker
# threads via asyncio.to_thread.
# =============================================================================

import asyncio
import logging
from datetime import date, datetime, time, timedelta, tzinfo
from typing import Callable, Iterable

from core.models.analytics import ActivityPoint, UserStats
from core.models.user import UserTable
from core.repositories.base import RepositoryError, UserRepository
from app.exceptions import BackendError
from lib.utils import parse_timestamp

logger = logging.getLogger(__name__)

NEW_USER_WINDOW = timedelta(days=7)


def local_now() -> datetime:
    """Current time on the process-local clock, timezone-aware."""
    return datetime.now().astimezone()


def trend_dates(today: date, days: int) -> list[date]:
    """The `days` calendar dates ending with `today`, oldest first."""
    return [today - timedelta(days=offset) for offset in range(days - 1, -1, -1)]


def build_activity_trend(
    created_at_values: Iterable[str | datetime],
    days: int,
    today: date,
    tz: tzinfo,
) -> list[ActivityPoint]:
    """
    Bucket creation timestamps into per-day signup counts.

    Every date in the window gets an entry, so days without signups appear
    with a count of 0. Timestamps are converted to `tz` before being
    truncated to a date; any that fall outside the window are ignored.

    Args:
        created_at_values: Creation timestamps (ISO strings or datetimes)
        days: Window length, at least 1
        today: Last date of the window
        tz: Timezone that defines calendar days

    Returns:
        Exactly `days` points, ascending by date

    Example:
        build_activity_trend(["2025-01-14T09:00:00Z"], 3, date(2025, 1, 15), timezone.utc)
        # [2025-01-13: 0, 2025-01-14: 1, 2025-01-15: 0]
    """
    buckets = {day: 0 for day in trend_dates(today, days)}

    for value in created_at_values:
        day = parse_timestamp(value).astimezone(tz).date()
        if day in buckets:
            buckets[day] += 1

    return [
        ActivityPoint(date=day.isoformat(), user_count=count)
        for day, count in sorted(buckets.items())
    ]


class AnalyticsService:
    """
    Service for user analytics.

    Args:
        repository: User repository to aggregate over
        clock: Returns the current aware datetime; defines "today" and the
            timezone used for calendar days
    """

    def __init__(
        self,
        repository: UserRepository,
        clock: Callable[[], datetime] = local_now,
    ):
        self.repository = repository
        self.clock = clock

    async def get_stats(self, table: UserTable) -> UserStats:
        """
        Count total, active, banned, VIP and new (last 7 days) users.

        The five counts are independent reads issued concurrently, so they
        are best-effort: a write landing between them can make, for example,
        active + banned differ from total for that one response.

        Raises:
            BackendError: If any count query fails
        """
        since = self.clock() - NEW_USER_WINDOW
        count = self.repository.count_users

        try:
            total, active, banned, vip, new = await asyncio.gather(
                asyncio.to_thread(count, table),
                asyncio.to_thread(count, table, is_banned=False),
                asyncio.to_thread(count, table, is_banned=True),
                asyncio.to_thread(count, table, is_vip=True),
                asyncio.to_thread(count, table, created_since=since),
            )
        except RepositoryError as e:
            logger.error(f"Failed to compute user stats for {table.value}: {e}")
            raise BackendError("Failed to fetch user statistics") from e

        return UserStats(
            total_users=total or 0,
            active_users=active or 0,
            banned_users=banned or 0,
            vip_users=vip or 0,
            new_users=new or 0,
        )

    async def get_activity_trend(self, table: UserTable, days: int) -> list[ActivityPoint]:
        """
        Signups per calendar day for the last `days` days, including today.

        Raises:
            ValueError: If days is less than 1
            BackendError: If the query fails
        """
        if days < 1:
            raise ValueError("days must be at least 1")

        now = self.clock()
        if now.tzinfo is None:
            now = now.astimezone()
        today = now.date()
        window_start = datetime.combine(today - timedelta(days=days - 1), time.min, tzinfo=now.tzinfo)

        try:
            created = await asyncio.to_thread(
                self.repository.list_creation_times, table, window_start
            )
        except RepositoryError as e:
            logger.error(f"Failed to fetch activity trend for {table.value}: {e}")
            raise BackendError("Failed to fetch user activity data") from e

        logger.debug(f"Bucketing {len(created)} signups over {days} days")
        return build_activity_trend(created, days, today, now.tzinfo)
