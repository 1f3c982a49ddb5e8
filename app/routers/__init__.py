# =============================================================================
# app/routers/ - API Route Definitions
# =============================================================================
# This package contains FastAPI routers organized by feature:
# - health.py: Health check endpoints
# - users.py: User listing and admin actions
# - analytics.py: Stats and activity trend
# - settings.py: Application settings
#
# Each router is mounted in main.py with a URL prefix.
# =============================================================================

from . import health
from . import users
from . import analytics
from . import settings

__all__ = [
    "health",
    "users",
    "analytics",
    "settings",
]
