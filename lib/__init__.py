# =============================================================================
# lib/ - Standalone Utility Modules
# =============================================================================
# This package contains reusable utilities:
# - supabase_client.py: Singleton Supabase client and PostgREST error helpers
# - utils.py: Shared utilities (error base class, UUID and timestamp helpers)
#
# These modules are self-contained and can be tested in isolation.
# =============================================================================

from lib.supabase_client import SupabaseClient, SupabaseClientError
from lib.utils import (
    ApplicationError,
    normalize_uuid,
    parse_timestamp,
    to_iso_timestamp,
)

__all__ = [
    # Supabase
    "SupabaseClient",
    "SupabaseClientError",
    # Utils
    "ApplicationError",
    "normalize_uuid",
    "parse_timestamp",
    "to_iso_timestamp",
]
