# =============================================================================
# lib/supabase_client.py - Supabase Client Wrapper
# =============================================================================
# This module owns the single Supabase client used by the application.
# It implements the singleton pattern so every repository and store shares
# one connection, created lazily on first use.
#
# Query logic lives in core/repositories/ and core/services/settings_service.py;
# this module only creates the client and recognizes PostgREST error codes.
#
# Usage:
#   from lib.supabase_client import SupabaseClient
#   client = SupabaseClient.get_client()
#   client.table("users2").select("*").execute()
# =============================================================================

from __future__ import annotations

import logging
from typing import Any

from supabase import create_client, Client

from app.config import settings

# Set up logging for this module
logger = logging.getLogger(__name__)

# PostgREST code returned by .single() when the query matched no rows
NO_ROWS_CODE = "PGRST116"


class SupabaseClientError(Exception):
    """
    Error while creating or talking to the Supabase client.

    Provides actionable error messages following the principle:
    "Errors should tell HOW to fix, not just WHAT failed."
    """

    def __init__(
        self,
        message: str,
        code: str = "SUPABASE_ERROR",
        suggestion: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.code = code
        self.message = message
        self.suggestion = suggestion
        self.details = details or {}

    def __str__(self) -> str:
        result = f"[{self.code}] {self.message}"
        if self.suggestion:
            result += f" Suggestion: {self.suggestion}"
        return result


class SupabaseClient:
    """
    Process-wide holder for the Supabase client.

    All methods are class methods for easy access without instantiation.

    Example:
        client = SupabaseClient.get_client()
        response = client.table("users2").select("*", count="exact").execute()
    """

    _instance: Client | None = None

    @classmethod
    def get_client(cls) -> Client:
        """
        Get or create the singleton Supabase client.

        Uses the configured service key, which bypasses Row Level Security.
        This is appropriate for server-side admin operations.

        Returns:
            Client: Supabase client instance

        Raises:
            SupabaseClientError: If client creation fails
        """
        if cls._instance is None:
            try:
                cls._instance = create_client(
                    settings.SUPABASE_URL,
                    settings.SUPABASE_KEY,
                )
                logger.info("Supabase client initialized successfully")
            except Exception as e:
                raise SupabaseClientError(
                    message=f"Failed to create Supabase client: {e}",
                    code="CLIENT_INIT_FAILED",
                    suggestion="Check SUPABASE_URL and SUPABASE_KEY in your .env file",
                ) from e
        return cls._instance

    @staticmethod
    def is_no_rows_error(error: Exception) -> bool:
        """
        Check whether an exception is PostgREST's "no rows" error.

        postgrest-py raises APIError with a `code` attribute; older versions
        only expose the code in the message, so both are checked.
        """
        code = getattr(error, "code", None)
        return code == NO_ROWS_CODE or NO_ROWS_CODE in str(error)
