# =============================================================================
# core/repositories/__init__.py - User Repository Exports
# =============================================================================

from .base import RepositoryError, UserRepository
from .memory_repository import InMemoryUserRepository
from .supabase_repository import SupabaseUserRepository

__all__ = [
    "RepositoryError",
    "UserRepository",
    "InMemoryUserRepository",
    "SupabaseUserRepository",
]
