# =============================================================================
# core/services/user_service.py - User Business Logic
# =============================================================================
# Handles user listing, lookup and the admin mutations (edit, ban, VIP).
# Separates HTTP concerns from database/business logic.
# =============================================================================

import logging
from typing import Any

from core.models.user import UserFilter, UserTable, UserUpdate
from core.repositories.base import RepositoryError, UserRepository
from app.exceptions import BackendError, UserNotFoundError

logger = logging.getLogger(__name__)


class UserService:
    """
    Service for user management operations.

    Provides a clean interface between API routes and the user repository.
    There is no optimistic concurrency check: the last write wins.
    """

    def __init__(self, repository: UserRepository):
        self.repository = repository

    def list_users(
        self,
        table: UserTable,
        filters: UserFilter,
    ) -> tuple[list[dict[str, Any]], int]:
        """
        List users matching a filter, one page at a time.

        Args:
            table: User table to read
            filters: Validated filter, sort and pagination parameters

        Returns:
            Tuple of (users on the page, total matching count)

        Raises:
            BackendError: If the query fails
        """
        try:
            return self.repository.list_users(table, filters)
        except RepositoryError as e:
            logger.error(f"Failed to list users from {table.value}: {e}")
            raise BackendError("Failed to fetch users") from e

    def get_user(self, table: UserTable, user_id: str) -> dict[str, Any]:
        """
        Get a user by ID.

        Raises:
            UserNotFoundError: If no user has this ID
            BackendError: If the query fails
        """
        try:
            user = self.repository.get_user(table, user_id)
        except RepositoryError as e:
            logger.error(f"Failed to fetch user {user_id} from {table.value}: {e}")
            raise BackendError("Failed to fetch user") from e

        if not user:
            raise UserNotFoundError(user_id, table.value)
        return user

    def update_user(
        self,
        table: UserTable,
        user_id: str,
        update: UserUpdate,
    ) -> dict[str, Any]:
        """
        Apply a partial update.

        Args:
            table: User table to write
            user_id: The user ID
            update: Validated partial update (expiration already normalized)

        Returns:
            The updated user row

        Raises:
            UserNotFoundError: If no user has this ID
            BackendError: If the write fails
        """
        return self._apply(table, user_id, update.to_changes(), "update user")

    def ban_user(self, table: UserTable, user_id: str) -> dict[str, Any]:
        return self._apply(table, user_id, {"is_banned": True}, "ban user")

    def unban_user(self, table: UserTable, user_id: str) -> dict[str, Any]:
        return self._apply(table, user_id, {"is_banned": False}, "unban user")

    def set_vip_status(self, table: UserTable, user_id: str, is_vip: bool) -> dict[str, Any]:
        return self._apply(table, user_id, {"is_vip": is_vip}, "update VIP status")

    def _apply(
        self,
        table: UserTable,
        user_id: str,
        changes: dict[str, Any],
        action: str,
    ) -> dict[str, Any]:
        try:
            user = self.repository.update_user(table, user_id, changes)
        except RepositoryError as e:
            logger.error(f"Failed to {action} {user_id} in {table.value}: {e}")
            raise BackendError(f"Failed to {action}") from e

        if not user:
            raise UserNotFoundError(user_id, table.value)

        logger.info(f"Updated user {user_id} in {table.value}: {sorted(changes)}")
        return user
