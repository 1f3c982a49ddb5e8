# =============================================================================
# app/routers/users.py - User Management Endpoints
# =============================================================================
# List, view, edit, ban/unban and VIP-toggle users.
#
# Every endpoint accepts ?table=users|users2; without it the activeUserTable
# setting decides which table is used.
# =============================================================================

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Path

from app.dependencies import UserFilterDep, UserServiceDep, UserTableDep
from core.models.user import User, UserPage, UserUpdate, VipStatusRequest

router = APIRouter()

UserIdPath = Annotated[UUID, Path(description="User UUID")]


@router.get("", response_model=UserPage)
async def list_users(
    filters: UserFilterDep,
    table: UserTableDep,
    service: UserServiceDep,
):
    """
    List users with filtering, sorting and pagination.

    `count` is the total number of matching users across all pages.
    """
    users, count = service.list_users(table, filters)
    return UserPage(data=users, count=count)


@router.get("/{user_id}", response_model=User)
async def get_user(
    user_id: UserIdPath,
    table: UserTableDep,
    service: UserServiceDep,
):
    """Get one user. Returns 404 if the user does not exist."""
    return service.get_user(table, str(user_id))


@router.put("/{user_id}", response_model=User)
async def update_user(
    user_id: UserIdPath,
    request: UserUpdate,
    table: UserTableDep,
    service: UserServiceDep,
):
    """
    Update a user.

    Only the fields sent are changed, except `expired_at`: an empty,
    null or missing value clears the expiration.
    """
    return service.update_user(table, str(user_id), request)


@router.post("/{user_id}/ban", response_model=User)
async def ban_user(
    user_id: UserIdPath,
    table: UserTableDep,
    service: UserServiceDep,
):
    """Ban a user."""
    return service.ban_user(table, str(user_id))


@router.post("/{user_id}/unban", response_model=User)
async def unban_user(
    user_id: UserIdPath,
    table: UserTableDep,
    service: UserServiceDep,
):
    """Lift a user's ban."""
    return service.unban_user(table, str(user_id))


@router.post("/{user_id}/vip", response_model=User)
async def set_vip_status(
    user_id: UserIdPath,
    request: VipStatusRequest,
    table: UserTableDep,
    service: UserServiceDep,
):
    """
    Grant or revoke VIP status.

    Body: {"isVip": true}. Anything other than a JSON boolean is rejected
    with 400 and the user is left unchanged.
    """
    return service.set_vip_status(table, str(user_id), request.is_vip)
