"""User directory API endpoints."""

from uuid import UUID

from fastapi import APIRouter

from edupulse.auth.dependencies import CurrentUser
from edupulse.users.dependencies import UserServiceDep
from edupulse.users.schemas import (
    AdminStatsResponse,
    InstructorStatsResponse,
    MessageResponse,
    StudentStatsResponse,
    SyncProfileRequest,
    UserListResponse,
    UserResponse,
)


router = APIRouter(prefix="/users", tags=["users"])


@router.put(
    "/me",
    response_model=UserResponse,
    summary="Sync my profile",
)
def sync_my_profile(
    data: SyncProfileRequest,
    user_service: UserServiceDep,
    user: CurrentUser,
) -> UserResponse:
    """Create or refresh the caller's profile from their token identity."""
    return UserResponse.model_validate(user_service.sync_profile(user, data))


@router.get(
    "/me/stats",
    response_model=StudentStatsResponse | InstructorStatsResponse | AdminStatsResponse,
    summary="Get my dashboard stats",
)
def get_my_stats(
    user_service: UserServiceDep,
    user: CurrentUser,
) -> StudentStatsResponse | InstructorStatsResponse | AdminStatsResponse:
    """Dashboard numbers for the caller's role."""
    return user_service.dashboard_stats(user)


@router.get(
    "",
    response_model=UserListResponse,
    summary="List users (admin)",
)
def list_users(
    user_service: UserServiceDep,
    user: CurrentUser,
) -> UserListResponse:
    """List every user, newest first (ADMIN only)."""
    items = [UserResponse.model_validate(u) for u in user_service.list_users(user)]
    return UserListResponse(items=items, total=len(items))


@router.delete(
    "/{user_id}",
    response_model=MessageResponse,
    summary="Delete user (admin)",
)
def delete_user(
    user_id: UUID,
    user_service: UserServiceDep,
    user: CurrentUser,
) -> MessageResponse:
    """Delete a non-admin user and cascade their courses or enrollments."""
    user_service.delete_user(user, user_id)
    return MessageResponse(message="User deleted successfully")
