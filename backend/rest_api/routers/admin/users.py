"""
User management endpoints.

Thin router that delegates to AdminService. Every mutation is written to
admin_log by the service.
"""

from typing import Optional
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from shared.infrastructure.db import get_db
from shared.utils.admin_schemas import (
    AdminUserCreate,
    AdminUserList,
    AdminUserOutput,
    PasswordResetByAdmin,
    SubscriptionChange,
    SubscriptionChangeOutput,
    UserStatusUpdate,
)
from shared.utils.schemas import MessageResponse, Tier
from rest_api.routers._common import Pagination, get_admin_users_pagination
from rest_api.routers.admin._base import get_admin_id, require_admin
from rest_api.services.domain import AdminService


router = APIRouter(tags=["admin-users"])


def _get_service(db: Session) -> AdminService:
    """Get AdminService instance."""
    return AdminService(db)


@router.get("/users", response_model=AdminUserList)
def list_users(
    search: Optional[str] = Query(None, max_length=100),
    tier: Optional[Tier] = None,
    pagination: Pagination = Depends(get_admin_users_pagination),
    db: Session = Depends(get_db),
    ctx: dict = Depends(require_admin),
) -> dict:
    """
    Users newest first, 10 per page.

    search matches username, email or full name; tier filters by subscription.
    """
    users, total = _get_service(db).list_users(
        limit=pagination.limit,
        offset=pagination.offset,
        search=search,
        tier=tier,
    )
    return {"users": users, "pagination": pagination.to_dict(total=total)}


@router.post("/users", response_model=AdminUserOutput, status_code=status.HTTP_201_CREATED)
def create_user(
    body: AdminUserCreate,
    db: Session = Depends(get_db),
    ctx: dict = Depends(require_admin),
):
    return _get_service(db).create_user(body.model_dump(), get_admin_id(ctx))


@router.post("/users/create-admin", response_model=AdminUserOutput, status_code=status.HTTP_201_CREATED)
def create_admin(
    body: AdminUserCreate,
    db: Session = Depends(get_db),
    ctx: dict = Depends(require_admin),
):
    return _get_service(db).create_user(body.model_dump(), get_admin_id(ctx), is_admin=True)


@router.patch("/users/{user_id}/status", response_model=AdminUserOutput)
def update_user_status(
    user_id: int,
    body: UserStatusUpdate,
    db: Session = Depends(get_db),
    ctx: dict = Depends(require_admin),
):
    """Activate or deactivate an account. Deactivation signs the user out."""
    return _get_service(db).set_user_status(user_id, body.is_active, get_admin_id(ctx))


@router.put("/users/{user_id}/reset-password", response_model=MessageResponse)
def reset_user_password(
    user_id: int,
    body: PasswordResetByAdmin,
    db: Session = Depends(get_db),
    ctx: dict = Depends(require_admin),
) -> MessageResponse:
    _get_service(db).reset_user_password(user_id, body.new_password, get_admin_id(ctx))
    return MessageResponse(message="Password reset successfully")


@router.post("/users/{user_id}/subscription", response_model=SubscriptionChangeOutput)
def change_user_subscription(
    user_id: int,
    body: SubscriptionChange,
    db: Session = Depends(get_db),
    ctx: dict = Depends(require_admin),
) -> dict:
    """
    Move a user to free or premium (premium needs a duration).

    Restaurants above the new tier's limit are reported, never deleted.
    """
    user, over_limit = _get_service(db).change_subscription(
        user_id, body.tier, body.duration, get_admin_id(ctx)
    )
    return {"user": user, "over_limit_restaurant_ids": [r.id for r in over_limit]}
