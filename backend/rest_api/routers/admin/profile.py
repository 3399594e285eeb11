"""
The signed-in admin's own profile.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from shared.infrastructure.db import get_db
from shared.utils.admin_schemas import AdminProfileUpdate, AdminUserOutput
from rest_api.routers.admin._base import get_admin_id, require_admin
from rest_api.services.domain import AdminService


router = APIRouter(tags=["admin-profile"])


@router.get("/profile", response_model=AdminUserOutput)
def get_profile(
    db: Session = Depends(get_db),
    ctx: dict = Depends(require_admin),
):
    return AdminService(db).get_profile(get_admin_id(ctx))


@router.patch("/profile", response_model=AdminUserOutput)
def update_profile(
    body: AdminProfileUpdate,
    db: Session = Depends(get_db),
    ctx: dict = Depends(require_admin),
):
    """Change username, email, full name or password (needs currentPassword)."""
    return AdminService(db).update_profile(get_admin_id(ctx), body.model_dump(exclude_unset=True))
