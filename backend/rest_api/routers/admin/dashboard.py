"""
Admin dashboard endpoint: platform totals, newest users, and registration
and view counts per period.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from shared.infrastructure.db import get_db
from shared.utils.admin_schemas import DashboardOutput
from rest_api.routers.admin._base import require_admin
from rest_api.services.domain import AdminService


router = APIRouter(tags=["admin-dashboard"])


@router.get("/dashboard", response_model=DashboardOutput)
def get_dashboard(
    db: Session = Depends(get_db),
    ctx: dict = Depends(require_admin),
) -> dict:
    return AdminService(db).dashboard()
