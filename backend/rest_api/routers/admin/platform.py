"""
Platform-wide read endpoints: restaurants, subscriptions, registration
analytics and the admin audit log.
"""

from datetime import datetime
from typing import Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from shared.config.constants import Limits
from shared.infrastructure.db import get_db
from shared.utils.admin_schemas import (
    AdminLogOutput,
    AdminRestaurantOutput,
    RegistrationAnalyticsOutput,
    SubscriptionOutput,
)
from rest_api.routers.admin._base import require_admin
from rest_api.services.domain import AdminService


router = APIRouter(tags=["admin-platform"])


@router.get("/restaurants", response_model=list[AdminRestaurantOutput])
def list_restaurants(
    db: Session = Depends(get_db),
    ctx: dict = Depends(require_admin),
) -> list[AdminRestaurantOutput]:
    """Every restaurant with owner details, content counts and last visit."""
    output = []
    for row in AdminService(db).list_restaurants():
        restaurant = row.pop("restaurant")
        output.append(
            AdminRestaurantOutput(
                id=restaurant.id,
                name=restaurant.name,
                user_id=restaurant.user_id,
                cuisine=restaurant.cuisine,
                qr_code_scans=restaurant.qr_code_scans or 0,
                created_at=restaurant.created_at,
                **row,
            )
        )
    return output


@router.get("/subscriptions", response_model=list[SubscriptionOutput])
def list_subscriptions(
    db: Session = Depends(get_db),
    ctx: dict = Depends(require_admin),
):
    return AdminService(db).list_subscriptions()


@router.get("/registration-analytics", response_model=RegistrationAnalyticsOutput)
def get_registration_analytics(
    start_date: Optional[datetime] = Query(None, alias="startDate"),
    end_date: Optional[datetime] = Query(None, alias="endDate"),
    source: Optional[str] = Query(None, max_length=100),
    db: Session = Depends(get_db),
    ctx: dict = Depends(require_admin),
) -> dict:
    """
    Registrations between startDate and endDate (default: the last 30 days)
    and a per-source breakdown.
    """
    return AdminService(db).registration_analytics(start_date, end_date, source)


@router.get("/logs", response_model=list[AdminLogOutput])
def list_admin_logs(
    limit: int = Query(Limits.DEFAULT_ADMIN_LOG_LIMIT, ge=1, le=Limits.MAX_PAGE_SIZE),
    db: Session = Depends(get_db),
    ctx: dict = Depends(require_admin),
):
    """Most recent admin actions first."""
    return AdminService(db).list_logs(limit)
