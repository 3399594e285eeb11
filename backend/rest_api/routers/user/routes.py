"""
Account router for signed-in owners: subscription status and image quota.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from shared.infrastructure.db import get_db
from shared.security.auth import current_user_context
from shared.utils.schemas import ImageUsageOutput, SubscriptionStatusOutput
from rest_api.routers._common import get_user_id
from rest_api.services.domain import SubscriptionService


router = APIRouter(prefix="/api/user", tags=["user"])


@router.get("/subscription-status", response_model=SubscriptionStatusOutput)
def get_subscription_status(
    db: Session = Depends(get_db),
    ctx: dict = Depends(current_user_context),
) -> dict:
    """
    Tier, limits and expiry. An expired premium account is downgraded
    before the status is computed.
    """
    return SubscriptionService(db).get_subscription_status(get_user_id(ctx))


@router.get("/image-usage", response_model=ImageUsageOutput)
def get_image_usage(
    db: Session = Depends(get_db),
    ctx: dict = Depends(current_user_context),
) -> dict:
    return SubscriptionService(db).image_usage(get_user_id(ctx))
