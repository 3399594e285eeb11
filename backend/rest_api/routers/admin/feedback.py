"""
Feedback moderation across all restaurants.
"""

from typing import Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from shared.config.constants import FeedbackStatus
from shared.infrastructure.db import get_db
from shared.utils.schemas import FeedbackOutput, FeedbackStatusType
from rest_api.routers.admin._base import get_admin_id, require_admin
from rest_api.services.domain import FeedbackService


router = APIRouter(tags=["admin-feedback"])


@router.get("/feedback", response_model=list[FeedbackOutput])
def list_feedback(
    status: Optional[FeedbackStatusType] = None,
    restaurant_id: Optional[int] = Query(None, alias="restaurantId"),
    db: Session = Depends(get_db),
    ctx: dict = Depends(require_admin),
) -> list[FeedbackOutput]:
    """Newest first, optionally filtered by status or restaurant."""
    return FeedbackService(db).list_for_admin(status=status, restaurant_id=restaurant_id)


@router.patch("/feedback/{feedback_id}/approve", response_model=FeedbackOutput)
def approve_feedback(
    feedback_id: int,
    db: Session = Depends(get_db),
    ctx: dict = Depends(require_admin),
) -> FeedbackOutput:
    return FeedbackService(db).moderate_as_admin(feedback_id, FeedbackStatus.APPROVED, get_admin_id(ctx))


@router.patch("/feedback/{feedback_id}/reject", response_model=FeedbackOutput)
def reject_feedback(
    feedback_id: int,
    db: Session = Depends(get_db),
    ctx: dict = Depends(require_admin),
) -> FeedbackOutput:
    return FeedbackService(db).moderate_as_admin(feedback_id, FeedbackStatus.REJECTED, get_admin_id(ctx))
