"""
Feedback router.
Public submission on premium restaurants and owner moderation.
"""

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.orm import Session

from shared.config.constants import FeedbackStatus
from shared.infrastructure.db import get_db
from shared.security.auth import current_user_context
from shared.security.rate_limit import limiter
from shared.utils.schemas import FeedbackCreate, FeedbackOutput
from rest_api.routers._common import get_user_id
from rest_api.services.domain import FeedbackService


router = APIRouter(prefix="/api", tags=["feedback"])


@router.post(
    "/restaurants/{restaurant_id}/feedback/submit",
    response_model=FeedbackOutput,
    status_code=status.HTTP_201_CREATED,
)
@limiter.limit("10/minute")
def submit_feedback(
    request: Request,
    restaurant_id: int,
    body: FeedbackCreate,
    db: Session = Depends(get_db),
) -> FeedbackOutput:
    """
    Leave a 1-5 rating and an optional comment. Starts as pending.

    403 unless the restaurant's owner is on premium.
    """
    return FeedbackService(db).submit(restaurant_id, body.model_dump(exclude_unset=True))


@router.get("/restaurants/{restaurant_id}/feedback", response_model=list[FeedbackOutput])
def list_feedback(
    restaurant_id: int,
    db: Session = Depends(get_db),
    ctx: dict = Depends(current_user_context),
) -> list[FeedbackOutput]:
    """All feedback of the caller's restaurant, newest first."""
    return FeedbackService(db).list_for_owner(restaurant_id, get_user_id(ctx))


@router.post("/feedback/{feedback_id}/approve", response_model=FeedbackOutput)
def approve_feedback(
    feedback_id: int,
    db: Session = Depends(get_db),
    ctx: dict = Depends(current_user_context),
) -> FeedbackOutput:
    return FeedbackService(db).moderate_as_owner(feedback_id, FeedbackStatus.APPROVED, get_user_id(ctx))


@router.post("/feedback/{feedback_id}/reject", response_model=FeedbackOutput)
def reject_feedback(
    feedback_id: int,
    db: Session = Depends(get_db),
    ctx: dict = Depends(current_user_context),
) -> FeedbackOutput:
    return FeedbackService(db).moderate_as_owner(feedback_id, FeedbackStatus.REJECTED, get_user_id(ctx))
