"""
Dietary preference router.

Diners do not need an account: without a token the record is keyed by a
sessionId the client keeps. A signed-in diner's record is keyed by user id.
"""

from typing import Optional
from fastapi import APIRouter, Depends, Query, Request, Response, status
from sqlalchemy.orm import Session

from shared.infrastructure.db import get_db
from shared.security.auth import optional_user_context
from shared.security.rate_limit import limiter
from shared.utils.schemas import (
    DietaryPreferenceInput,
    DietaryPreferenceOutput,
    DietaryUpsertResponse,
)
from rest_api.routers._common import get_optional_user_id
from rest_api.services.domain import DietaryService


router = APIRouter(prefix="/api/dietary-preferences", tags=["dietary"])


@router.get("", response_model=DietaryPreferenceOutput)
def get_dietary_preferences(
    session_id: Optional[str] = Query(None, alias="sessionId"),
    db: Session = Depends(get_db),
    ctx: Optional[dict] = Depends(optional_user_context),
):
    """The caller's record: by user when signed in, else by sessionId. 404 if none."""
    return DietaryService(db).get_for_caller(get_optional_user_id(ctx), session_id)


@router.post("", response_model=DietaryUpsertResponse)
@limiter.limit("30/minute")
def upsert_dietary_preferences(
    request: Request,
    response: Response,
    body: DietaryPreferenceInput,
    db: Session = Depends(get_db),
    ctx: Optional[dict] = Depends(optional_user_context),
) -> DietaryUpsertResponse:
    """
    Create or update the caller's record.

    Only fields present in the body are written; preferences and allergies
    replace the stored values. Anonymous callers without a sessionId get a
    new one back. 201 on create, 200 on update.
    """
    data = body.model_dump(exclude_unset=True)
    data.pop("session_id", None)

    result = DietaryService(db).upsert(
        data,
        user_id=get_optional_user_id(ctx),
        session_id=body.session_id,
    )
    if result.created:
        response.status_code = status.HTTP_201_CREATED

    return DietaryUpsertResponse(
        preference=DietaryPreferenceOutput.model_validate(result.preference),
        session_id=result.session_id,
    )
