"""
Menu recommendation router.
Ranks a restaurant's items against the caller's dietary preferences.
"""

from typing import Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from shared.infrastructure.db import get_db
from shared.security.auth import optional_user_context
from shared.utils.schemas import MenuItemOutput, RecommendationOutput
from rest_api.routers._common import get_optional_user_id
from rest_api.services.domain import RecommendationService


router = APIRouter(prefix="/api/menu-recommendations", tags=["recommendations"])


@router.get("/{restaurant_id}", response_model=list[RecommendationOutput])
def get_recommendations(
    restaurant_id: int,
    session_id: Optional[str] = Query(None, alias="sessionId"),
    db: Session = Depends(get_db),
    ctx: Optional[dict] = Depends(optional_user_context),
) -> list[RecommendationOutput]:
    """
    Every item of the restaurant with its score and match flag, best first.

    404 when the restaurant is unknown or the caller has no preferences.
    """
    results = RecommendationService(db).recommend(
        restaurant_id,
        user_id=get_optional_user_id(ctx),
        session_id=session_id,
    )
    return [
        RecommendationOutput(
            item=MenuItemOutput.model_validate(r.item),
            score=r.score,
            match=r.match,
        )
        for r in results
    ]
