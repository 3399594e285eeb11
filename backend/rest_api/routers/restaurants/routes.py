"""
Restaurant router.

Owner CRUD, the public menu, and the view / scan / click counters that feed
the owner dashboard.
"""

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session

from shared.infrastructure.db import get_db
from shared.security.auth import current_user_context
from shared.utils.schemas import (
    ErrorResponse,
    MenuAnalyticsOutput,
    MenuViewCreate,
    MenuViewOutput,
    PublicMenuOutput,
    QrScanOutput,
    RestaurantCreate,
    RestaurantOutput,
    RestaurantStats,
    RestaurantUpdate,
)
from shared.config.constants import ViewSource
from rest_api.routers._common import get_user_id
from rest_api.services.domain import RestaurantService


router = APIRouter(prefix="/api", tags=["restaurants"])


# =============================================================================
# Owner CRUD
# =============================================================================


@router.get("/restaurants", response_model=list[RestaurantOutput])
def list_restaurants(
    db: Session = Depends(get_db),
    ctx: dict = Depends(current_user_context),
) -> list[RestaurantOutput]:
    """The caller's restaurants."""
    return RestaurantService(db).list_for_owner(get_user_id(ctx))


@router.post(
    "/restaurants",
    response_model=RestaurantOutput,
    status_code=status.HTTP_201_CREATED,
    responses={403: {"model": ErrorResponse, "description": "Restaurant limit reached"}},
)
def create_restaurant(
    body: RestaurantCreate,
    db: Session = Depends(get_db),
    ctx: dict = Depends(current_user_context),
) -> RestaurantOutput:
    """
    Create a restaurant for the caller.

    403 with the limit and upgradeRequired flag once the tier maximum is reached.
    """
    return RestaurantService(db).create_for_owner(body.model_dump(exclude_unset=True), get_user_id(ctx))


@router.get("/restaurants/{restaurant_id}", response_model=RestaurantOutput)
def get_restaurant(restaurant_id: int, db: Session = Depends(get_db)) -> RestaurantOutput:
    return RestaurantService(db).get_by_id(restaurant_id)


@router.patch("/restaurants/{restaurant_id}", response_model=RestaurantOutput)
def update_restaurant(
    restaurant_id: int,
    body: RestaurantUpdate,
    db: Session = Depends(get_db),
    ctx: dict = Depends(current_user_context),
) -> RestaurantOutput:
    return RestaurantService(db).update_for_owner(
        restaurant_id, body.model_dump(exclude_unset=True), get_user_id(ctx)
    )


@router.delete("/restaurants/{restaurant_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_restaurant(
    restaurant_id: int,
    db: Session = Depends(get_db),
    ctx: dict = Depends(current_user_context),
) -> Response:
    """Delete a restaurant with its categories, items, views and feedback."""
    RestaurantService(db).delete_for_owner(restaurant_id, get_user_id(ctx))
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# =============================================================================
# Counters and analytics
# =============================================================================


@router.post(
    "/restaurants/{restaurant_id}/views",
    response_model=MenuViewOutput,
    status_code=status.HTTP_201_CREATED,
)
def record_view(
    restaurant_id: int,
    body: MenuViewCreate | None = None,
    db: Session = Depends(get_db),
):
    source = body.source if body else ViewSource.LINK
    return RestaurantService(db).record_view(restaurant_id, source)


@router.post("/restaurants/{restaurant_id}/qr-scan", response_model=QrScanOutput)
def record_qr_scan(restaurant_id: int, db: Session = Depends(get_db)) -> dict:
    return RestaurantService(db).record_qr_scan(restaurant_id)


@router.get("/restaurants/{restaurant_id}/stats", response_model=RestaurantStats)
def get_restaurant_stats(
    restaurant_id: int,
    db: Session = Depends(get_db),
    ctx: dict = Depends(current_user_context),
) -> dict:
    return RestaurantService(db).get_stats(restaurant_id, get_user_id(ctx))


@router.get("/restaurants/{identifier}/menu", response_model=PublicMenuOutput)
def get_public_menu(
    identifier: str,
    source: str = Query(default=ViewSource.LINK),
    db: Session = Depends(get_db),
) -> dict:
    """
    Public menu by numeric id or name slug ("joes-diner").

    Counts a view; source=qr also counts a scan.
    """
    return RestaurantService(db).get_public_menu(identifier, source=source)


@router.get("/restaurants/{restaurant_id}/menu-analytics", response_model=MenuAnalyticsOutput)
def get_menu_analytics(
    restaurant_id: int,
    db: Session = Depends(get_db),
    ctx: dict = Depends(current_user_context),
) -> dict:
    """Item click counts, most clicked first. Owner or admin."""
    return RestaurantService(db).get_menu_analytics(restaurant_id, ctx)


@router.post("/menu-items/{item_id}/track-click")
def track_item_click(item_id: int, db: Session = Depends(get_db)) -> dict:
    click_count = RestaurantService(db).track_item_click(item_id)
    return {"success": True, "clickCount": click_count}
