"""
Menu router.
Categories per restaurant and items per category. Reads are public, writes
are restricted to the restaurant's owner.
"""

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from shared.infrastructure.db import get_db
from shared.security.auth import current_user_context
from shared.utils.schemas import (
    CategoryCreate,
    CategoryOutput,
    CategoryUpdate,
    MenuItemCreate,
    MenuItemOutput,
    MenuItemUpdate,
)
from rest_api.routers._common import get_user_id
from rest_api.services.domain import CategoryService, MenuItemService


router = APIRouter(prefix="/api", tags=["menu"])


# =============================================================================
# Categories
# =============================================================================


@router.get("/restaurants/{restaurant_id}/categories", response_model=list[CategoryOutput])
def list_categories(restaurant_id: int, db: Session = Depends(get_db)) -> list[CategoryOutput]:
    """Categories of a restaurant, by display order."""
    return CategoryService(db).list_by_restaurant(restaurant_id)


@router.post(
    "/restaurants/{restaurant_id}/categories",
    response_model=CategoryOutput,
    status_code=status.HTTP_201_CREATED,
)
def create_category(
    restaurant_id: int,
    body: CategoryCreate,
    db: Session = Depends(get_db),
    ctx: dict = Depends(current_user_context),
) -> CategoryOutput:
    """Without an explicit displayOrder the category goes last."""
    return CategoryService(db).create_for_owner(
        restaurant_id, body.model_dump(exclude_unset=True), get_user_id(ctx)
    )


@router.patch("/categories/{category_id}", response_model=CategoryOutput)
def update_category(
    category_id: int,
    body: CategoryUpdate,
    db: Session = Depends(get_db),
    ctx: dict = Depends(current_user_context),
) -> CategoryOutput:
    return CategoryService(db).update_for_owner(
        category_id, body.model_dump(exclude_unset=True), get_user_id(ctx)
    )


@router.delete("/categories/{category_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_category(
    category_id: int,
    db: Session = Depends(get_db),
    ctx: dict = Depends(current_user_context),
) -> Response:
    """Delete a category and its items."""
    CategoryService(db).delete_for_owner(category_id, get_user_id(ctx))
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# =============================================================================
# Items
# =============================================================================


@router.get("/categories/{category_id}/items", response_model=list[MenuItemOutput])
def list_items(category_id: int, db: Session = Depends(get_db)) -> list[MenuItemOutput]:
    return MenuItemService(db).list_by_category(category_id)


@router.post(
    "/categories/{category_id}/items",
    response_model=MenuItemOutput,
    status_code=status.HTTP_201_CREATED,
)
def create_item(
    category_id: int,
    body: MenuItemCreate,
    db: Session = Depends(get_db),
    ctx: dict = Depends(current_user_context),
) -> MenuItemOutput:
    """
    Add an item to a category.

    An item with an image counts against the owner's image quota (403 when full).
    """
    return MenuItemService(db).create_for_owner(
        category_id, body.model_dump(exclude_unset=True), get_user_id(ctx)
    )


@router.patch("/items/{item_id}", response_model=MenuItemOutput)
def update_item(
    item_id: int,
    body: MenuItemUpdate,
    db: Session = Depends(get_db),
    ctx: dict = Depends(current_user_context),
) -> MenuItemOutput:
    return MenuItemService(db).update_for_owner(
        item_id, body.model_dump(exclude_unset=True), get_user_id(ctx)
    )


@router.delete("/items/{item_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_item(
    item_id: int,
    db: Session = Depends(get_db),
    ctx: dict = Depends(current_user_context),
) -> Response:
    MenuItemService(db).delete_for_owner(item_id, get_user_id(ctx))
    return Response(status_code=status.HTTP_204_NO_CONTENT)
