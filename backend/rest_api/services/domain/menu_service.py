"""
Menu Service - categories and menu items.

Reads are public. Every mutation checks that the caller owns the
restaurant the category or item belongs to.

Business rules:
- Deleting a category deletes its items first.
- display_order is appended after the current last entry when omitted.
- Setting an image on an item counts against the owner's image quota.
"""

from __future__ import annotations

from typing import Any

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from rest_api.models import MenuCategory, MenuItem, Restaurant
from rest_api.repositories import CategoryRepository, MenuItemRepository, RestaurantRepository
from rest_api.services.base_service import OwnedEntityService
from rest_api.services.domain.restaurant_service import ensure_restaurant_owner
from rest_api.services.domain.subscription_service import SubscriptionService
from shared.config.logging import menu_logger as logger
from shared.infrastructure.db import safe_commit
from shared.utils.exceptions import NotFoundError
from shared.utils.schemas import CategoryOutput, MenuItemOutput


class CategoryService(OwnedEntityService[MenuCategory, CategoryOutput]):
    """
    Service for menu categories.

    Business rules:
    - Categories belong to a restaurant
    - Order is auto-calculated if not provided
    - Delete removes the category's items
    """

    def __init__(self, db: Session):
        super().__init__(
            db=db,
            repo=CategoryRepository(db),
            output_schema=CategoryOutput,
            entity_name="Category",
        )
        self._categories: CategoryRepository = self._repo
        self._restaurants = RestaurantRepository(db)

    def owner_id_of(self, entity: MenuCategory) -> int:
        return entity.restaurant.user_id

    def _get_restaurant(self, restaurant_id: int) -> Restaurant:
        restaurant = self._restaurants.find_by_id(restaurant_id)
        if restaurant is None:
            raise NotFoundError("Restaurant", restaurant_id)
        return restaurant

    # =========================================================================
    # Query Methods
    # =========================================================================

    def list_by_restaurant(self, restaurant_id: int) -> list[CategoryOutput]:
        self._get_restaurant(restaurant_id)
        return [self.to_output(c) for c in self._categories.find_by_restaurant(restaurant_id)]

    def get_next_order(self, restaurant_id: int) -> int:
        """Next display_order after the restaurant's last category."""
        max_order = self._db.scalar(
            select(func.max(MenuCategory.display_order))
            .where(MenuCategory.restaurant_id == restaurant_id)
        )
        return 0 if max_order is None else max_order + 1

    # =========================================================================
    # Command Methods
    # =========================================================================

    def create_for_owner(self, restaurant_id: int, data: dict[str, Any], user_id: int) -> CategoryOutput:
        restaurant = self._get_restaurant(restaurant_id)
        ensure_restaurant_owner(restaurant, user_id, "add categories to this restaurant")

        data["restaurant_id"] = restaurant_id
        if "display_order" not in data:
            data["display_order"] = self.get_next_order(restaurant_id)

        output = self.create(data)
        logger.info("Category created", category_id=output.id, restaurant_id=restaurant_id)
        return output

    def update_for_owner(self, category_id: int, data: dict[str, Any], user_id: int) -> CategoryOutput:
        category = self.get_owned(category_id, user_id, action="modify this category")
        data.pop("restaurant_id", None)
        return self.update_entity(category, data)

    def delete_for_owner(self, category_id: int, user_id: int) -> None:
        category = self.get_owned(category_id, user_id, action="delete this category")
        self._categories.delete_with_items(category)
        safe_commit(self._db)
        logger.info("Category deleted", category_id=category_id, user_id=user_id)


class MenuItemService(OwnedEntityService[MenuItem, MenuItemOutput]):
    """Service for menu items."""

    def __init__(self, db: Session):
        super().__init__(
            db=db,
            repo=MenuItemRepository(db),
            output_schema=MenuItemOutput,
            entity_name="Menu item",
        )
        self._items: MenuItemRepository = self._repo
        self._categories = CategoryRepository(db)
        self._subscriptions = SubscriptionService(db)

    def owner_id_of(self, entity: MenuItem) -> int:
        return entity.category.restaurant.user_id

    def _get_category(self, category_id: int) -> MenuCategory:
        category = self._categories.find_by_id(category_id)
        if category is None:
            raise NotFoundError("Category", category_id)
        return category

    # =========================================================================
    # Query Methods
    # =========================================================================

    def list_by_category(self, category_id: int) -> list[MenuItemOutput]:
        self._get_category(category_id)
        return [self.to_output(i) for i in self._items.find_by_category(category_id)]

    def get_next_order(self, category_id: int) -> int:
        max_order = self._db.scalar(
            select(func.max(MenuItem.display_order))
            .where(MenuItem.category_id == category_id)
        )
        return 0 if max_order is None else max_order + 1

    # =========================================================================
    # Command Methods
    # =========================================================================

    def create_for_owner(self, category_id: int, data: dict[str, Any], user_id: int) -> MenuItemOutput:
        category = self._get_category(category_id)
        ensure_restaurant_owner(category.restaurant, user_id, "add items to this category")

        if data.get("image_url"):
            self._subscriptions.validate_image_upload(user_id)

        data["category_id"] = category_id
        if "display_order" not in data:
            data["display_order"] = self.get_next_order(category_id)

        output = self.create(data)
        logger.info("Menu item created", item_id=output.id, category_id=category_id)
        return output

    def update_for_owner(self, item_id: int, data: dict[str, Any], user_id: int) -> MenuItemOutput:
        item = self.get_owned(item_id, user_id, action="modify this item")

        if data.get("image_url") and not item.image_url:
            self._subscriptions.validate_image_upload(user_id)

        return self.update_entity(item, data)

    def delete_for_owner(self, item_id: int, user_id: int) -> None:
        item = self.get_owned(item_id, user_id, action="delete this item")
        self.delete_entity(item)
        logger.info("Menu item deleted", item_id=item_id, user_id=user_id)
