"""
Restaurant Service.

Business rules:
- An owner may have as many restaurants as their tier allows
  (SubscriptionLimits); the check runs before every create.
- theme_settings falls back to DEFAULT_THEME_SETTINGS.
- Ownership cannot be transferred through an update.
- Deleting a restaurant removes its items, categories, views and
  feedback first.
- The public menu accepts a numeric id or a name slug
  ("blue-door-cafe" finds "Blue Door Cafe").
"""

from __future__ import annotations

from typing import Any

from sqlalchemy.orm import Session

from rest_api.models import Restaurant
from rest_api.repositories import (
    CategoryRepository,
    FeedbackRepository,
    MenuItemRepository,
    MenuViewRepository,
    RestaurantRepository,
)
from rest_api.services.base_service import OwnedEntityService
from rest_api.services.domain.subscription_service import SubscriptionService
from shared.config.constants import DEFAULT_THEME_SETTINGS, SubscriptionTier, ViewSource
from shared.config.logging import get_logger
from shared.infrastructure.db import safe_commit
from shared.utils.dates import as_utc, utcnow
from shared.utils.exceptions import ForbiddenError, NotFoundError, RestaurantLimitError
from shared.utils.schemas import (
    CategoryWithItems,
    ItemClickStat,
    RestaurantOutput,
)
from shared.utils.validators import slug_to_name

logger = get_logger(__name__)


class RestaurantService(OwnedEntityService[Restaurant, RestaurantOutput]):
    """Service for restaurant management, public menus and menu analytics."""

    def __init__(self, db: Session):
        super().__init__(
            db=db,
            repo=RestaurantRepository(db),
            output_schema=RestaurantOutput,
            entity_name="Restaurant",
        )
        self._restaurants: RestaurantRepository = self._repo
        self._categories = CategoryRepository(db)
        self._items = MenuItemRepository(db)
        self._views = MenuViewRepository(db)
        self._feedback = FeedbackRepository(db)
        self._subscriptions = SubscriptionService(db)

    def owner_id_of(self, entity: Restaurant) -> int:
        return entity.user_id

    # =========================================================================
    # Query Methods
    # =========================================================================

    def list_for_owner(self, user_id: int) -> list[RestaurantOutput]:
        return [self.to_output(r) for r in self._restaurants.find_by_owner(user_id)]

    def find_by_id_or_slug(self, identifier: str) -> Restaurant:
        """
        Resolve a numeric id or a name slug.

        Raises:
            NotFoundError: Nothing matches.
        """
        restaurant = None
        if identifier.isdigit():
            restaurant = self._restaurants.find_by_id(int(identifier))
        else:
            name = slug_to_name(identifier)
            if name:
                restaurant = self._restaurants.find_by_name(name)

        if restaurant is None:
            raise NotFoundError("Restaurant", identifier)
        return restaurant

    def get_stats(self, restaurant_id: int, user_id: int) -> dict[str, int]:
        """View, scan and item counts for the owner dashboard."""
        restaurant = self.get_owned(restaurant_id, user_id, action="view stats for this restaurant")

        created_at = as_utc(restaurant.created_at) or utcnow()
        days_active = max(1, (utcnow() - created_at).days + 1)

        return {
            "view_count": self._views.count_for_restaurant(restaurant_id),
            "qr_scan_count": restaurant.qr_code_scans or 0,
            "menu_item_count": self._items.count_for_restaurant(restaurant_id),
            "days_active": days_active,
        }

    def get_public_menu(self, identifier: str, *, source: str = ViewSource.LINK) -> dict[str, Any]:
        """
        Full menu for diners. Opening it counts as a view; a QR source
        also counts as a scan.
        """
        restaurant = self.find_by_id_or_slug(identifier)
        restaurant = self._restaurants.find_with_menu(restaurant.id)

        tier = (
            self._subscriptions.effective_tier(restaurant.owner)
            if restaurant.owner is not None
            else SubscriptionTier.FREE
        )
        payload = {
            "restaurant": self.to_output(restaurant),
            "subscription_tier": tier,
            "is_premium": tier == SubscriptionTier.PREMIUM,
            "categories": [CategoryWithItems.model_validate(c) for c in restaurant.categories],
        }

        self._record_view(restaurant.id, source)
        safe_commit(self._db)
        return payload

    def get_menu_analytics(self, restaurant_id: int, ctx: dict[str, Any]) -> dict[str, Any]:
        """Item click counts, most clicked first. Owner or admin only."""
        restaurant = self.get_entity(restaurant_id)
        if not ctx.get("is_admin"):
            self.ensure_owner(restaurant, int(ctx["sub"]), action="view analytics for this restaurant")

        items = [ItemClickStat.model_validate(i) for i in self._items.find_most_clicked(restaurant_id)]
        return {
            "restaurant_id": restaurant_id,
            "total_clicks": sum(i.click_count for i in items),
            "items": items,
        }

    # =========================================================================
    # Command Methods
    # =========================================================================

    def create_for_owner(self, data: dict[str, Any], user_id: int) -> RestaurantOutput:
        """
        Create a restaurant under the owner's tier limit.

        Raises:
            RestaurantLimitError: The owner already has the maximum.
        """
        limits = self._subscriptions.check_user_limits(user_id)
        if not limits.can_create_restaurant:
            raise RestaurantLimitError(
                limit=limits.limits.max_restaurants,
                tier=limits.tier,
                user_id=user_id,
                owned=limits.restaurant_count,
            )

        data.pop("user_id", None)
        data["user_id"] = user_id
        if not data.get("theme_settings"):
            data["theme_settings"] = dict(DEFAULT_THEME_SETTINGS)

        output = self.create(data)
        logger.info("Restaurant created", restaurant_id=output.id, user_id=user_id, tier=limits.tier)
        return output

    def update_for_owner(self, restaurant_id: int, data: dict[str, Any], user_id: int) -> RestaurantOutput:
        restaurant = self.get_owned(restaurant_id, user_id, action="modify this restaurant")
        data.pop("user_id", None)
        return self.update_entity(restaurant, data)

    def delete_for_owner(self, restaurant_id: int, user_id: int) -> None:
        restaurant = self.get_owned(restaurant_id, user_id, action="delete this restaurant")
        self.delete_entity(restaurant)
        logger.info("Restaurant deleted", restaurant_id=restaurant_id, user_id=user_id)

    def record_view(self, restaurant_id: int, source: str = ViewSource.LINK):
        if not self._restaurants.exists(restaurant_id):
            raise NotFoundError("Restaurant", restaurant_id)
        view = self._record_view(restaurant_id, source)
        safe_commit(self._db)
        self._db.refresh(view)
        return view

    def record_qr_scan(self, restaurant_id: int) -> dict[str, int]:
        """Increment the scan counter and report the before/after values."""
        restaurant = self.get_entity(restaurant_id)
        previous = restaurant.qr_code_scans or 0

        self._restaurants.increment_qr_scans(restaurant_id)
        safe_commit(self._db)
        self._db.refresh(restaurant)

        return {"previous_count": previous, "new_count": restaurant.qr_code_scans}

    def track_item_click(self, item_id: int) -> int:
        """Increment an item's click counter. Returns the new count."""
        item = self._items.find_by_id(item_id)
        if item is None:
            raise NotFoundError("Menu item", item_id)
        self._items.increment_clicks(item_id)
        safe_commit(self._db)
        self._db.refresh(item)
        return item.click_count

    # =========================================================================
    # Hooks
    # =========================================================================

    def _delete_dependents(self, entity: Restaurant) -> None:
        self._items.delete_for_restaurant(entity.id)
        self._categories.delete_for_restaurant(entity.id)
        self._views.delete_for_restaurant(entity.id)
        self._feedback.delete_for_restaurant(entity.id)
        # Rows are gone already, the ORM must not try to detach them
        self._db.expire(entity, ["categories", "views"])

    def _record_view(self, restaurant_id: int, source: str):
        if source == ViewSource.QR:
            self._restaurants.increment_qr_scans(restaurant_id)
        if source not in ViewSource.ALL:
            source = ViewSource.LINK
        return self._views.record(restaurant_id, source)


def ensure_restaurant_owner(restaurant: Restaurant, user_id: int, action: str) -> None:
    """Ownership check for services that reach a restaurant through a child row."""
    if restaurant.user_id != user_id:
        raise ForbiddenError(action, user_id=user_id, restaurant_id=restaurant.id)
