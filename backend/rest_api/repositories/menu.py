"""
Menu Repository - Data access for categories and menu items.
"""

from typing import Sequence
from sqlalchemy import Select, delete, func, select, update

from rest_api.models import MenuCategory, MenuItem, Restaurant
from .base import BaseRepository


class CategoryRepository(BaseRepository[MenuCategory]):
    """Repository for MenuCategory entities, ordered for display."""

    @property
    def model(self) -> type[MenuCategory]:
        return MenuCategory

    def _base_query(self) -> Select:
        return select(MenuCategory).order_by(MenuCategory.display_order, MenuCategory.id)

    def find_by_restaurant(self, restaurant_id: int) -> Sequence[MenuCategory]:
        return self._db.execute(
            self._base_query().where(MenuCategory.restaurant_id == restaurant_id)
        ).scalars().all()

    def count_for_restaurant(self, restaurant_id: int) -> int:
        return self.count(MenuCategory.restaurant_id == restaurant_id)

    def counts_by_restaurant(self) -> dict[int, int]:
        rows = self._db.execute(
            select(MenuCategory.restaurant_id, func.count()).group_by(MenuCategory.restaurant_id)
        ).all()
        return {restaurant_id: count for restaurant_id, count in rows}

    def delete_for_restaurant(self, restaurant_id: int) -> None:
        self._db.execute(
            delete(MenuCategory)
            .where(MenuCategory.restaurant_id == restaurant_id)
            .execution_options(synchronize_session=False)
        )

    def delete_with_items(self, category: MenuCategory) -> None:
        """Delete the category's items, then the category itself."""
        self._db.execute(
            delete(MenuItem)
            .where(MenuItem.category_id == category.id)
            .execution_options(synchronize_session=False)
        )
        # Loaded items were removed above, do not let the ORM touch them again
        self._db.expire(category, ["items"])
        self._db.delete(category)
        self._db.flush()


class MenuItemRepository(BaseRepository[MenuItem]):
    """Repository for MenuItem entities, ordered for display."""

    @property
    def model(self) -> type[MenuItem]:
        return MenuItem

    def _base_query(self) -> Select:
        return select(MenuItem).order_by(MenuItem.display_order, MenuItem.id)

    def find_by_category(self, category_id: int) -> Sequence[MenuItem]:
        return self._db.execute(
            self._base_query().where(MenuItem.category_id == category_id)
        ).scalars().all()

    def find_by_restaurant(self, restaurant_id: int) -> Sequence[MenuItem]:
        """Every item of every category, in category then item display order."""
        query = (
            select(MenuItem)
            .join(MenuCategory, MenuCategory.id == MenuItem.category_id)
            .where(MenuCategory.restaurant_id == restaurant_id)
            .order_by(
                MenuCategory.display_order,
                MenuCategory.id,
                MenuItem.display_order,
                MenuItem.id,
            )
        )
        return self._db.execute(query).scalars().all()

    def find_most_clicked(self, restaurant_id: int) -> Sequence[MenuItem]:
        query = (
            select(MenuItem)
            .join(MenuCategory, MenuCategory.id == MenuItem.category_id)
            .where(MenuCategory.restaurant_id == restaurant_id)
            .order_by(MenuItem.click_count.desc(), MenuItem.id)
        )
        return self._db.execute(query).scalars().all()

    def count_for_restaurant(self, restaurant_id: int) -> int:
        return self._db.scalar(
            select(func.count())
            .select_from(MenuItem)
            .join(MenuCategory, MenuCategory.id == MenuItem.category_id)
            .where(MenuCategory.restaurant_id == restaurant_id)
        ) or 0

    def counts_by_restaurant(self) -> dict[int, int]:
        rows = self._db.execute(
            select(MenuCategory.restaurant_id, func.count(MenuItem.id))
            .join(MenuItem, MenuItem.category_id == MenuCategory.id)
            .group_by(MenuCategory.restaurant_id)
        ).all()
        return {restaurant_id: count for restaurant_id, count in rows}

    def count_images_for_owner(self, user_id: int) -> int:
        """Menu items with an image across all of the owner's restaurants."""
        return self._db.scalar(
            select(func.count())
            .select_from(MenuItem)
            .join(MenuCategory, MenuCategory.id == MenuItem.category_id)
            .join(Restaurant, Restaurant.id == MenuCategory.restaurant_id)
            .where(
                Restaurant.user_id == user_id,
                MenuItem.image_url.is_not(None),
                MenuItem.image_url != "",
            )
        ) or 0

    def increment_clicks(self, item_id: int) -> None:
        self._db.execute(
            update(MenuItem)
            .where(MenuItem.id == item_id)
            .values(click_count=MenuItem.click_count + 1)
        )

    def delete_for_restaurant(self, restaurant_id: int) -> None:
        category_ids = select(MenuCategory.id).where(MenuCategory.restaurant_id == restaurant_id)
        self._db.execute(
            delete(MenuItem)
            .where(MenuItem.category_id.in_(category_ids))
            .execution_options(synchronize_session=False)
        )
