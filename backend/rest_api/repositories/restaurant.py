"""
Restaurant Repository - Data access for restaurants and menu views.
"""

from datetime import datetime
from typing import Sequence
from sqlalchemy.orm import selectinload
from sqlalchemy import Select, delete, func, select, update

from rest_api.models import MenuCategory, MenuView, Restaurant
from .base import BaseRepository


class RestaurantRepository(BaseRepository[Restaurant]):
    """
    Repository for Restaurant entities.

    find_with_menu() guarantees eager loading of:
    - categories -> items
    - owner
    """

    @property
    def model(self) -> type[Restaurant]:
        return Restaurant

    def _base_query(self) -> Select:
        return select(Restaurant).order_by(Restaurant.created_at.desc(), Restaurant.id.desc())

    def find_by_owner(self, user_id: int) -> Sequence[Restaurant]:
        return self._db.execute(
            select(Restaurant)
            .where(Restaurant.user_id == user_id)
            .order_by(Restaurant.created_at, Restaurant.id)
        ).scalars().all()

    def count_by_owner(self, user_id: int) -> int:
        return self.count(Restaurant.user_id == user_id)

    def find_by_name(self, name: str) -> Restaurant | None:
        """Case-insensitive exact name match, oldest first on duplicates."""
        return self._db.scalar(
            select(Restaurant)
            .where(func.lower(Restaurant.name) == name.lower())
            .order_by(Restaurant.id)
            .limit(1)
        )

    def find_with_menu(self, restaurant_id: int) -> Restaurant | None:
        return self._db.scalar(
            select(Restaurant)
            .where(Restaurant.id == restaurant_id)
            .options(
                selectinload(Restaurant.categories).selectinload(MenuCategory.items),
                selectinload(Restaurant.owner),
            )
        )

    def increment_qr_scans(self, restaurant_id: int) -> None:
        self._db.execute(
            update(Restaurant)
            .where(Restaurant.id == restaurant_id)
            .values(qr_code_scans=Restaurant.qr_code_scans + 1)
        )


class MenuViewRepository(BaseRepository[MenuView]):
    """Repository for the append-only menu view log."""

    @property
    def model(self) -> type[MenuView]:
        return MenuView

    def _base_query(self) -> Select:
        return select(MenuView).order_by(MenuView.viewed_at.desc(), MenuView.id.desc())

    def record(self, restaurant_id: int, source: str) -> MenuView:
        return self.save(MenuView(restaurant_id=restaurant_id, source=source))

    def count_for_restaurant(self, restaurant_id: int) -> int:
        return self.count(MenuView.restaurant_id == restaurant_id)

    def delete_for_restaurant(self, restaurant_id: int) -> None:
        self._db.execute(
            delete(MenuView)
            .where(MenuView.restaurant_id == restaurant_id)
            .execution_options(synchronize_session=False)
        )

    def count_since(self, since: datetime) -> int:
        return self.count(MenuView.viewed_at >= since)

    def counts_by_restaurant(self) -> dict[int, int]:
        rows = self._db.execute(
            select(MenuView.restaurant_id, func.count()).group_by(MenuView.restaurant_id)
        ).all()
        return {restaurant_id: count for restaurant_id, count in rows}

    def last_view_by_restaurant(self) -> dict[int, datetime]:
        rows = self._db.execute(
            select(MenuView.restaurant_id, func.max(MenuView.viewed_at)).group_by(MenuView.restaurant_id)
        ).all()
        return {restaurant_id: viewed_at for restaurant_id, viewed_at in rows}