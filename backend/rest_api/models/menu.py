"""
Menu structure models: categories and the items inside them.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

from sqlalchemy import Boolean, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from shared.config.constants import DEFAULT_CURRENCY, DEFAULT_MAIN_CATEGORY
from .base import Base, IdType, JSONType, TimestampMixin

if TYPE_CHECKING:
    from .restaurant import Restaurant


class MenuCategory(TimestampMixin, Base):
    """
    A section of a restaurant menu ("Starters", "Drinks").
    main_category groups sections at the top level (Food, Beverages, ...).
    """

    __tablename__ = "menu_category"

    id: Mapped[int] = mapped_column(IdType, primary_key=True, autoincrement=True)
    restaurant_id: Mapped[int] = mapped_column(
        IdType, ForeignKey("restaurant.id"), nullable=False, index=True
    )
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text)
    display_order: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    main_category: Mapped[str] = mapped_column(
        String(100), nullable=False, default=DEFAULT_MAIN_CATEGORY
    )

    # Relationships
    restaurant: Mapped["Restaurant"] = relationship(back_populates="categories")
    items: Mapped[list["MenuItem"]] = relationship(
        back_populates="category",
        order_by="MenuItem.display_order",
    )

    def __repr__(self) -> str:
        return f"<MenuCategory(id={self.id}, name='{self.name}', restaurant={self.restaurant_id})>"


class MenuItem(TimestampMixin, Base):
    """
    A dish or drink.

    dietary_info ({"vegan": true, ...}) and allergens (["nuts", ...]) are
    optional; None means unknown, not "none".
    """

    __tablename__ = "menu_item"

    id: Mapped[int] = mapped_column(IdType, primary_key=True, autoincrement=True)
    category_id: Mapped[int] = mapped_column(
        IdType, ForeignKey("menu_category.id"), nullable=False, index=True
    )
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text)
    price: Mapped[str] = mapped_column(String(32), nullable=False)  # decimal string
    currency: Mapped[str] = mapped_column(String(3), nullable=False, default=DEFAULT_CURRENCY)
    image_url: Mapped[Optional[str]] = mapped_column(Text)
    tags: Mapped[list[str]] = mapped_column(JSONType, nullable=False, default=list)
    is_available: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    display_order: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    dietary_info: Mapped[Optional[dict[str, bool]]] = mapped_column(JSONType)
    calories: Mapped[Optional[int]] = mapped_column(Integer)
    allergens: Mapped[Optional[list[str]]] = mapped_column(JSONType)
    click_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0, server_default="0")

    category: Mapped["MenuCategory"] = relationship(back_populates="items")

    def __repr__(self) -> str:
        return f"<MenuItem(id={self.id}, name='{self.name}', price='{self.price}')>"
