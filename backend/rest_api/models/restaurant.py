"""
Restaurant and menu view models.
"""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, Any, Optional

from sqlalchemy import DateTime, ForeignKey, Integer, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from shared.config.constants import DEFAULT_THEME_SETTINGS, ViewSource
from .base import Base, IdType, JSONType, TimestampMixin

if TYPE_CHECKING:
    from .user import User
    from .menu import MenuCategory


def _default_theme() -> dict[str, str]:
    return dict(DEFAULT_THEME_SETTINGS)


class Restaurant(TimestampMixin, Base):
    """
    A restaurant published by an owner.

    How many restaurants one owner may have depends on their tier
    (see SubscriptionLimits); that is enforced by the service layer.
    """

    __tablename__ = "restaurant"

    id: Mapped[int] = mapped_column(IdType, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(
        IdType, ForeignKey("app_user.id"), nullable=False, index=True
    )
    name: Mapped[str] = mapped_column(String(200), nullable=False, index=True)
    description: Mapped[Optional[str]] = mapped_column(Text)
    cuisine: Mapped[Optional[str]] = mapped_column(String(100))
    custom_cuisine: Mapped[Optional[str]] = mapped_column(String(100))

    # Branding
    logo_url: Mapped[Optional[str]] = mapped_column(Text)
    banner_url: Mapped[Optional[str]] = mapped_column(Text)
    banner_urls: Mapped[list[str]] = mapped_column(JSONType, nullable=False, default=list)
    theme_settings: Mapped[dict[str, Any]] = mapped_column(
        JSONType, nullable=False, default=_default_theme
    )

    # Contact
    phone: Mapped[Optional[str]] = mapped_column(String(50))
    email: Mapped[Optional[str]] = mapped_column(String(255))
    address: Mapped[Optional[str]] = mapped_column(Text)

    # {"monday": "9:00 - 22:00", ...}
    hours_of_operation: Mapped[Optional[dict[str, Any]]] = mapped_column(JSONType)
    tags: Mapped[list[str]] = mapped_column(JSONType, nullable=False, default=list)

    qr_code_scans: Mapped[int] = mapped_column(Integer, nullable=False, default=0, server_default="0")

    # Relationships
    owner: Mapped["User"] = relationship(back_populates="restaurants")
    categories: Mapped[list["MenuCategory"]] = relationship(
        back_populates="restaurant",
        order_by="MenuCategory.display_order",
    )
    views: Mapped[list["MenuView"]] = relationship(back_populates="restaurant")

    def __repr__(self) -> str:
        return f"<Restaurant(id={self.id}, name='{self.name}', owner={self.user_id})>"


class MenuView(Base):
    """Append-only record of one menu being opened."""

    __tablename__ = "menu_view"

    id: Mapped[int] = mapped_column(IdType, primary_key=True, autoincrement=True)
    restaurant_id: Mapped[int] = mapped_column(
        IdType, ForeignKey("restaurant.id"), nullable=False, index=True
    )
    source: Mapped[str] = mapped_column(String(20), nullable=False, default=ViewSource.LINK)
    viewed_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False, index=True
    )

    restaurant: Mapped["Restaurant"] = relationship(back_populates="views")
