"""
Marketing and platform content models managed from the admin console.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlalchemy import Boolean, CheckConstraint, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from shared.config.constants import AdPosition
from .base import Base, IdType, TimestampMixin


class ContactInfo(TimestampMixin, Base):
    """Platform contact details. A single row is used."""

    __tablename__ = "contact_info"

    id: Mapped[int] = mapped_column(IdType, primary_key=True, autoincrement=True)
    address: Mapped[str] = mapped_column(Text, nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False)
    phone: Mapped[str] = mapped_column(String(50), nullable=False)


class Advertisement(TimestampMixin, Base):
    """An ad shown on free-tier menus in a given slot."""

    __tablename__ = "advertisement"

    id: Mapped[int] = mapped_column(IdType, primary_key=True, autoincrement=True)
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text)
    image_url: Mapped[Optional[str]] = mapped_column(Text)
    link_url: Mapped[Optional[str]] = mapped_column(Text)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    position: Mapped[str] = mapped_column(String(20), nullable=False, default=AdPosition.BOTTOM, index=True)
    start_date: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True))
    end_date: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True))
    created_by: Mapped[Optional[int]] = mapped_column(IdType, ForeignKey("app_user.id"))

    def __repr__(self) -> str:
        return f"<Advertisement(id={self.id}, title='{self.title}', position='{self.position}')>"


class AdSettings(TimestampMixin, Base):
    """Per-position switch and pacing for advertisements."""

    __tablename__ = "ad_settings"

    id: Mapped[int] = mapped_column(IdType, primary_key=True, autoincrement=True)
    position: Mapped[str] = mapped_column(String(20), nullable=False, unique=True)
    is_enabled: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    description: Mapped[Optional[str]] = mapped_column(Text)
    display_frequency: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    max_ads_per_page: Mapped[int] = mapped_column(Integer, nullable=False, default=1)

    __table_args__ = (
        CheckConstraint(
            "display_frequency >= 1 AND display_frequency <= 20", name="chk_ad_display_frequency"
        ),
        CheckConstraint(
            "max_ads_per_page >= 1 AND max_ads_per_page <= 10", name="chk_ad_max_per_page"
        ),
    )


class MenuExample(TimestampMixin, Base):
    """A showcase menu linked from the landing page."""

    __tablename__ = "menu_example"

    id: Mapped[int] = mapped_column(IdType, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text)
    image_url: Mapped[Optional[str]] = mapped_column(Text)
    menu_url: Mapped[Optional[str]] = mapped_column(Text)
    display_order: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)


class Testimonial(TimestampMixin, Base):
    """A customer quote shown on the landing page."""

    __tablename__ = "testimonial"

    id: Mapped[int] = mapped_column(IdType, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    role: Mapped[Optional[str]] = mapped_column(String(200))
    company: Mapped[Optional[str]] = mapped_column(String(200))
    content: Mapped[str] = mapped_column(Text, nullable=False)
    rating: Mapped[int] = mapped_column(Integer, nullable=False, default=5)
    avatar_url: Mapped[Optional[str]] = mapped_column(Text)
    display_order: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
