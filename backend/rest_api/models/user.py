"""
User and registration tracking models.
"""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, Optional

from sqlalchemy import Boolean, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from shared.config.constants import SubscriptionTier
from .base import Base, IdType, TimestampMixin

if TYPE_CHECKING:
    from .restaurant import Restaurant
    from .billing import Subscription


class User(TimestampMixin, Base):
    """
    A restaurant owner or a platform administrator.

    Users are never hard-deleted; deactivation flips is_active.
    Inherits: created_at, updated_at from TimestampMixin.
    """

    __tablename__ = "app_user"

    id: Mapped[int] = mapped_column(IdType, primary_key=True, autoincrement=True)
    username: Mapped[str] = mapped_column(String(100), nullable=False, unique=True, index=True)
    email: Mapped[str] = mapped_column(String(255), nullable=False, unique=True, index=True)
    password: Mapped[str] = mapped_column(Text, nullable=False)  # bcrypt hash
    full_name: Mapped[Optional[str]] = mapped_column(Text)

    # Subscription
    subscription_tier: Mapped[str] = mapped_column(
        String(20), nullable=False, default=SubscriptionTier.FREE, server_default=SubscriptionTier.FREE
    )
    premium_start_date: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True))
    premium_end_date: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True))
    premium_duration: Mapped[Optional[str]] = mapped_column(String(20))
    notification_sent: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    stripe_customer_id: Mapped[Optional[str]] = mapped_column(Text)
    stripe_subscription_id: Mapped[Optional[str]] = mapped_column(Text)

    # Password reset
    reset_password_token: Mapped[Optional[str]] = mapped_column(Text, index=True)
    reset_password_expires: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True))

    is_admin: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True, index=True)
    last_login: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True))

    # Bumped on logout/password reset to invalidate outstanding JWTs
    token_version: Mapped[int] = mapped_column(Integer, nullable=False, default=0, server_default="0")

    # Relationships
    restaurants: Mapped[list["Restaurant"]] = relationship(back_populates="owner")
    subscriptions: Mapped[list["Subscription"]] = relationship(back_populates="user")

    @property
    def is_premium(self) -> bool:
        return self.subscription_tier == SubscriptionTier.PREMIUM

    def __repr__(self) -> str:
        return f"<User(id={self.id}, username='{self.username}', tier='{self.subscription_tier}')>"


class RegistrationAnalytics(TimestampMixin, Base):
    """Where a new user came from when they signed up."""

    __tablename__ = "registration_analytics"

    id: Mapped[int] = mapped_column(IdType, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(
        IdType, ForeignKey("app_user.id"), nullable=False, index=True
    )
    source: Mapped[Optional[str]] = mapped_column(String(100))
    utm_source: Mapped[Optional[str]] = mapped_column(String(255))
    utm_medium: Mapped[Optional[str]] = mapped_column(String(255))
    utm_campaign: Mapped[Optional[str]] = mapped_column(String(255))
    referral_code: Mapped[Optional[str]] = mapped_column(String(100))
    device_type: Mapped[Optional[str]] = mapped_column(String(50))
    browser: Mapped[Optional[str]] = mapped_column(String(100))
    country: Mapped[Optional[str]] = mapped_column(String(100))

    user: Mapped["User"] = relationship()
