"""
Billing models: Subscription, Payment, PricingPlan.
"""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, Optional

from sqlalchemy import Boolean, DateTime, ForeignKey, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from shared.config.constants import DEFAULT_CURRENCY, SubscriptionTier
from .base import Base, IdType, JSONType, TimestampMixin

if TYPE_CHECKING:
    from .user import User


class Subscription(TimestampMixin, Base):
    """
    One period of a paid (or free) tier for a user.
    The current tier itself lives on User.subscription_tier.
    """

    __tablename__ = "subscription"

    id: Mapped[int] = mapped_column(IdType, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(
        IdType, ForeignKey("app_user.id"), nullable=False, index=True
    )
    tier: Mapped[str] = mapped_column(String(20), nullable=False)
    start_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    end_date: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True))
    payment_method: Mapped[Optional[str]] = mapped_column(String(50))
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    user: Mapped["User"] = relationship(back_populates="subscriptions")
    payments: Mapped[list["Payment"]] = relationship(back_populates="subscription")

    __table_args__ = (
        Index("ix_subscription_user_active", "user_id", "is_active"),
    )

    def __repr__(self) -> str:
        return f"<Subscription(id={self.id}, user={self.user_id}, tier='{self.tier}', active={self.is_active})>"


class Payment(TimestampMixin, Base):
    """Ledger row for a payment made towards a subscription."""

    __tablename__ = "payment"

    id: Mapped[int] = mapped_column(IdType, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(
        IdType, ForeignKey("app_user.id"), nullable=False, index=True
    )
    subscription_id: Mapped[Optional[int]] = mapped_column(
        IdType, ForeignKey("subscription.id"), index=True
    )
    amount: Mapped[str] = mapped_column(String(32), nullable=False)  # decimal string
    currency: Mapped[str] = mapped_column(String(3), nullable=False, default=DEFAULT_CURRENCY)
    payment_method: Mapped[Optional[str]] = mapped_column(String(50))
    payment_id: Mapped[Optional[str]] = mapped_column(Text)  # provider reference
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="pending")

    subscription: Mapped[Optional["Subscription"]] = relationship(back_populates="payments")

    def __repr__(self) -> str:
        return f"<Payment(id={self.id}, user={self.user_id}, amount='{self.amount}', status='{self.status}')>"


class PricingPlan(TimestampMixin, Base):
    """A plan shown on the public pricing page."""

    __tablename__ = "pricing_plan"

    id: Mapped[int] = mapped_column(IdType, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text)
    price: Mapped[str] = mapped_column(String(32), nullable=False)  # decimal string
    currency: Mapped[str] = mapped_column(String(3), nullable=False, default=DEFAULT_CURRENCY)
    features: Mapped[list[str]] = mapped_column(JSONType, nullable=False, default=list)
    tier: Mapped[str] = mapped_column(String(20), nullable=False, default=SubscriptionTier.FREE)
    billing_period: Mapped[str] = mapped_column(String(20), nullable=False, default="monthly")
    is_popular: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    def __repr__(self) -> str:
        return f"<PricingPlan(id={self.id}, name='{self.name}', tier='{self.tier}')>"
