"""
Customer feedback model.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

from sqlalchemy import CheckConstraint, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from shared.config.constants import FeedbackStatus
from .base import Base, IdType, TimestampMixin

if TYPE_CHECKING:
    from .restaurant import Restaurant
    from .menu import MenuItem


class Feedback(TimestampMixin, Base):
    """
    A diner's rating of a restaurant, optionally about one item.
    New feedback waits in "pending" until the owner or an admin moderates it.
    """

    __tablename__ = "feedback"

    id: Mapped[int] = mapped_column(IdType, primary_key=True, autoincrement=True)
    restaurant_id: Mapped[int] = mapped_column(
        IdType, ForeignKey("restaurant.id"), nullable=False, index=True
    )
    menu_item_id: Mapped[Optional[int]] = mapped_column(
        IdType, ForeignKey("menu_item.id", ondelete="SET NULL"), nullable=True, index=True
    )
    rating: Mapped[int] = mapped_column(Integer, nullable=False)
    comment: Mapped[Optional[str]] = mapped_column(Text)
    customer_name: Mapped[Optional[str]] = mapped_column(String(200))
    customer_email: Mapped[Optional[str]] = mapped_column(String(255))
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=FeedbackStatus.PENDING, index=True
    )

    __table_args__ = (
        CheckConstraint("rating >= 1 AND rating <= 5", name="chk_feedback_rating"),
    )

    restaurant: Mapped["Restaurant"] = relationship()
    menu_item: Mapped[Optional["MenuItem"]] = relationship()

    def __repr__(self) -> str:
        return f"<Feedback(id={self.id}, restaurant={self.restaurant_id}, rating={self.rating}, status='{self.status}')>"
