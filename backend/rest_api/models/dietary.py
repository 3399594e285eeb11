"""
Dietary preference model.
"""

from __future__ import annotations

from typing import Optional

from sqlalchemy import ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base, IdType, JSONType, TimestampMixin


class DietaryPreference(TimestampMixin, Base):
    """
    What a diner wants and must avoid.

    Keyed by user_id for signed-in users or by a client-held session_id
    (UUID) for anonymous diners. One record per key.
    """

    __tablename__ = "dietary_preference"

    id: Mapped[int] = mapped_column(IdType, primary_key=True, autoincrement=True)
    user_id: Mapped[Optional[int]] = mapped_column(
        IdType, ForeignKey("app_user.id"), nullable=True, unique=True, index=True
    )
    session_id: Mapped[Optional[str]] = mapped_column(String(64), nullable=True, unique=True, index=True)
    # {"vegan": true, "glutenFree": false, ...}
    preferences: Mapped[dict[str, bool]] = mapped_column(JSONType, nullable=False, default=dict)
    allergies: Mapped[list[str]] = mapped_column(JSONType, nullable=False, default=list)
    calorie_goal: Mapped[Optional[int]] = mapped_column(Integer)

    def __repr__(self) -> str:
        key = f"user={self.user_id}" if self.user_id else f"session='{self.session_id}'"
        return f"<DietaryPreference(id={self.id}, {key})>"
