"""
Admin audit log model.
"""

from __future__ import annotations

from typing import Any, Optional

from sqlalchemy import ForeignKey, Index, String
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base, IdType, JSONType, TimestampMixin


class AdminLog(TimestampMixin, Base):
    """
    Records every action an administrator takes.
    Stores who did what to which entity, plus free-form details.
    """

    __tablename__ = "admin_log"

    id: Mapped[int] = mapped_column(IdType, primary_key=True, autoincrement=True)
    admin_id: Mapped[int] = mapped_column(
        IdType, ForeignKey("app_user.id"), nullable=False, index=True
    )
    action: Mapped[str] = mapped_column(String(100), nullable=False)
    entity_type: Mapped[Optional[str]] = mapped_column(String(50))
    entity_id: Mapped[Optional[int]] = mapped_column(IdType)
    details: Mapped[Optional[dict[str, Any]]] = mapped_column(JSONType)

    __table_args__ = (
        Index("ix_admin_log_entity", "entity_type", "entity_id"),
    )

    def __repr__(self) -> str:
        return f"<AdminLog(id={self.id}, admin={self.admin_id}, action='{self.action}')>"
