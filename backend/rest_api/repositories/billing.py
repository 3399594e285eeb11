"""
Billing Repository - subscriptions and the admin audit log.
"""

from typing import Any, Sequence
from sqlalchemy import Select, select, update

from rest_api.models import AdminLog, Subscription
from .base import BaseRepository


class SubscriptionRepository(BaseRepository[Subscription]):
    """Repository for Subscription periods. Newest first."""

    @property
    def model(self) -> type[Subscription]:
        return Subscription

    def _base_query(self) -> Select:
        return select(Subscription).order_by(Subscription.created_at.desc(), Subscription.id.desc())

    def deactivate_for_user(self, user_id: int) -> None:
        self._db.execute(
            update(Subscription)
            .where(Subscription.user_id == user_id, Subscription.is_active.is_(True))
            .values(is_active=False)
            .execution_options(synchronize_session=False)
        )


class AdminLogRepository(BaseRepository[AdminLog]):
    """Repository for the admin audit trail. Newest first."""

    @property
    def model(self) -> type[AdminLog]:
        return AdminLog

    def _base_query(self) -> Select:
        return select(AdminLog).order_by(AdminLog.created_at.desc(), AdminLog.id.desc())

    def record(
        self,
        admin_id: int,
        action: str,
        entity_type: str | None = None,
        entity_id: int | None = None,
        details: dict[str, Any] | None = None,
    ) -> AdminLog:
        return self.save(
            AdminLog(
                admin_id=admin_id,
                action=action,
                entity_type=entity_type,
                entity_id=entity_id,
                details=details,
            )
        )

    def recent(self, limit: int) -> Sequence[AdminLog]:
        return self._db.execute(self._base_query().limit(limit)).scalars().all()
