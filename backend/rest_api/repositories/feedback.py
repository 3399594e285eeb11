"""
Feedback Repository.
"""

from dataclasses import dataclass
from typing import Sequence
from sqlalchemy import Select, delete, select

from rest_api.models import Feedback
from .base import BaseRepository, RepositoryFilters


@dataclass
class FeedbackFilters(RepositoryFilters):
    """Filters specific to feedback."""

    status: str | None = None
    restaurant_id: int | None = None


class FeedbackRepository(BaseRepository[Feedback]):
    """Repository for Feedback. Newest first."""

    @property
    def model(self) -> type[Feedback]:
        return Feedback

    def _base_query(self) -> Select:
        return select(Feedback).order_by(Feedback.created_at.desc(), Feedback.id.desc())

    def _apply_filters(self, query: Select, filters: RepositoryFilters) -> Select:
        if not isinstance(filters, FeedbackFilters):
            filters = FeedbackFilters(**filters.__dict__)

        if filters.status:
            query = query.where(Feedback.status == filters.status)
        if filters.restaurant_id is not None:
            query = query.where(Feedback.restaurant_id == filters.restaurant_id)
        return query

    def find_by_restaurant(self, restaurant_id: int) -> Sequence[Feedback]:
        return self._db.execute(
            self._base_query().where(Feedback.restaurant_id == restaurant_id)
        ).scalars().all()

    def delete_for_restaurant(self, restaurant_id: int) -> None:
        self._db.execute(
            delete(Feedback)
            .where(Feedback.restaurant_id == restaurant_id)
            .execution_options(synchronize_session=False)
        )