"""
Dietary Preference Repository.
"""

from sqlalchemy import Select, select

from rest_api.models import DietaryPreference
from .base import BaseRepository


class DietaryPreferenceRepository(BaseRepository[DietaryPreference]):
    """Looks up preference records by their owning key."""

    @property
    def model(self) -> type[DietaryPreference]:
        return DietaryPreference

    def _base_query(self) -> Select:
        return select(DietaryPreference).order_by(DietaryPreference.id)

    def find_by_user(self, user_id: int) -> DietaryPreference | None:
        return self._db.scalar(
            select(DietaryPreference).where(DietaryPreference.user_id == user_id)
        )

    def find_by_session(self, session_id: str) -> DietaryPreference | None:
        return self._db.scalar(
            select(DietaryPreference).where(DietaryPreference.session_id == session_id)
        )

    def find_for_caller(self, user_id: int | None, session_id: str | None) -> DietaryPreference | None:
        """The user's record when signed in, else the session's record. Never both."""
        if user_id is not None:
            return self.find_by_user(user_id)
        if session_id:
            return self.find_by_session(session_id)
        return None