"""
Dietary Preference Service.

One preference record per diner. Signed-in diners are keyed by user id,
anonymous diners by a session id they keep on the client (generated here
on first save when they have none).
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from typing import Any

from sqlalchemy.orm import Session

from rest_api.models import DietaryPreference
from rest_api.repositories import DietaryPreferenceRepository
from shared.config.logging import get_logger
from shared.infrastructure.db import safe_commit
from shared.utils.exceptions import NotFoundError

logger = get_logger(__name__)

# Fields a client may write. Anything else in the payload is ignored.
WRITABLE_FIELDS = ("preferences", "allergies", "calorie_goal")


@dataclass
class UpsertResult:
    preference: DietaryPreference
    session_id: str | None
    created: bool


class DietaryService:
    """Create, update and read dietary preferences."""

    def __init__(self, db: Session):
        self._db = db
        self._repo = DietaryPreferenceRepository(db)

    def get_for_caller(self, user_id: int | None, session_id: str | None) -> DietaryPreference:
        """
        Raises:
            NotFoundError: No record for the user or the session.
        """
        preference = self._repo.find_for_caller(user_id, session_id)
        if preference is None:
            raise NotFoundError("Dietary preference", user_id=user_id, session_id=session_id)
        return preference

    def upsert(
        self,
        data: dict[str, Any],
        *,
        user_id: int | None,
        session_id: str | None,
    ) -> UpsertResult:
        """
        Create or update the caller's record.

        Only the keys present in data are written. preferences and
        allergies replace the stored value as a whole.
        """
        if user_id is None and not session_id:
            session_id = str(uuid.uuid4())

        if user_id is not None:
            preference = self._repo.find_by_user(user_id)
        else:
            preference = self._repo.find_by_session(session_id)

        created = preference is None
        if created:
            preference = DietaryPreference(
                user_id=user_id,
                session_id=None if user_id is not None else session_id,
                preferences={},
                allergies=[],
            )

        for field_name in WRITABLE_FIELDS:
            if field_name in data:
                value = data[field_name]
                if field_name == "preferences" and value is None:
                    value = {}
                elif field_name == "allergies" and value is None:
                    value = []
                setattr(preference, field_name, value)

        self._repo.save(preference)
        safe_commit(self._db)
        self._db.refresh(preference)

        logger.info(
            "Dietary preference saved",
            preference_id=preference.id,
            user_id=user_id,
            created=created,
        )
        return UpsertResult(preference=preference, session_id=session_id, created=created)
