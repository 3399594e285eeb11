"""
Content Repository - advertisements and their per-position settings.
Plain content tables (testimonials, menu examples, ...) use ModelRepository.
"""

from datetime import datetime
from typing import Sequence
from sqlalchemy import Select, or_, select

from rest_api.models import AdSettings, Advertisement
from .base import BaseRepository


class AdvertisementRepository(BaseRepository[Advertisement]):
    """Repository for advertisements. Newest first."""

    @property
    def model(self) -> type[Advertisement]:
        return Advertisement

    def _base_query(self) -> Select:
        return select(Advertisement).order_by(Advertisement.created_at.desc(), Advertisement.id.desc())

    def find_running(self, position: str, now: datetime) -> Sequence[Advertisement]:
        """Active ads for the position whose date window contains now."""
        return self._db.execute(
            self._base_query().where(
                Advertisement.position == position,
                Advertisement.is_active.is_(True),
                or_(Advertisement.start_date.is_(None), Advertisement.start_date <= now),
                or_(Advertisement.end_date.is_(None), Advertisement.end_date >= now),
            )
        ).scalars().all()


class AdSettingsRepository(BaseRepository[AdSettings]):
    """Repository for per-position ad settings."""

    @property
    def model(self) -> type[AdSettings]:
        return AdSettings

    def _base_query(self) -> Select:
        return select(AdSettings).order_by(AdSettings.position)

    def find_by_position(self, position: str) -> AdSettings | None:
        return self._db.scalar(select(AdSettings).where(AdSettings.position == position))