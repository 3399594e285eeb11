"""
User Repository - Data access for users and registration analytics.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Sequence
from sqlalchemy import Select, func, or_, select

from rest_api.models import RegistrationAnalytics, User
from shared.config.constants import SubscriptionTier
from shared.utils.validators import escape_like_pattern
from .base import BaseRepository, RepositoryFilters


@dataclass
class UserFilters(RepositoryFilters):
    """Filters specific to users."""

    tier: str | None = None
    is_admin: bool | None = None


class UserRepository(BaseRepository[User]):
    """Repository for User entities. Newest users first."""

    @property
    def model(self) -> type[User]:
        return User

    def _base_query(self) -> Select:
        return select(User).order_by(User.created_at.desc(), User.id.desc())

    def _apply_filters(self, query: Select, filters: RepositoryFilters) -> Select:
        if not isinstance(filters, UserFilters):
            filters = UserFilters(**filters.__dict__)

        if filters.tier:
            query = query.where(User.subscription_tier == filters.tier)

        if filters.is_admin is not None:
            query = query.where(User.is_admin.is_(filters.is_admin))

        if filters.search:
            pattern = f"%{escape_like_pattern(filters.search)}%"
            query = query.where(
                or_(
                    User.username.ilike(pattern, escape="\\"),
                    User.email.ilike(pattern, escape="\\"),
                    User.full_name.ilike(pattern, escape="\\"),
                )
            )

        return query

    def find_by_username(self, username: str) -> User | None:
        return self._db.scalar(select(User).where(User.username == username))

    def find_by_email(self, email: str) -> User | None:
        return self._db.scalar(select(User).where(func.lower(User.email) == email.lower()))

    def find_by_login(self, login: str) -> User | None:
        """Find a user by username or email."""
        return self._db.scalar(
            select(User).where(
                or_(User.username == login, func.lower(User.email) == login.lower())
            )
        )

    def find_by_reset_token(self, token: str) -> User | None:
        return self._db.scalar(select(User).where(User.reset_password_token == token))

    def username_or_email_taken(self, username: str, email: str) -> str | None:
        """Return which field is already in use, or None."""
        if self.find_by_username(username) is not None:
            return "username"
        if self.find_by_email(email) is not None:
            return "email"
        return None

    def count_total(self, filters: UserFilters | None = None) -> int:
        query = select(func.count()).select_from(User)
        if filters is not None:
            query = self._apply_filters(query, filters)
        return self._db.scalar(query) or 0

    def count_by_tier(self, tier: str) -> int:
        return self.count(User.subscription_tier == tier)

    def count_active(self) -> int:
        return self.count(User.is_active.is_(True))

    def count_paid(self) -> int:
        return self.count_by_tier(SubscriptionTier.PREMIUM)

    def recent(self, limit: int) -> Sequence[User]:
        return self._db.execute(self._base_query().limit(limit)).scalars().all()

    def find_premium_expiring_before(self, cutoff: datetime) -> Sequence[User]:
        """Premium users whose end date is set and falls before cutoff."""
        return self._db.execute(
            select(User).where(
                User.subscription_tier == SubscriptionTier.PREMIUM,
                User.premium_end_date.is_not(None),
                User.premium_end_date <= cutoff,
            ).order_by(User.premium_end_date)
        ).scalars().all()


class RegistrationAnalyticsRepository(BaseRepository[RegistrationAnalytics]):
    """Repository for registration source tracking."""

    @property
    def model(self) -> type[RegistrationAnalytics]:
        return RegistrationAnalytics

    def _base_query(self) -> Select:
        return select(RegistrationAnalytics).order_by(
            RegistrationAnalytics.created_at.desc(), RegistrationAnalytics.id.desc()
        )

    def count_by_source(self) -> dict[str, int]:
        rows = self._db.execute(
            select(RegistrationAnalytics.source, func.count())
            .group_by(RegistrationAnalytics.source)
        ).all()
        return {(source or "direct"): count for source, count in rows}

    def count_since(self, since: datetime) -> int:
        return self.count(RegistrationAnalytics.created_at >= since)

    def count_between(self, start: datetime, end: datetime, source: str | None = None) -> int:
        criteria = [RegistrationAnalytics.created_at >= start, RegistrationAnalytics.created_at <= end]
        if source:
            criteria.append(RegistrationAnalytics.source == source)
        return self.count(*criteria)
