"""
Admin Console Service.

Platform-wide views (dashboard, users, restaurants, subscriptions,
registration analytics, audit log) and the user management actions an
administrator can take. Every mutation writes an AdminLog row in the same
transaction.
"""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import Any

from sqlalchemy.orm import Session

from rest_api.models import User
from rest_api.repositories import (
    AdminLogRepository,
    CategoryRepository,
    MenuItemRepository,
    MenuViewRepository,
    RegistrationAnalyticsRepository,
    RepositoryFilters,
    RestaurantRepository,
    SubscriptionRepository,
    UserFilters,
    UserRepository,
)
from rest_api.services.audit import log_admin_action
from rest_api.services.domain.auth_service import check_password_strength
from rest_api.services.domain.subscription_service import SubscriptionService
from shared.config.constants import AdminAction, Limits, SubscriptionTier
from shared.config.logging import admin_logger as logger, mask_email
from shared.infrastructure.db import safe_commit
from shared.security.password import hash_password, verify_password
from shared.security.token_revocation import revoke_all_user_tokens
from shared.utils.dates import as_utc, utcnow
from shared.utils.exceptions import DuplicateEntityError, NotFoundError, ValidationError

# Dashboard buckets, in days
PERIODS = {
    "daily": 1,
    "weekly": 7,
    "monthly": 30,
    "yearly": 365,
}

# Registration sources reported when no filter is given
REGISTRATION_SOURCES = ("website", "mobile", "referral", "other")

DEFAULT_ANALYTICS_RANGE_DAYS = 30


class AdminService:
    """Read models and user management for the admin console."""

    def __init__(self, db: Session):
        self._db = db
        self._users = UserRepository(db)
        self._registrations = RegistrationAnalyticsRepository(db)
        self._restaurants = RestaurantRepository(db)
        self._categories = CategoryRepository(db)
        self._items = MenuItemRepository(db)
        self._views = MenuViewRepository(db)
        self._subscription_rows = SubscriptionRepository(db)
        self._logs = AdminLogRepository(db)
        self._subscriptions = SubscriptionService(db)

    def _get_user(self, user_id: int) -> User:
        user = self._users.find_by_id(user_id)
        if user is None:
            raise NotFoundError("User", user_id)
        return user

    # =========================================================================
    # Query Methods
    # =========================================================================

    def dashboard(self) -> dict[str, Any]:
        now = utcnow()
        registration_stats = {
            name: self._registrations.count_since(now - timedelta(days=days))
            for name, days in PERIODS.items()
        }
        registration_stats["total"] = self._registrations.count()

        view_stats = {
            name: self._views.count_since(now - timedelta(days=days))
            for name, days in PERIODS.items()
        }
        view_stats["total"] = self._views.count()

        return {
            "stats": {
                "total_users": self._users.count(),
                "active_users": self._users.count_active(),
                "free_users": self._users.count_by_tier(SubscriptionTier.FREE),
                "paid_users": self._users.count_paid(),
                "total_restaurants": self._restaurants.count(),
            },
            "recent_users": list(self._users.recent(Limits.RECENT_USERS_COUNT)),
            "registration_stats": registration_stats,
            "view_stats": view_stats,
        }

    def list_users(
        self,
        *,
        limit: int = Limits.ADMIN_USERS_PAGE_SIZE,
        offset: int = 0,
        search: str | None = None,
        tier: str | None = None,
    ) -> tuple[list[User], int]:
        """One page of users, newest first, and the total matching count."""
        filters = UserFilters(limit=limit, offset=offset, search=search, tier=tier)
        total = self._users.count_total(UserFilters(search=search, tier=tier))
        return list(self._users.find_all(filters)), total

    def list_restaurants(self) -> list[dict[str, Any]]:
        """Every restaurant with owner details and usage counters."""
        category_counts = self._categories.counts_by_restaurant()
        item_counts = self._items.counts_by_restaurant()
        view_counts = self._views.counts_by_restaurant()
        last_views = self._views.last_view_by_restaurant()

        enriched = []
        for restaurant in self._restaurants.find_all(RepositoryFilters(limit=Limits.MAX_PAGE_SIZE)):
            owner = restaurant.owner
            enriched.append({
                "restaurant": restaurant,
                "owner_name": owner.username if owner else None,
                "owner_email": owner.email if owner else None,
                "owner_subscription_tier": (
                    self._subscriptions.effective_tier(owner) if owner else SubscriptionTier.FREE
                ),
                "category_count": category_counts.get(restaurant.id, 0),
                "menu_item_count": item_counts.get(restaurant.id, 0),
                "view_count": view_counts.get(restaurant.id, 0),
                "last_visit_date": as_utc(last_views.get(restaurant.id)),
            })
        return enriched

    def list_subscriptions(self) -> list:
        return list(self._subscription_rows.find_all(RepositoryFilters(limit=Limits.MAX_PAGE_SIZE)))

    def registration_analytics(
        self,
        start: datetime | None = None,
        end: datetime | None = None,
        source: str | None = None,
    ) -> dict[str, Any]:
        """
        Registrations in [start, end], defaulting to the last 30 days,
        with a per-source breakdown.
        """
        end = as_utc(end) or utcnow()
        start = as_utc(start) or end - timedelta(days=DEFAULT_ANALYTICS_RANGE_DAYS)
        if start > end:
            raise ValidationError("startDate must be before endDate")

        if source:
            by_source = {source: self._registrations.count_between(start, end, source)}
        else:
            all_sources = self._registrations.count_by_source()
            by_source = {name: all_sources.get(name, 0) for name in REGISTRATION_SOURCES}
            for name, count in all_sources.items():
                by_source.setdefault(name, count)

        return {
            "total_registrations_in_range": self._registrations.count_between(start, end, source),
            "registrations_by_source": by_source,
            "start_date": start,
            "end_date": end,
        }

    def list_logs(self, limit: int = Limits.DEFAULT_ADMIN_LOG_LIMIT) -> list:
        limit = min(max(1, limit), Limits.MAX_PAGE_SIZE)
        return list(self._logs.recent(limit))

    def get_profile(self, admin_id: int) -> User:
        return self._get_user(admin_id)

    # =========================================================================
    # Command Methods
    # =========================================================================

    def create_user(self, data: dict[str, Any], admin_id: int, *, is_admin: bool = False) -> User:
        """
        Create an owner (or another admin) on the admin's behalf.

        Raises:
            DuplicateEntityError: Username or email already in use.
            ValidationError: Weak password.
        """
        check_password_strength(data["password"])

        taken = self._users.username_or_email_taken(data["username"], data["email"])
        if taken == "username":
            raise DuplicateEntityError("Username", data["username"])
        if taken == "email":
            raise DuplicateEntityError("Email", mask_email(data["email"]))

        user = self._users.save(
            User(
                username=data["username"],
                email=data["email"],
                password=hash_password(data["password"]),
                full_name=data.get("full_name"),
                subscription_tier=SubscriptionTier.FREE,
                is_admin=is_admin,
                is_active=True,
            )
        )
        log_admin_action(
            self._db,
            admin_id=admin_id,
            action=AdminAction.CREATE_ADMIN if is_admin else AdminAction.CREATE_USER,
            entity_type="user",
            entity_id=user.id,
            details={"username": user.username},
        )
        safe_commit(self._db)
        self._db.refresh(user)

        logger.info("User created by admin", user_id=user.id, admin_id=admin_id, is_admin=is_admin)
        return user

    def set_user_status(self, user_id: int, is_active: bool, admin_id: int) -> User:
        """Activate or deactivate an account. Deactivation revokes its tokens."""
        user = self._get_user(user_id)
        user.is_active = is_active

        log_admin_action(
            self._db,
            admin_id=admin_id,
            action=AdminAction.UPDATE_USER_STATUS,
            entity_type="user",
            entity_id=user_id,
            details={"is_active": is_active},
        )
        self._db.flush()
        if not is_active:
            revoke_all_user_tokens(self._db, user_id)
        safe_commit(self._db)
        self._db.refresh(user)

        logger.info("User status changed", user_id=user_id, is_active=is_active, admin_id=admin_id)
        return user

    def reset_user_password(self, user_id: int, password: str, admin_id: int) -> User:
        """Set a new password and sign the user out everywhere."""
        check_password_strength(password)
        user = self._get_user(user_id)

        user.password = hash_password(password)
        user.reset_password_token = None
        user.reset_password_expires = None

        log_admin_action(
            self._db,
            admin_id=admin_id,
            action=AdminAction.RESET_PASSWORD,
            entity_type="user",
            entity_id=user_id,
            details={"username": user.username},
        )
        self._db.flush()
        revoke_all_user_tokens(self._db, user_id)
        safe_commit(self._db)
        self._db.refresh(user)

        logger.info("Password reset by admin", user_id=user_id, admin_id=admin_id)
        return user

    def change_subscription(
        self,
        user_id: int,
        tier: str,
        duration: str | None,
        admin_id: int,
    ) -> tuple[User, list]:
        """
        Move a user to a tier, then report restaurants above the new limit.

        Returns:
            The updated user and the over-limit restaurants (possibly empty).
        """
        if tier == SubscriptionTier.PREMIUM:
            if not duration:
                raise ValidationError("Duration is required for premium", field="duration")
            user = self._subscriptions.upgrade_to_premium(user_id, duration, admin_id=admin_id)
        elif tier == SubscriptionTier.FREE:
            user = self._subscriptions.downgrade_to_free(user_id, admin_id=admin_id)
        else:
            raise ValidationError("Invalid subscription tier", field="tier", value=tier)

        over_limit = self._subscriptions.manage_restaurants_by_subscription(user_id)
        return user, over_limit

    def update_profile(self, admin_id: int, data: dict[str, Any]) -> User:
        """
        Update the admin's own username, email or password.
        A new password needs the current one.
        """
        admin = self._get_user(admin_id)

        username = data.get("username")
        if username and username != admin.username:
            if self._users.find_by_username(username) is not None:
                raise DuplicateEntityError("Username", username)
            admin.username = username

        email = data.get("email")
        if email and email.lower() != admin.email.lower():
            if self._users.find_by_email(email) is not None:
                raise DuplicateEntityError("Email", mask_email(email))
            admin.email = email

        if data.get("full_name") is not None:
            admin.full_name = data["full_name"]

        new_password = data.get("new_password")
        if new_password:
            current = data.get("current_password")
            if not current:
                raise ValidationError("Current password is required to set a new password")
            if not verify_password(current, admin.password):
                raise ValidationError("Current password is incorrect", user_id=admin_id)
            check_password_strength(new_password)
            admin.password = hash_password(new_password)

        log_admin_action(
            self._db,
            admin_id=admin_id,
            action=AdminAction.UPDATE,
            entity_type="user",
            entity_id=admin_id,
            details={"fields": sorted(k for k in data if k not in ("current_password", "new_password"))
                     + (["password"] if new_password else [])},
        )
        safe_commit(self._db)
        self._db.refresh(admin)
        return admin
