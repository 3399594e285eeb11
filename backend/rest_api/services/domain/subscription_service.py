"""
Subscription Service.

Business rules:
- Tier limits come from SubscriptionLimits.for_tier(); nothing else
  hardcodes a restaurant or image quota.
- A premium user whose end date has passed is downgraded to free the
  next time their limits are checked.
- Downgrades never delete restaurants. Restaurants over the new limit
  are reported and logged so the owner can decide which to remove.
- Upgrades and downgrades done by an admin are written to admin_log.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any, Sequence

from sqlalchemy.orm import Session

from rest_api.models import Restaurant, Subscription, User
from rest_api.repositories import (
    MenuItemRepository,
    RestaurantRepository,
    SubscriptionRepository,
    UserRepository,
)
from rest_api.services.audit import log_admin_action
from shared.config.constants import (
    EXPIRY_NOTIFICATION_DAYS,
    AdminAction,
    PremiumDuration,
    SubscriptionLimits,
    SubscriptionTier,
    TierLimits,
)
from shared.config.logging import mask_email, subscription_logger as logger
from shared.infrastructure.db import safe_commit
from shared.utils.dates import as_utc, days_until, utcnow
from shared.utils.exceptions import ImageLimitError, NotFoundError, ValidationError


@dataclass
class UserLimits:
    """What a user may do right now under their tier."""

    tier: str
    limits: TierLimits
    restaurant_count: int

    @property
    def can_create_restaurant(self) -> bool:
        return self.restaurant_count < self.limits.max_restaurants


class SubscriptionService:
    """Tier changes, limit checks and expiry handling."""

    def __init__(self, db: Session):
        self._db = db
        self._users = UserRepository(db)
        self._restaurants = RestaurantRepository(db)
        self._subscriptions = SubscriptionRepository(db)
        self._items = MenuItemRepository(db)

    # =========================================================================
    # Query Methods
    # =========================================================================

    def get_user(self, user_id: int) -> User:
        user = self._users.find_by_id(user_id)
        if user is None:
            raise NotFoundError("User", user_id)
        return user

    @staticmethod
    def is_expired(user: User, now: datetime | None = None) -> bool:
        """True for a premium user whose end date has passed."""
        if user.subscription_tier != SubscriptionTier.PREMIUM or user.premium_end_date is None:
            return False
        return as_utc(user.premium_end_date) <= (now or utcnow())

    def effective_tier(self, user: User) -> str:
        """The tier the user is entitled to, without writing anything."""
        if self.is_expired(user):
            return SubscriptionTier.FREE
        return user.subscription_tier or SubscriptionTier.FREE

    def check_user_limits(self, user_id: int) -> UserLimits:
        """
        Current tier, its limits and how many restaurants the user owns.
        An expired premium user is downgraded first.
        """
        user = self.get_user(user_id)
        if self.is_expired(user):
            logger.info("Premium expired, downgrading", user_id=user_id)
            self.downgrade_to_free(user_id)

        tier = user.subscription_tier or SubscriptionTier.FREE
        return UserLimits(
            tier=tier,
            limits=SubscriptionLimits.for_tier(tier),
            restaurant_count=self._restaurants.count_by_owner(user_id),
        )

    def get_subscription_status(self, user_id: int) -> dict[str, Any]:
        """Status payload for the owner dashboard."""
        limits = self.check_user_limits(user_id)
        user = self.get_user(user_id)
        is_paid = limits.tier == SubscriptionTier.PREMIUM

        expires_at = as_utc(user.premium_end_date) if is_paid else None
        return {
            "tier": limits.tier,
            "is_paid": is_paid,
            "max_restaurants": limits.limits.max_restaurants,
            "current_restaurants": limits.restaurant_count,
            "can_create_restaurant": limits.can_create_restaurant,
            "max_menu_item_images": limits.limits.max_menu_item_images,
            "has_ads": limits.limits.has_ads,
            "expires_at": expires_at,
            "days_remaining": days_until(expires_at) if expires_at else None,
        }

    def image_usage(self, user_id: int) -> dict[str, Any]:
        """Images used across the owner's menus against the tier quota."""
        limits = self.check_user_limits(user_id)
        used = self._items.count_images_for_owner(user_id)
        limit = limits.limits.max_menu_item_images
        return {
            "used": used,
            "limit": limit,
            "remaining": max(0, limit - used),
            "tier": limits.tier,
        }

    def validate_image_upload(self, user_id: int) -> None:
        """
        Raises:
            ImageLimitError: The owner has used every image their tier allows.
        """
        usage = self.image_usage(user_id)
        if usage["used"] >= usage["limit"]:
            raise ImageLimitError(limit=usage["limit"], used=usage["used"], user_id=user_id)

    # =========================================================================
    # Command Methods
    # =========================================================================

    def upgrade_to_premium(
        self,
        user_id: int,
        duration: str,
        *,
        admin_id: int | None = None,
        payment_method: str | None = None,
    ) -> User:
        """
        Grant premium for a fixed duration starting now.

        Raises:
            ValidationError: Unknown duration.
            NotFoundError: Unknown user.
        """
        if duration not in PremiumDuration.ALL:
            raise ValidationError(
                f"Invalid duration. Expected one of: {', '.join(PremiumDuration.ALL)}",
                field="duration",
                value=duration,
            )

        user = self.get_user(user_id)
        start = utcnow()
        end = start + PremiumDuration.to_timedelta(duration)

        user.subscription_tier = SubscriptionTier.PREMIUM
        user.premium_start_date = start
        user.premium_end_date = end
        user.premium_duration = duration
        user.notification_sent = False

        self._subscriptions.deactivate_for_user(user_id)
        self._subscriptions.save(
            Subscription(
                user_id=user_id,
                tier=SubscriptionTier.PREMIUM,
                start_date=start,
                end_date=end,
                payment_method=payment_method or ("admin" if admin_id else None),
                is_active=True,
            )
        )

        if admin_id is not None:
            log_admin_action(
                self._db,
                admin_id=admin_id,
                action=AdminAction.UPGRADE_SUBSCRIPTION,
                entity_type="user",
                entity_id=user_id,
                details={"duration": duration, "end_date": end.isoformat()},
            )

        safe_commit(self._db)
        self._db.refresh(user)
        logger.info(
            "User upgraded to premium",
            user_id=user_id,
            duration=duration,
            end_date=end.isoformat(),
            admin_id=admin_id,
        )
        return user

    def downgrade_to_free(self, user_id: int, *, admin_id: int | None = None) -> User:
        """Return the user to the free tier and close any active subscription."""
        user = self.get_user(user_id)

        user.subscription_tier = SubscriptionTier.FREE
        user.premium_start_date = None
        user.premium_end_date = None
        user.premium_duration = None
        user.notification_sent = False

        self._subscriptions.deactivate_for_user(user_id)

        if admin_id is not None:
            log_admin_action(
                self._db,
                admin_id=admin_id,
                action=AdminAction.DOWNGRADE_SUBSCRIPTION,
                entity_type="user",
                entity_id=user_id,
            )

        safe_commit(self._db)
        self._db.refresh(user)
        logger.info("User downgraded to free", user_id=user_id, admin_id=admin_id)
        return user

    def downgrade_expired(self) -> list[User]:
        """Downgrade every premium user whose end date has passed."""
        now = utcnow()
        expired = [u for u in self._users.find_premium_expiring_before(now) if self.is_expired(u, now)]
        for user in expired:
            self.downgrade_to_free(user.id)
        if expired:
            logger.info("Expired premium accounts downgraded", count=len(expired))
        return expired

    def check_expiry_notifications(self) -> Sequence[User]:
        """
        Mark premium users expiring within EXPIRY_NOTIFICATION_DAYS as notified.

        Each user is picked up once; upgrading again resets the flag.

        Returns:
            The users that were notified in this run.
        """
        now = utcnow()
        cutoff = now + timedelta(days=EXPIRY_NOTIFICATION_DAYS)

        notified = []
        for user in self._users.find_premium_expiring_before(cutoff):
            if user.notification_sent or as_utc(user.premium_end_date) <= now:
                continue
            user.notification_sent = True
            notified.append(user)
            logger.info(
                "Premium expiry reminder",
                user_id=user.id,
                email=mask_email(user.email),
                days_remaining=days_until(user.premium_end_date, now),
            )

        if notified:
            safe_commit(self._db)
        return notified

    def manage_restaurants_by_subscription(self, user_id: int) -> list[Restaurant]:
        """
        Check the owner's restaurants against their (possibly new) tier.

        Nothing is deleted. The restaurants above the limit, most recently
        created first, are logged and returned.
        """
        limits = self.check_user_limits(user_id)
        max_allowed = limits.limits.max_restaurants
        restaurants = list(self._restaurants.find_by_owner(user_id))

        if len(restaurants) <= max_allowed:
            return []

        # find_by_owner is oldest first; the newest ones are over the limit
        over_limit = list(reversed(restaurants[max_allowed:]))
        logger.warning(
            "Restaurants over tier limit",
            user_id=user_id,
            tier=limits.tier,
            limit=max_allowed,
            owned=len(restaurants),
            over_limit_ids=[r.id for r in over_limit],
        )
        return over_limit
