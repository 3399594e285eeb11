"""
Centralized constants for the backend application.
Avoid magic strings and repeated constants.

Usage:
    from shared.config.constants import SubscriptionTier, SubscriptionLimits

    if user.subscription_tier == SubscriptionTier.PREMIUM:
        ...

    limits = SubscriptionLimits.for_tier(user.subscription_tier)
"""

from dataclasses import dataclass
from datetime import timedelta
from typing import Final


# =============================================================================
# Subscription Tiers
# =============================================================================


class SubscriptionTier:
    """Subscription tier constants."""

    FREE: Final[str] = "free"
    PREMIUM: Final[str] = "premium"

    ALL: Final[list[str]] = [FREE, PREMIUM]


class PremiumDuration:
    """Premium subscription durations and their length."""

    ONE_MONTH: Final[str] = "1_month"
    THREE_MONTHS: Final[str] = "3_months"
    ONE_YEAR: Final[str] = "1_year"

    DAYS: Final[dict[str, int]] = {
        ONE_MONTH: 30,
        THREE_MONTHS: 90,
        ONE_YEAR: 365,
    }

    ALL: Final[list[str]] = [ONE_MONTH, THREE_MONTHS, ONE_YEAR]

    @classmethod
    def to_timedelta(cls, duration: str) -> timedelta:
        return timedelta(days=cls.DAYS[duration])


@dataclass(frozen=True)
class TierLimits:
    """Resource limits granted by a subscription tier."""

    max_restaurants: int
    max_menu_item_images: int
    has_ads: bool


class SubscriptionLimits:
    """
    Single source of truth for what each tier allows.

    Every check on restaurant counts, image uploads or ad display
    goes through for_tier(). Unknown tiers get the free limits.
    """

    FREE: Final[TierLimits] = TierLimits(
        max_restaurants=1,
        max_menu_item_images=10,
        has_ads=True,
    )
    PREMIUM: Final[TierLimits] = TierLimits(
        max_restaurants=3,
        max_menu_item_images=1000,
        has_ads=False,
    )

    @classmethod
    def for_tier(cls, tier: str | None) -> TierLimits:
        if tier == SubscriptionTier.PREMIUM:
            return cls.PREMIUM
        return cls.FREE

    @classmethod
    def max_restaurants(cls, tier: str | None) -> int:
        return cls.for_tier(tier).max_restaurants


# Days before premium expiry when the reminder is sent
EXPIRY_NOTIFICATION_DAYS: Final[int] = 10


# =============================================================================
# Entity Status Constants
# =============================================================================


class FeedbackStatus:
    """Customer feedback moderation status."""

    PENDING: Final[str] = "pending"
    APPROVED: Final[str] = "approved"
    REJECTED: Final[str] = "rejected"

    ALL: Final[list[str]] = [PENDING, APPROVED, REJECTED]


class ViewSource:
    """Where a menu view came from."""

    QR: Final[str] = "qr"
    LINK: Final[str] = "link"

    ALL: Final[list[str]] = [QR, LINK]


class AdPosition:
    """Advertisement slot positions."""

    TOP: Final[str] = "top"
    MIDDLE: Final[str] = "middle"
    BOTTOM: Final[str] = "bottom"
    SIDEBAR: Final[str] = "sidebar"

    ALL: Final[list[str]] = [TOP, MIDDLE, BOTTOM, SIDEBAR]


class AdminAction:
    """Action names written to the admin log."""

    LOGIN: Final[str] = "admin_login"
    CREATE_USER: Final[str] = "create_user"
    CREATE_ADMIN: Final[str] = "create_admin"
    UPDATE_USER_STATUS: Final[str] = "update_user_status"
    RESET_PASSWORD: Final[str] = "reset_user_password"
    UPGRADE_SUBSCRIPTION: Final[str] = "upgrade_subscription"
    DOWNGRADE_SUBSCRIPTION: Final[str] = "downgrade_subscription"
    APPROVE_FEEDBACK: Final[str] = "approve_feedback"
    REJECT_FEEDBACK: Final[str] = "reject_feedback"
    CREATE: Final[str] = "create"
    UPDATE: Final[str] = "update"
    DELETE: Final[str] = "delete"


# =============================================================================
# Restaurant Theme
# =============================================================================


DEFAULT_THEME_SETTINGS: Final[dict[str, str]] = {
    "backgroundColor": "#ffffff",
    "textColor": "#000000",
    "headerColor": "#f5f5f5",
    "accentColor": "#4f46e5",
    "fontFamily": "Inter, sans-serif",
    "menuItemColor": "#333333",
    "menuDescriptionColor": "#666666",
    "menuPriceColor": "#111111",
}

DEFAULT_MAIN_CATEGORY: Final[str] = "Food"
DEFAULT_CURRENCY: Final[str] = "USD"


# =============================================================================
# Validation Limits
# =============================================================================


class Limits:
    """Validation limits."""

    # Ratings
    MIN_RATING: Final[int] = 1
    MAX_RATING: Final[int] = 5

    # Passwords
    MIN_PASSWORD_LENGTH: Final[int] = 8

    # Ad settings ranges
    MIN_DISPLAY_FREQUENCY: Final[int] = 1
    MAX_DISPLAY_FREQUENCY: Final[int] = 20
    MIN_ADS_PER_PAGE: Final[int] = 1
    MAX_ADS_PER_PAGE: Final[int] = 10

    # String lengths
    MAX_NAME_LENGTH: Final[int] = 200
    MAX_DESCRIPTION_LENGTH: Final[int] = 2000
    MAX_URL_LENGTH: Final[int] = 2048
    MAX_SEARCH_TERM_LENGTH: Final[int] = 100

    # Pagination defaults
    DEFAULT_PAGE_SIZE: Final[int] = 50
    MAX_PAGE_SIZE: Final[int] = 200
    ADMIN_USERS_PAGE_SIZE: Final[int] = 10
    DEFAULT_ADMIN_LOG_LIMIT: Final[int] = 50
    RECENT_USERS_COUNT: Final[int] = 5


# =============================================================================
# Recommendation Scoring
# =============================================================================


class RecommendationScore:
    """Weights used by the menu recommendation scorer."""

    ALLERGEN_PENALTY: Final[float] = -100
    PREFERENCE_MATCH: Final[float] = 10
    CALORIE_MAX_BONUS: Final[float] = 10
    CALORIE_STEP: Final[float] = 100  # calories per point lost
    CALORIE_MATCH_TOLERANCE: Final[float] = 0.2  # fraction of the goal
