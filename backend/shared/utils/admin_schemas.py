"""
Pydantic schemas for admin API endpoints.
Centralized to avoid circular imports and improve maintainability.

This file contains the request/response schemas used by the admin routers.
"""

from datetime import datetime
from typing import Any

from pydantic import EmailStr, Field, field_validator

from shared.config.constants import DEFAULT_CURRENCY, Limits
from shared.utils.schemas import AdPositionType, CamelModel, Duration, PartialUpdate, Tier
from shared.utils.validators import validate_image_url, validate_price


# =============================================================================
# Dashboard Schemas
# =============================================================================


class DashboardStats(CamelModel):
    total_users: int
    active_users: int
    free_users: int
    paid_users: int
    total_restaurants: int


class PeriodCounts(CamelModel):
    daily: int
    weekly: int
    monthly: int
    yearly: int
    total: int


class AdminUserOutput(CamelModel):
    id: int
    username: str
    email: str
    full_name: str | None = None
    subscription_tier: Tier
    premium_start_date: datetime | None = None
    premium_end_date: datetime | None = None
    premium_duration: str | None = None
    is_admin: bool
    is_active: bool
    last_login: datetime | None = None
    created_at: datetime | None = None


class DashboardOutput(CamelModel):
    stats: DashboardStats
    recent_users: list[AdminUserOutput]
    registration_stats: PeriodCounts
    view_stats: PeriodCounts


# =============================================================================
# User Management Schemas
# =============================================================================


class PaginationOutput(CamelModel):
    page: int
    limit: int
    total: int
    total_pages: int
    has_next: bool
    has_prev: bool


class AdminUserList(CamelModel):
    users: list[AdminUserOutput]
    pagination: PaginationOutput


class AdminUserCreate(CamelModel):
    username: str = Field(min_length=3, max_length=100)
    email: EmailStr
    password: str
    full_name: str | None = Field(default=None, max_length=200)


class UserStatusUpdate(CamelModel):
    is_active: bool


class PasswordResetByAdmin(CamelModel):
    new_password: str


class SubscriptionChange(CamelModel):
    tier: Tier
    duration: Duration | None = None


class SubscriptionChangeOutput(CamelModel):
    user: AdminUserOutput
    over_limit_restaurant_ids: list[int] = Field(default_factory=list)


class AdminProfileUpdate(CamelModel):
    username: str | None = Field(default=None, min_length=3, max_length=100)
    email: EmailStr | None = None
    full_name: str | None = Field(default=None, max_length=200)
    current_password: str | None = None
    new_password: str | None = None


# =============================================================================
# Restaurant / Subscription / Analytics Schemas
# =============================================================================


class AdminRestaurantOutput(CamelModel):
    id: int
    name: str
    user_id: int
    cuisine: str | None = None
    qr_code_scans: int = 0
    created_at: datetime | None = None
    owner_name: str | None = None
    owner_email: str | None = None
    owner_subscription_tier: Tier
    category_count: int
    menu_item_count: int
    view_count: int
    last_visit_date: datetime | None = None


class SubscriptionOutput(CamelModel):
    id: int
    user_id: int
    tier: Tier
    start_date: datetime
    end_date: datetime | None = None
    payment_method: str | None = None
    is_active: bool
    created_at: datetime | None = None


class RegistrationAnalyticsOutput(CamelModel):
    total_registrations_in_range: int
    registrations_by_source: dict[str, int]
    start_date: datetime
    end_date: datetime


class AdminLogOutput(CamelModel):
    id: int
    admin_id: int
    action: str
    entity_type: str | None = None
    entity_id: int | None = None
    details: dict[str, Any] | None = None
    created_at: datetime | None = None


# =============================================================================
# Content Schemas
# =============================================================================


class PricingPlanCreate(CamelModel):
    name: str = Field(min_length=1, max_length=100)
    description: str | None = None
    price: str
    currency: str = Field(default=DEFAULT_CURRENCY, min_length=3, max_length=3)
    features: list[str] = Field(default_factory=list)
    tier: Tier = "free"
    billing_period: str = Field(default="monthly", max_length=20)
    is_popular: bool = False
    is_active: bool = True

    @field_validator("price")
    @classmethod
    def _check_price(cls, v: str) -> str:
        return validate_price(v)


class PricingPlanUpdate(PartialUpdate):
    non_nullable = frozenset({
        "name", "price", "currency", "features", "tier", "billing_period", "is_popular", "is_active",
    })

    name: str | None = Field(default=None, min_length=1, max_length=100)
    description: str | None = None
    price: str | None = None
    currency: str | None = Field(default=None, min_length=3, max_length=3)
    features: list[str] | None = None
    tier: Tier | None = None
    billing_period: str | None = Field(default=None, max_length=20)
    is_popular: bool | None = None
    is_active: bool | None = None

    @field_validator("price")
    @classmethod
    def _check_price(cls, v: str | None) -> str | None:
        return validate_price(v)


class AdvertisementCreate(CamelModel):
    title: str = Field(min_length=1, max_length=200)
    description: str | None = None
    image_url: str | None = None
    link_url: str | None = Field(default=None, max_length=Limits.MAX_URL_LENGTH)
    is_active: bool = True
    position: AdPositionType = "bottom"
    start_date: datetime | None = None
    end_date: datetime | None = None

    @field_validator("image_url")
    @classmethod
    def _check_image_url(cls, v: str | None) -> str | None:
        return validate_image_url(v)


class AdvertisementUpdate(PartialUpdate):
    non_nullable = frozenset({"title", "is_active", "position"})

    title: str | None = Field(default=None, min_length=1, max_length=200)
    description: str | None = None
    image_url: str | None = None
    link_url: str | None = Field(default=None, max_length=Limits.MAX_URL_LENGTH)
    is_active: bool | None = None
    position: AdPositionType | None = None
    start_date: datetime | None = None
    end_date: datetime | None = None

    @field_validator("image_url")
    @classmethod
    def _check_image_url(cls, v: str | None) -> str | None:
        return validate_image_url(v)


class MenuExampleCreate(CamelModel):
    name: str = Field(min_length=1, max_length=200)
    description: str | None = None
    image_url: str | None = None
    menu_url: str | None = Field(default=None, max_length=Limits.MAX_URL_LENGTH)
    display_order: int = Field(default=0, ge=0)
    is_active: bool = True


class MenuExampleUpdate(PartialUpdate):
    non_nullable = frozenset({"name", "display_order", "is_active"})

    name: str | None = Field(default=None, min_length=1, max_length=200)
    description: str | None = None
    image_url: str | None = None
    menu_url: str | None = Field(default=None, max_length=Limits.MAX_URL_LENGTH)
    display_order: int | None = Field(default=None, ge=0)
    is_active: bool | None = None


class TestimonialCreate(CamelModel):
    name: str = Field(min_length=1, max_length=200)
    role: str | None = Field(default=None, max_length=200)
    company: str | None = Field(default=None, max_length=200)
    content: str = Field(min_length=1)
    rating: int = Field(default=5, ge=Limits.MIN_RATING, le=Limits.MAX_RATING)
    avatar_url: str | None = None
    display_order: int = Field(default=0, ge=0)
    is_active: bool = True


class TestimonialUpdate(PartialUpdate):
    non_nullable = frozenset({"name", "content", "rating", "display_order", "is_active"})

    name: str | None = Field(default=None, min_length=1, max_length=200)
    role: str | None = Field(default=None, max_length=200)
    company: str | None = Field(default=None, max_length=200)
    content: str | None = Field(default=None, min_length=1)
    rating: int | None = Field(default=None, ge=Limits.MIN_RATING, le=Limits.MAX_RATING)
    avatar_url: str | None = None
    display_order: int | None = Field(default=None, ge=0)
    is_active: bool | None = None


class ContactInfoUpdate(PartialUpdate):
    non_nullable = frozenset({"address", "email", "phone"})

    address: str | None = Field(default=None, min_length=1)
    email: EmailStr | None = None
    phone: str | None = Field(default=None, min_length=1, max_length=50)


class AdSettingsOutput(CamelModel):
    id: int
    position: AdPositionType
    is_enabled: bool
    description: str | None = None
    display_frequency: int
    max_ads_per_page: int
    updated_at: datetime | None = None


class AdSettingsUpdate(PartialUpdate):
    non_nullable = frozenset({"is_enabled", "display_frequency", "max_ads_per_page"})

    position: AdPositionType
    is_enabled: bool | None = None
    description: str | None = None
    display_frequency: int | None = Field(
        default=None, ge=Limits.MIN_DISPLAY_FREQUENCY, le=Limits.MAX_DISPLAY_FREQUENCY
    )
    max_ads_per_page: int | None = Field(
        default=None, ge=Limits.MIN_ADS_PER_PAGE, le=Limits.MAX_ADS_PER_PAGE
    )
