"""
Shared Pydantic schemas used across the application.

API payloads are camelCase on the wire (``sessionId``, ``calorieGoal``) and
snake_case in Python. CamelModel does the translation; request bodies accept
either spelling.
"""

from datetime import datetime
from typing import Any, ClassVar, Literal

from pydantic import BaseModel, EmailStr, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

from shared.config.constants import DEFAULT_CURRENCY, DEFAULT_MAIN_CATEGORY, Limits
from shared.utils.validators import validate_image_url, validate_price


# =============================================================================
# Common Types
# =============================================================================

Tier = Literal["free", "premium"]
Duration = Literal["1_month", "3_months", "1_year"]
ViewSourceType = Literal["qr", "link"]
FeedbackStatusType = Literal["pending", "approved", "rejected"]
AdPositionType = Literal["top", "middle", "bottom", "sidebar"]


class CamelModel(BaseModel):
    """Base schema serialized with camelCase aliases."""

    model_config = {
        "alias_generator": to_camel,
        "populate_by_name": True,
        "from_attributes": True,
    }


class PartialUpdate(CamelModel):
    """
    Base for PATCH bodies.

    Omitted fields are left alone. Fields listed in ``non_nullable`` back
    NOT NULL columns, so an explicit null for them is rejected.
    """

    non_nullable: ClassVar[frozenset[str]] = frozenset()

    @model_validator(mode="after")
    def _reject_explicit_nulls(self):
        nulled = sorted(
            name for name in self.model_fields_set & self.non_nullable
            if getattr(self, name) is None
        )
        if nulled:
            raise ValueError(f"Fields cannot be null: {', '.join(nulled)}")
        return self


class ErrorResponse(BaseModel):
    """Standard error response."""

    detail: str | dict[str, Any]


class MessageResponse(BaseModel):
    message: str


# =============================================================================
# Authentication Schemas
# =============================================================================


class LoginRequest(BaseModel):
    """Login request body. ``username`` may also hold an email address."""

    username: str = Field(min_length=1, max_length=255)
    password: str = Field(min_length=1)


class RegisterRequest(CamelModel):
    """Sign-up body plus optional attribution for registration analytics."""

    username: str = Field(min_length=3, max_length=100)
    email: EmailStr
    password: str = Field(min_length=1)
    full_name: str | None = Field(default=None, max_length=200)

    source: str | None = Field(default=None, max_length=100)
    utm_source: str | None = Field(default=None, max_length=255)
    utm_medium: str | None = Field(default=None, max_length=255)
    utm_campaign: str | None = Field(default=None, max_length=255)
    referral_code: str | None = Field(default=None, max_length=100)
    device_type: str | None = Field(default=None, max_length=50)
    browser: str | None = Field(default=None, max_length=100)
    country: str | None = Field(default=None, max_length=100)


class UserInfo(CamelModel):
    """Public view of a user. Never carries the password hash or reset token."""

    id: int
    username: str
    email: str
    full_name: str | None = None
    subscription_tier: Tier
    premium_end_date: datetime | None = None
    is_admin: bool
    is_active: bool


class LoginResponse(BaseModel):
    """Login response with JWT tokens."""

    access_token: str
    refresh_token: str
    token_type: str = "Bearer"
    expires_in: int  # seconds
    user: UserInfo


class RefreshTokenRequest(BaseModel):
    """Refresh token request body. The cookie is used when the body is empty."""

    refresh_token: str | None = None


class ForgotPasswordRequest(BaseModel):
    email: EmailStr


class ResetPasswordRequest(BaseModel):
    token: str = Field(min_length=1)
    password: str


# =============================================================================
# Restaurant Schemas
# =============================================================================


class RestaurantCreate(CamelModel):
    name: str = Field(min_length=1, max_length=Limits.MAX_NAME_LENGTH)
    description: str | None = Field(default=None, max_length=Limits.MAX_DESCRIPTION_LENGTH)
    cuisine: str | None = Field(default=None, max_length=100)
    custom_cuisine: str | None = Field(default=None, max_length=100)
    logo_url: str | None = None
    banner_url: str | None = None
    banner_urls: list[str] = Field(default_factory=list)
    theme_settings: dict[str, Any] | None = None
    phone: str | None = Field(default=None, max_length=50)
    email: str | None = Field(default=None, max_length=255)
    address: str | None = None
    hours_of_operation: dict[str, Any] | None = None
    tags: list[str] = Field(default_factory=list)

    @field_validator("logo_url", "banner_url")
    @classmethod
    def _check_image_url(cls, v: str | None) -> str | None:
        return validate_image_url(v)


class RestaurantUpdate(PartialUpdate):
    """Partial update. Ownership (user_id) is not part of the schema."""

    non_nullable = frozenset({"name", "banner_urls", "theme_settings", "tags"})

    name: str | None = Field(default=None, min_length=1, max_length=Limits.MAX_NAME_LENGTH)
    description: str | None = Field(default=None, max_length=Limits.MAX_DESCRIPTION_LENGTH)
    cuisine: str | None = Field(default=None, max_length=100)
    custom_cuisine: str | None = Field(default=None, max_length=100)
    logo_url: str | None = None
    banner_url: str | None = None
    banner_urls: list[str] | None = None
    theme_settings: dict[str, Any] | None = None
    phone: str | None = Field(default=None, max_length=50)
    email: str | None = Field(default=None, max_length=255)
    address: str | None = None
    hours_of_operation: dict[str, Any] | None = None
    tags: list[str] | None = None

    @field_validator("logo_url", "banner_url")
    @classmethod
    def _check_image_url(cls, v: str | None) -> str | None:
        return validate_image_url(v)


class RestaurantOutput(CamelModel):
    id: int
    user_id: int
    name: str
    description: str | None = None
    cuisine: str | None = None
    custom_cuisine: str | None = None
    logo_url: str | None = None
    banner_url: str | None = None
    banner_urls: list[str] = Field(default_factory=list)
    theme_settings: dict[str, Any] = Field(default_factory=dict)
    phone: str | None = None
    email: str | None = None
    address: str | None = None
    hours_of_operation: dict[str, Any] | None = None
    tags: list[str] = Field(default_factory=list)
    qr_code_scans: int = 0
    created_at: datetime | None = None
    updated_at: datetime | None = None


class MenuViewCreate(CamelModel):
    source: ViewSourceType = "link"


class MenuViewOutput(CamelModel):
    id: int
    restaurant_id: int
    source: str
    viewed_at: datetime | None = None


class QrScanOutput(CamelModel):
    previous_count: int
    new_count: int


class RestaurantStats(CamelModel):
    view_count: int
    qr_scan_count: int
    menu_item_count: int
    days_active: int


class ItemClickStat(CamelModel):
    id: int
    name: str
    category_id: int
    click_count: int


class MenuAnalyticsOutput(CamelModel):
    restaurant_id: int
    total_clicks: int
    items: list[ItemClickStat]


class ImageUsageOutput(CamelModel):
    used: int
    limit: int
    remaining: int
    tier: Tier


# =============================================================================
# Menu Schemas
# =============================================================================


class CategoryCreate(CamelModel):
    name: str = Field(min_length=1, max_length=Limits.MAX_NAME_LENGTH)
    description: str | None = Field(default=None, max_length=Limits.MAX_DESCRIPTION_LENGTH)
    display_order: int = Field(default=0, ge=0)
    main_category: str = Field(default=DEFAULT_MAIN_CATEGORY, max_length=100)


class CategoryUpdate(PartialUpdate):
    non_nullable = frozenset({"name", "display_order", "main_category"})

    name: str | None = Field(default=None, min_length=1, max_length=Limits.MAX_NAME_LENGTH)
    description: str | None = Field(default=None, max_length=Limits.MAX_DESCRIPTION_LENGTH)
    display_order: int | None = Field(default=None, ge=0)
    main_category: str | None = Field(default=None, max_length=100)


class MenuItemCreate(CamelModel):
    name: str = Field(min_length=1, max_length=Limits.MAX_NAME_LENGTH)
    description: str | None = Field(default=None, max_length=Limits.MAX_DESCRIPTION_LENGTH)
    price: str
    currency: str = Field(default=DEFAULT_CURRENCY, min_length=3, max_length=3)
    image_url: str | None = None
    tags: list[str] = Field(default_factory=list)
    is_available: bool = True
    display_order: int = Field(default=0, ge=0)
    dietary_info: dict[str, bool] | None = None
    calories: int | None = Field(default=None, ge=0)
    allergens: list[str] | None = None

    @field_validator("price")
    @classmethod
    def _check_price(cls, v: str) -> str:
        return validate_price(v)

    @field_validator("image_url")
    @classmethod
    def _check_image_url(cls, v: str | None) -> str | None:
        return validate_image_url(v)


class MenuItemUpdate(PartialUpdate):
    non_nullable = frozenset({"name", "price", "currency", "tags", "is_available", "display_order"})

    name: str | None = Field(default=None, min_length=1, max_length=Limits.MAX_NAME_LENGTH)
    description: str | None = Field(default=None, max_length=Limits.MAX_DESCRIPTION_LENGTH)
    price: str | None = None
    currency: str | None = Field(default=None, min_length=3, max_length=3)
    image_url: str | None = None
    tags: list[str] | None = None
    is_available: bool | None = None
    display_order: int | None = Field(default=None, ge=0)
    dietary_info: dict[str, bool] | None = None
    calories: int | None = Field(default=None, ge=0)
    allergens: list[str] | None = None

    @field_validator("price")
    @classmethod
    def _check_price(cls, v: str | None) -> str | None:
        return validate_price(v)

    @field_validator("image_url")
    @classmethod
    def _check_image_url(cls, v: str | None) -> str | None:
        return validate_image_url(v)


class MenuItemOutput(CamelModel):
    id: int
    category_id: int
    name: str
    description: str | None = None
    price: str
    currency: str
    image_url: str | None = None
    tags: list[str] = Field(default_factory=list)
    is_available: bool = True
    display_order: int = 0
    dietary_info: dict[str, bool] | None = None
    calories: int | None = None
    allergens: list[str] | None = None
    click_count: int = 0


class CategoryOutput(CamelModel):
    id: int
    restaurant_id: int
    name: str
    description: str | None = None
    display_order: int = 0
    main_category: str = DEFAULT_MAIN_CATEGORY
    created_at: datetime | None = None


class CategoryWithItems(CategoryOutput):
    items: list[MenuItemOutput] = Field(default_factory=list)


class PublicMenuOutput(CamelModel):
    """A restaurant's menu as diners see it."""

    restaurant: RestaurantOutput
    subscription_tier: Tier
    is_premium: bool
    categories: list[CategoryWithItems]


# =============================================================================
# Dietary Preference & Recommendation Schemas
# =============================================================================


class DietaryPreferenceInput(CamelModel):
    """
    Upsert body. Only fields present in the request are written;
    preferences and allergies replace the stored values as a whole.
    """

    session_id: str | None = Field(default=None, max_length=64)
    preferences: dict[str, bool] | None = None
    allergies: list[str] | None = None
    calorie_goal: int | None = Field(default=None, ge=0)


class DietaryPreferenceOutput(CamelModel):
    id: int
    user_id: int | None = None
    session_id: str | None = None
    preferences: dict[str, bool] = Field(default_factory=dict)
    allergies: list[str] = Field(default_factory=list)
    calorie_goal: int | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class DietaryUpsertResponse(CamelModel):
    preference: DietaryPreferenceOutput
    session_id: str | None = None


class RecommendationOutput(CamelModel):
    item: MenuItemOutput
    score: float
    match: bool


# =============================================================================
# Feedback Schemas
# =============================================================================


class FeedbackCreate(CamelModel):
    menu_item_id: int | None = None
    rating: int = Field(ge=Limits.MIN_RATING, le=Limits.MAX_RATING)
    comment: str | None = Field(default=None, max_length=Limits.MAX_DESCRIPTION_LENGTH)
    customer_name: str | None = Field(default=None, max_length=200)
    customer_email: EmailStr | None = None


class FeedbackOutput(CamelModel):
    id: int
    restaurant_id: int
    menu_item_id: int | None = None
    rating: int
    comment: str | None = None
    customer_name: str | None = None
    customer_email: str | None = None
    status: FeedbackStatusType
    created_at: datetime | None = None


# =============================================================================
# Subscription Schemas
# =============================================================================


class SubscriptionStatusOutput(CamelModel):
    tier: Tier
    is_paid: bool
    max_restaurants: int
    current_restaurants: int
    can_create_restaurant: bool
    max_menu_item_images: int
    has_ads: bool
    expires_at: datetime | None = None
    days_remaining: int | None = None


# =============================================================================
# Public Content Schemas
# =============================================================================


class PricingPlanOutput(CamelModel):
    id: int
    name: str
    description: str | None = None
    price: str
    currency: str
    features: list[str] = Field(default_factory=list)
    tier: Tier
    billing_period: str
    is_popular: bool = False
    is_active: bool = True


class ContactInfoOutput(CamelModel):
    address: str
    email: str
    phone: str


class MenuExampleOutput(CamelModel):
    id: int
    name: str
    description: str | None = None
    image_url: str | None = None
    menu_url: str | None = None
    display_order: int = 0
    is_active: bool = True


class TestimonialOutput(CamelModel):
    id: int
    name: str
    role: str | None = None
    company: str | None = None
    content: str
    rating: int
    avatar_url: str | None = None
    display_order: int = 0
    is_active: bool = True


class AdvertisementOutput(CamelModel):
    id: int
    title: str
    description: str | None = None
    image_url: str | None = None
    link_url: str | None = None
    is_active: bool = True
    position: AdPositionType
    start_date: datetime | None = None
    end_date: datetime | None = None
    created_at: datetime | None = None
