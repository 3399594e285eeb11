"""
Domain Services - Clean Architecture Application Layer.

Services contain the business rules and orchestrate operations.
They use Repositories for data access and write the admin audit trail.

Structure:
    Router (thin controller)
        ↓
    Service (business logic)  ← YOU ARE HERE
        ↓
    Repository (data access)
        ↓
    Model (entity)

Usage:
    from rest_api.services.domain import RestaurantService

    # In router
    service = RestaurantService(db)
    restaurants = service.list_for_owner(user_id)
"""

from .subscription_service import SubscriptionService, UserLimits
from .restaurant_service import RestaurantService, ensure_restaurant_owner
from .menu_service import CategoryService, MenuItemService
from .dietary_service import DietaryService
from .recommendation_service import RecommendationService, ScoredItem, score_item, score_items
from .feedback_service import FeedbackService
from .auth_service import AuthService
from .admin_service import AdminService
from .content_service import (
    PricingPlanService,
    MenuExampleService,
    TestimonialService,
    ContactInfoService,
    AdSettingsService,
    AdvertisementService,
)

__all__ = [
    # Subscriptions
    "SubscriptionService",
    "UserLimits",
    # Restaurants and menus
    "RestaurantService",
    "ensure_restaurant_owner",
    "CategoryService",
    "MenuItemService",
    # Diners
    "DietaryService",
    "RecommendationService",
    "ScoredItem",
    "score_item",
    "score_items",
    "FeedbackService",
    # Accounts
    "AuthService",
    "AdminService",
    # Platform content
    "PricingPlanService",
    "MenuExampleService",
    "TestimonialService",
    "ContactInfoService",
    "AdSettingsService",
    "AdvertisementService",
]
