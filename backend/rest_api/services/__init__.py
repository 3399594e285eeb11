"""
Services module for business logic.

CLEAN ARCHITECTURE:
- domain/: Application services (business logic) - USE THESE
- base_service: base classes for new domain services
- audit: admin_log writer shared by every admin mutation

Usage:
    from rest_api.services.domain import RestaurantService
    service = RestaurantService(db)
    restaurants = service.list_for_owner(user_id)
"""

from .audit import log_admin_action, serialize_model, diff_values

from .base_service import (
    BaseService,
    BaseCRUDService,
    OwnedEntityService,
)

from .domain import (
    SubscriptionService,
    RestaurantService,
    CategoryService,
    MenuItemService,
    DietaryService,
    RecommendationService,
    FeedbackService,
    AuthService,
    AdminService,
)

__all__ = [
    # Audit
    "log_admin_action",
    "serialize_model",
    "diff_values",
    # Base service classes
    "BaseService",
    "BaseCRUDService",
    "OwnedEntityService",
    # Domain services
    "SubscriptionService",
    "RestaurantService",
    "CategoryService",
    "MenuItemService",
    "DietaryService",
    "RecommendationService",
    "FeedbackService",
    "AuthService",
    "AdminService",
]
