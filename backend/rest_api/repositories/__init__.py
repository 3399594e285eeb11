"""
Repository Pattern implementation.
Centralizes data access; services never build queries themselves.

Usage:
    from rest_api.repositories import RestaurantRepository

    repo = RestaurantRepository(db)
    restaurants = repo.find_by_owner(user_id)
    restaurant = repo.find_by_id(12)
"""

from .base import BaseRepository, ModelRepository, RepositoryFilters
from .user import UserRepository, UserFilters, RegistrationAnalyticsRepository
from .restaurant import RestaurantRepository, MenuViewRepository
from .menu import CategoryRepository, MenuItemRepository
from .dietary import DietaryPreferenceRepository
from .feedback import FeedbackRepository, FeedbackFilters
from .billing import SubscriptionRepository, AdminLogRepository
from .content import AdvertisementRepository, AdSettingsRepository

__all__ = [
    # Base
    "BaseRepository",
    "ModelRepository",
    "RepositoryFilters",
    # Users
    "UserRepository",
    "UserFilters",
    "RegistrationAnalyticsRepository",
    # Restaurants
    "RestaurantRepository",
    "MenuViewRepository",
    # Menu
    "CategoryRepository",
    "MenuItemRepository",
    # Dietary
    "DietaryPreferenceRepository",
    # Feedback
    "FeedbackRepository",
    "FeedbackFilters",
    # Billing
    "SubscriptionRepository",
    "AdminLogRepository",
    # Content
    "AdvertisementRepository",
    "AdSettingsRepository",
]
