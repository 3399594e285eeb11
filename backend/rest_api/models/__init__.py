"""
SQLAlchemy ORM Models Package.

All models are organized into domain-specific modules:
- base: Base class, TimestampMixin, column types
- user: User, RegistrationAnalytics
- restaurant: Restaurant, MenuView
- menu: MenuCategory, MenuItem
- dietary: DietaryPreference
- feedback: Feedback
- billing: Subscription, Payment, PricingPlan
- audit: AdminLog
- content: ContactInfo, Advertisement, AdSettings, MenuExample, Testimonial
"""

# Base classes
from .base import Base, TimestampMixin

# Users
from .user import User, RegistrationAnalytics

# Restaurants and analytics
from .restaurant import Restaurant, MenuView

# Menu structure
from .menu import MenuCategory, MenuItem

# Diners
from .dietary import DietaryPreference
from .feedback import Feedback

# Billing
from .billing import Subscription, Payment, PricingPlan

# Audit
from .audit import AdminLog

# Platform content
from .content import ContactInfo, Advertisement, AdSettings, MenuExample, Testimonial


__all__ = [
    "Base",
    "TimestampMixin",
    "User",
    "RegistrationAnalytics",
    "Restaurant",
    "MenuView",
    "MenuCategory",
    "MenuItem",
    "DietaryPreference",
    "Feedback",
    "Subscription",
    "Payment",
    "PricingPlan",
    "AdminLog",
    "ContactInfo",
    "Advertisement",
    "AdSettings",
    "MenuExample",
    "Testimonial",
]
