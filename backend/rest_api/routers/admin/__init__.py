"""
Admin API router - combines all admin sub-routers.

This module provides a single router that includes all admin endpoints
organized by domain:

- dashboard: Platform totals and period counts
- users: User listing, creation, status, password and subscription changes
- platform: Restaurants, subscriptions, registration analytics, admin log
- profile: The signed-in admin's own account
- feedback: Feedback moderation
- content: Pricing, advertisements, menu examples, testimonials,
  contact info and ad settings

All routes are prefixed with /api/admin and require an admin token.
"""

from fastapi import APIRouter

from .dashboard import router as dashboard_router
from .users import router as users_router
from .platform import router as platform_router
from .profile import router as profile_router
from .feedback import router as feedback_router
from .content import router as content_router


# Create the main admin router
router = APIRouter(prefix="/api/admin")

router.include_router(dashboard_router)
router.include_router(users_router)
router.include_router(platform_router)
router.include_router(profile_router)
router.include_router(feedback_router)
router.include_router(content_router)


__all__ = ["router"]
