"""
Diner routers - /api/dietary-preferences, /api/menu-recommendations
Anonymous-friendly endpoints used by the public menu.
"""

from .dietary import router as dietary_router
from .recommendations import router as recommendations_router

__all__ = ["dietary_router", "recommendations_router"]
