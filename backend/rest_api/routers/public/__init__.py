"""
Public routers - No authentication required.
- /api/health - Health check
- /api/pricing, /api/contact-info, /api/menu-examples,
  /api/testimonials, /api/advertisements - Landing-page content
"""

from .content import router as content_router
from .health import router as health_router

__all__ = ["content_router", "health_router"]
