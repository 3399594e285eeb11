"""
User account router package.
"""

from .routes import router

__all__ = ["router"]
