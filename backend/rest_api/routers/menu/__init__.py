"""
Menu router package.
"""

from .routes import router

__all__ = ["router"]
