"""
Common utilities shared across routers.
"""

from .base import get_user_id, get_optional_user_id
from .pagination import Pagination, get_admin_users_pagination

__all__ = [
    "get_user_id",
    "get_optional_user_id",
    "Pagination",
    "get_admin_users_pagination",
]
