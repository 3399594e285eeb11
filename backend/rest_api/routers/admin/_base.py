"""
Shared dependencies and helpers for admin routers.

Every admin endpoint depends on require_admin, which validates the access
token and the is_admin claim (401 / 403).
"""

from typing import Any

from fastapi import Depends

from shared.security.auth import current_admin_context
from rest_api.routers._common.base import get_user_id


def require_admin(ctx: dict[str, Any] = Depends(current_admin_context)) -> dict[str, Any]:
    """Dependency that requires an administrator."""
    return ctx


def get_admin_id(ctx: dict[str, Any]) -> int:
    """Admin id recorded on admin_log rows."""
    return get_user_id(ctx)


__all__ = ["require_admin", "get_admin_id"]
