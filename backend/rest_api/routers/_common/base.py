"""
Helpers for reading the JWT context inside routers.
"""

from typing import Any


def get_user_id(ctx: dict[str, Any]) -> int:
    """User id from the token's ``sub`` claim."""
    return int(ctx["sub"])


def get_optional_user_id(ctx: dict[str, Any] | None) -> int | None:
    """User id for optional-auth endpoints; None for anonymous callers."""
    return int(ctx["sub"]) if ctx else None
