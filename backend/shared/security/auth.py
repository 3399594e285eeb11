"""
Authentication and authorization utilities.
Handles JWT access/refresh tokens for restaurant owners and admins.

Tokens carry a "tv" (token version) claim that is compared against the
user row on every authenticated request, see token_revocation.py.
"""

from __future__ import annotations

import time
import uuid
from typing import Any

import jwt
from fastapi import Depends, HTTPException, Header, status
from sqlalchemy.orm import Session

from shared.config.settings import (
    JWT_SECRET,
    JWT_ISSUER,
    JWT_AUDIENCE,
    settings,
)
from shared.config.logging import get_logger
from shared.infrastructure.db import get_db
from shared.security.token_revocation import is_token_revoked

logger = get_logger(__name__)


# =============================================================================
# JWT Functions
# =============================================================================


def sign_jwt(
    payload: dict[str, Any],
    ttl_seconds: int | None = None,
    token_type: str = "access",
) -> str:
    """
    Sign a JWT token with the given payload.

    Args:
        payload: Claims to include in the token (sub, username, is_admin, tv, ...)
        ttl_seconds: Token lifetime in seconds. Defaults to the configured expiry.
        token_type: Type of token ("access" or "refresh").

    Returns:
        Signed JWT token string.
    """
    if ttl_seconds is None:
        if token_type == "refresh":
            ttl_seconds = settings.jwt_refresh_token_expire_days * 24 * 60 * 60
        else:
            ttl_seconds = settings.jwt_access_token_expire_minutes * 60

    now = int(time.time())
    data = {
        **payload,
        "iss": JWT_ISSUER,
        "aud": JWT_AUDIENCE,
        "iat": now,
        "exp": now + ttl_seconds,
        "type": token_type,
        "jti": str(uuid.uuid4()),
    }
    return jwt.encode(data, JWT_SECRET, algorithm="HS256")


def sign_access_token(
    user_id: int,
    username: str,
    email: str,
    is_admin: bool,
    token_version: int,
) -> str:
    """Create a short-lived access token for a user."""
    return sign_jwt({
        "sub": str(user_id),
        "username": username,
        "email": email,
        "is_admin": bool(is_admin),
        "tv": token_version,
    })


def sign_refresh_token(user_id: int, token_version: int) -> str:
    """
    Create a refresh token for a user.

    Refresh tokens have longer expiry and contain minimal claims.
    They can only be used to obtain new access tokens.
    """
    return sign_jwt(
        {"sub": str(user_id), "tv": token_version},
        token_type="refresh",
    )


def verify_jwt(token: str) -> dict[str, Any]:
    """
    Verify and decode a JWT token.

    Returns:
        Decoded token claims.

    Raises:
        HTTPException: If the token is invalid, expired or malformed.
    """
    try:
        payload = jwt.decode(
            token,
            JWT_SECRET,
            algorithms=["HS256"],
            audience=JWT_AUDIENCE,
            issuer=JWT_ISSUER,
        )
    except jwt.ExpiredSignatureError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Token has expired",
        )
    except jwt.InvalidTokenError as e:
        # Keep the client message generic, log the reason
        logger.warning("JWT validation failed", error=str(e))
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token",
        )

    if "sub" not in payload:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token: missing subject claim",
        )

    if payload.get("type") not in ("access", "refresh"):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token: invalid type claim",
        )

    try:
        int(payload["sub"])
    except (ValueError, TypeError):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token: malformed subject claim",
        )

    return payload


def verify_refresh_token(token: str) -> dict[str, Any]:
    """
    Verify and decode a refresh token.

    Raises:
        HTTPException: If token is invalid, expired, or not a refresh token.
    """
    payload = verify_jwt(token)
    if payload.get("type") != "refresh":
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token type. Expected refresh token.",
        )
    return payload


def check_token_not_revoked(db: Session, payload: dict[str, Any]) -> None:
    """
    Reject tokens of deleted or deactivated users and tokens issued
    before the user's last logout or password reset.
    """
    user_id = int(payload["sub"])
    if is_token_revoked(db, user_id, payload.get("tv")):
        logger.warning("Revoked token used", user_id=user_id)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Token has been revoked",
        )


# =============================================================================
# FastAPI dependencies
# =============================================================================


def get_bearer_token(authorization: str | None) -> str:
    """
    Extract bearer token from Authorization header.

    Raises:
        HTTPException: If header is missing or malformed.
    """
    if not authorization:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing Authorization header",
        )
    if not authorization.startswith("Bearer "):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid Authorization header format. Expected: Bearer <token>",
        )
    return authorization.split(" ", 1)[1].strip()


def current_user_context(
    authorization: str | None = Header(default=None, alias="Authorization"),
    db: Session = Depends(get_db),
) -> dict[str, Any]:
    """
    FastAPI dependency to get the current user context from JWT.

    Usage:
        @router.get("/restaurants")
        def list_restaurants(ctx: dict = Depends(current_user_context)):
            user_id = int(ctx["sub"])
            ...

    Returns:
        Dict with: sub (user_id), username, email, is_admin
    """
    token = get_bearer_token(authorization)
    payload = verify_jwt(token)
    if payload.get("type") != "access":
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token type. Expected access token.",
        )
    check_token_not_revoked(db, payload)
    return payload


def optional_user_context(
    authorization: str | None = Header(default=None, alias="Authorization"),
    db: Session = Depends(get_db),
) -> dict[str, Any] | None:
    """
    Like current_user_context, but anonymous callers get None.
    A header that is present but invalid is still rejected.
    """
    if not authorization:
        return None
    return current_user_context(authorization=authorization, db=db)


def require_admin(ctx: dict[str, Any]) -> None:
    """
    Verify that the user is an administrator.

    Raises:
        HTTPException: 403 if the user is not an admin.
    """
    if not ctx.get("is_admin"):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin access required",
        )


def current_admin_context(
    ctx: dict[str, Any] = Depends(current_user_context),
) -> dict[str, Any]:
    """FastAPI dependency for admin-only endpoints."""
    require_admin(ctx)
    return ctx
