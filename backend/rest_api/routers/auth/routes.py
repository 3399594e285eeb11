"""
Authentication router.
Handles registration, login, token refresh, logout and password resets.
"""

from typing import Optional
from fastapi import APIRouter, Cookie, Depends, HTTPException, status, Request, Response
from pydantic import BaseModel
from sqlalchemy.orm import Session

from shared.infrastructure.db import get_db
from shared.config.settings import settings
from shared.security.auth import current_user_context
from shared.security.rate_limit import limiter
from shared.utils.schemas import (
    ForgotPasswordRequest,
    LoginRequest,
    LoginResponse,
    MessageResponse,
    RefreshTokenRequest,
    RegisterRequest,
    ResetPasswordRequest,
    UserInfo,
)
from rest_api.services.domain import AuthService
from rest_api.services.domain.auth_service import FORGOT_PASSWORD_MESSAGE


router = APIRouter(prefix="/api/auth", tags=["auth"])


# =============================================================================
# HttpOnly Cookie Helpers
# =============================================================================

def set_refresh_token_cookie(response: Response, refresh_token: str) -> None:
    """
    Set refresh token as HttpOnly cookie with security flags.

    - httponly: Cannot be accessed by JavaScript (XSS protection)
    - secure: Only sent over HTTPS (configurable for dev)
    - samesite: CSRF protection (lax allows top-level navigation)
    - path: Only sent to /api/auth endpoints
    - max_age: matches refresh token expiry
    """
    max_age_seconds = settings.jwt_refresh_token_expire_days * 24 * 60 * 60

    response.set_cookie(
        key="refresh_token",
        value=refresh_token,
        httponly=True,
        secure=settings.cookie_secure,
        samesite=settings.cookie_samesite,
        max_age=max_age_seconds,
        path="/api/auth",
        domain=settings.cookie_domain or None,
    )


def clear_refresh_token_cookie(response: Response) -> None:
    """Clear refresh token cookie on logout."""
    response.delete_cookie(
        key="refresh_token",
        path="/api/auth",
        domain=settings.cookie_domain or None,
    )


def _client_ip(request: Request) -> str | None:
    return request.client.host if request.client else None


class LogoutResponse(BaseModel):
    """Response for logout."""
    success: bool
    message: str


# =============================================================================
# Registration and login
# =============================================================================


@router.post("/register", response_model=LoginResponse, status_code=status.HTTP_201_CREATED)
@limiter.limit("10/minute")
def register(request: Request, response: Response, body: RegisterRequest, db: Session = Depends(get_db)) -> dict:
    """
    Create a free-tier account and log it in.

    Username or email already taken: 400.
    """
    service = AuthService(db)
    user = service.register(body.model_dump())
    payload = service.issue_tokens(user)
    set_refresh_token_cookie(response, payload["refresh_token"])
    return payload


@router.post("/login", response_model=LoginResponse)
@limiter.limit(settings.login_rate_limit)
def login(request: Request, response: Response, body: LoginRequest, db: Session = Depends(get_db)) -> dict:
    """
    Authenticate with a username or email and return access + refresh tokens.

    The refresh token is also set as an HttpOnly cookie scoped to /api/auth.
    """
    service = AuthService(db)
    user = service.authenticate(body.username, body.password, ip_address=_client_ip(request))
    payload = service.issue_tokens(user)
    set_refresh_token_cookie(response, payload["refresh_token"])
    return payload


@router.post("/admin-login", response_model=LoginResponse)
@limiter.limit(settings.login_rate_limit)
def admin_login(request: Request, response: Response, body: LoginRequest, db: Session = Depends(get_db)) -> dict:
    """Like /login, but only administrators get tokens (403 otherwise)."""
    service = AuthService(db)
    user = service.authenticate_admin(body.username, body.password, ip_address=_client_ip(request))
    payload = service.issue_tokens(user)
    set_refresh_token_cookie(response, payload["refresh_token"])
    return payload


@router.post("/refresh", response_model=LoginResponse)
@limiter.limit("10/minute")
def refresh_token(
    request: Request,
    response: Response,
    body: Optional[RefreshTokenRequest] = None,
    refresh_token_cookie: Optional[str] = Cookie(None, alias="refresh_token"),
    db: Session = Depends(get_db),
) -> dict:
    """
    Exchange a refresh token for new access + refresh tokens.

    Reads the refresh token from the HttpOnly cookie first, falls back to body.
    Tokens issued before the last logout or password reset are rejected.
    """
    token_value = refresh_token_cookie
    if not token_value and body and body.refresh_token:
        token_value = body.refresh_token

    if not token_value:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Refresh token not provided",
        )

    payload = AuthService(db).refresh(token_value)
    set_refresh_token_cookie(response, payload["refresh_token"])
    return payload


@router.get("/me", response_model=UserInfo)
def get_current_user(
    db: Session = Depends(get_db),
    ctx: dict = Depends(current_user_context),
) -> UserInfo:
    """Get current authenticated user info."""
    return UserInfo.model_validate(AuthService(db).get_user(int(ctx["sub"])))


@router.post("/logout", response_model=LogoutResponse)
@limiter.limit("10/minute")
def logout(
    request: Request,
    response: Response,
    db: Session = Depends(get_db),
    ctx: dict = Depends(current_user_context),
) -> LogoutResponse:
    """
    Logout the current user by revoking all their tokens.

    This invalidates the current access and refresh tokens and every
    other session of the user. They will need to login again on all devices.
    """
    AuthService(db).logout(int(ctx["sub"]))
    clear_refresh_token_cookie(response)
    return LogoutResponse(
        success=True,
        message="Logged out successfully. All sessions have been invalidated.",
    )


# =============================================================================
# Password reset
# =============================================================================


@router.post("/forgot-password", response_model=MessageResponse)
@limiter.limit("5/minute")
def forgot_password(request: Request, body: ForgotPasswordRequest, db: Session = Depends(get_db)) -> MessageResponse:
    """Always answers with the same message, whether or not the email exists."""
    AuthService(db).forgot_password(body.email)
    return MessageResponse(message=FORGOT_PASSWORD_MESSAGE)


@router.post("/reset-password", response_model=MessageResponse)
@limiter.limit("5/minute")
def reset_password(request: Request, body: ResetPasswordRequest, db: Session = Depends(get_db)) -> MessageResponse:
    """Set a new password with a reset token. Signs the user out everywhere."""
    AuthService(db).reset_password(body.token, body.password)
    return MessageResponse(message="Password has been reset successfully")
