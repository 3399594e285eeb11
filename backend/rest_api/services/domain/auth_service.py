"""
Authentication Service.

Registration, credential checks, token issuing and password resets.
Cookie handling and rate limiting stay in the router.
"""

from __future__ import annotations

from datetime import timedelta
from typing import Any

from sqlalchemy.orm import Session

from rest_api.models import RegistrationAnalytics, User
from rest_api.repositories import RegistrationAnalyticsRepository, UserRepository
from rest_api.services.audit import log_admin_action
from shared.config.constants import AdminAction, SubscriptionTier
from shared.config.logging import audit_auth_event, auth_logger as logger, mask_email
from shared.config.settings import settings
from shared.infrastructure.db import safe_commit
from shared.security.auth import (
    check_token_not_revoked,
    sign_access_token,
    sign_refresh_token,
    verify_refresh_token,
)
from shared.security.password import (
    generate_reset_token,
    hash_password,
    needs_rehash,
    verify_password,
)
from shared.security.token_revocation import revoke_all_user_tokens
from shared.utils.dates import as_utc, utcnow
from shared.utils.exceptions import (
    AuthenticationError,
    DuplicateEntityError,
    ForbiddenError,
    NotFoundError,
    ValidationError,
)
from shared.utils.schemas import UserInfo
from shared.utils.validators import validate_password

ANALYTICS_FIELDS = (
    "source",
    "utm_source",
    "utm_medium",
    "utm_campaign",
    "referral_code",
    "device_type",
    "browser",
    "country",
)

FORGOT_PASSWORD_MESSAGE = "If an account with that email exists, a password reset link has been sent."


def check_password_strength(password: str) -> None:
    """
    Raises:
        ValidationError: Password shorter than the minimum length.
    """
    try:
        validate_password(password or "")
    except ValueError as e:
        raise ValidationError(str(e))


class AuthService:
    """User authentication flows."""

    def __init__(self, db: Session):
        self._db = db
        self._users = UserRepository(db)
        self._analytics = RegistrationAnalyticsRepository(db)

    # =========================================================================
    # Tokens
    # =========================================================================

    def issue_tokens(self, user: User) -> dict[str, Any]:
        """Login payload: access + refresh tokens and the public user view."""
        return {
            "access_token": sign_access_token(
                user.id, user.username, user.email, user.is_admin, user.token_version or 0
            ),
            "refresh_token": sign_refresh_token(user.id, user.token_version or 0),
            "token_type": "Bearer",
            "expires_in": settings.jwt_access_token_expire_minutes * 60,
            "user": UserInfo.model_validate(user),
        }

    def refresh(self, token: str) -> dict[str, Any]:
        """
        Exchange a refresh token for a new token pair.

        Raises:
            HTTPException 401: Invalid, expired or revoked token.
        """
        payload = verify_refresh_token(token)
        check_token_not_revoked(self._db, payload)

        user = self._users.find_by_id(int(payload["sub"]))
        if user is None or not user.is_active:
            raise AuthenticationError("User not found or inactive")

        logger.info("Token refresh successful", user_id=user.id)
        return self.issue_tokens(user)

    # =========================================================================
    # Commands
    # =========================================================================

    def register(self, data: dict[str, Any]) -> User:
        """
        Create a free-tier user and record where they came from.

        Raises:
            DuplicateEntityError: Username or email already in use.
            ValidationError: Weak password.
        """
        check_password_strength(data["password"])

        taken = self._users.username_or_email_taken(data["username"], data["email"])
        if taken == "username":
            raise DuplicateEntityError("Username", data["username"])
        if taken == "email":
            raise DuplicateEntityError("Email", mask_email(data["email"]))

        user = self._users.save(
            User(
                username=data["username"],
                email=data["email"],
                password=hash_password(data["password"]),
                full_name=data.get("full_name"),
                subscription_tier=SubscriptionTier.FREE,
            )
        )

        analytics = {k: data.get(k) for k in ANALYTICS_FIELDS}
        analytics["source"] = analytics["source"] or "direct"
        self._analytics.save(RegistrationAnalytics(user_id=user.id, **analytics))

        safe_commit(self._db)
        self._db.refresh(user)

        logger.info("User registered", user_id=user.id, email=mask_email(user.email), source=analytics["source"])
        audit_auth_event("REGISTER", user_id=user.id, email=user.email)
        return user

    def authenticate(self, login: str, password: str, *, ip_address: str | None = None) -> User:
        """
        Check credentials. ``login`` is a username or an email.

        Raises:
            AuthenticationError: Unknown user, wrong password or inactive account.
        """
        user = self._users.find_by_login(login)

        if user is None:
            logger.warning("LOGIN_FAILED: User not found", login=mask_email(login) if "@" in login else login)
            audit_auth_event("LOGIN", email=login if "@" in login else None, success=False,
                             reason="user_not_found", ip_address=ip_address)
            raise AuthenticationError()

        if not verify_password(password, user.password):
            logger.warning("LOGIN_FAILED: Invalid password", user_id=user.id)
            audit_auth_event("LOGIN", user_id=user.id, email=user.email, success=False,
                             reason="invalid_password", ip_address=ip_address)
            raise AuthenticationError()

        if not user.is_active:
            logger.warning("LOGIN_FAILED: Account disabled", user_id=user.id)
            audit_auth_event("LOGIN", user_id=user.id, email=user.email, success=False,
                             reason="inactive", ip_address=ip_address)
            raise AuthenticationError("Account is disabled")

        # Rehash password if using outdated bcrypt rounds
        if needs_rehash(user.password):
            user.password = hash_password(password)

        user.last_login = utcnow()
        safe_commit(self._db)
        self._db.refresh(user)

        logger.info("LOGIN_SUCCESS", user_id=user.id, email=mask_email(user.email), is_admin=user.is_admin)
        audit_auth_event("LOGIN", user_id=user.id, email=user.email, ip_address=ip_address)
        return user

    def authenticate_admin(self, login: str, password: str, *, ip_address: str | None = None) -> User:
        """
        Like authenticate(), but only admins get through.

        Raises:
            ForbiddenError: Valid credentials of a non-admin.
        """
        user = self.authenticate(login, password, ip_address=ip_address)
        if not user.is_admin:
            audit_auth_event("ADMIN_LOGIN", user_id=user.id, email=user.email, success=False,
                             reason="not_admin", ip_address=ip_address)
            raise ForbiddenError("access the admin console", user_id=user.id)

        log_admin_action(
            self._db,
            admin_id=user.id,
            action=AdminAction.LOGIN,
            entity_type="user",
            entity_id=user.id,
            details={"ip_address": ip_address} if ip_address else None,
        )
        safe_commit(self._db)
        audit_auth_event("ADMIN_LOGIN", user_id=user.id, email=user.email, ip_address=ip_address)
        return user

    def get_user(self, user_id: int) -> User:
        user = self._users.find_by_id(user_id)
        if user is None:
            raise NotFoundError("User", user_id)
        return user

    def logout(self, user_id: int) -> None:
        """Revoke every token the user holds."""
        revoke_all_user_tokens(self._db, user_id)
        safe_commit(self._db)
        audit_auth_event("LOGOUT", user_id=user_id)

    def forgot_password(self, email: str) -> None:
        """
        Store a reset token valid for reset_token_expire_minutes.
        Unknown emails are ignored so the caller cannot probe accounts.
        """
        user = self._users.find_by_email(email)
        if user is None:
            logger.info("Password reset requested for unknown email", email=mask_email(email))
            return

        user.reset_password_token = generate_reset_token()
        user.reset_password_expires = utcnow() + timedelta(minutes=settings.reset_token_expire_minutes)
        safe_commit(self._db)

        # No mail transport is configured; the reset link is logged for operators.
        logger.info(
            "Password reset token issued",
            user_id=user.id,
            email=mask_email(user.email),
            reset_url=f"{settings.base_url}/reset-password?token={user.reset_password_token}",
        )
        audit_auth_event("PASSWORD_RESET_REQUEST", user_id=user.id, email=user.email)

    def reset_password(self, token: str, password: str) -> None:
        """
        Raises:
            ValidationError: Unknown or expired token, or weak password.
        """
        user = self._users.find_by_reset_token(token)
        if user is None or user.reset_password_expires is None:
            raise ValidationError("Invalid or expired reset token")
        if as_utc(user.reset_password_expires) < utcnow():
            raise ValidationError("Invalid or expired reset token", user_id=user.id)

        check_password_strength(password)

        user.password = hash_password(password)
        user.reset_password_token = None
        user.reset_password_expires = None
        self._db.flush()
        revoke_all_user_tokens(self._db, user.id)
        safe_commit(self._db)

        logger.info("Password reset completed", user_id=user.id)
        audit_auth_event("PASSWORD_RESET", user_id=user.id, email=user.email)
