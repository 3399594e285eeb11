"""
Security module: Authentication, password hashing, token revocation, rate limiting.
"""

from shared.security.auth import (
    sign_jwt,
    sign_access_token,
    sign_refresh_token,
    verify_jwt,
    verify_refresh_token,
    get_bearer_token,
    current_user_context,
    optional_user_context,
    current_admin_context,
    require_admin,
)
from shared.security.password import hash_password, verify_password, needs_rehash
from shared.security.token_revocation import is_token_revoked, revoke_all_user_tokens
from shared.security.rate_limit import limiter, rate_limit_exceeded_handler

__all__ = [
    # auth
    "sign_jwt",
    "sign_access_token",
    "sign_refresh_token",
    "verify_jwt",
    "verify_refresh_token",
    "get_bearer_token",
    "current_user_context",
    "optional_user_context",
    "current_admin_context",
    "require_admin",
    # password
    "hash_password",
    "verify_password",
    "needs_rehash",
    # token_revocation
    "is_token_revoked",
    "revoke_all_user_tokens",
    # rate_limit
    "limiter",
    "rate_limit_exceeded_handler",
]
