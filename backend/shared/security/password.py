"""
Password hashing utilities using bcrypt.
"""

import secrets

import bcrypt

from shared.config.logging import get_logger

logger = get_logger(__name__)

BCRYPT_ROUNDS = 12
BCRYPT_PREFIXES = ("$2a$", "$2b$", "$2y$")


def hash_password(password: str) -> str:
    """
    Hash a password using bcrypt.

    Returns:
        Hashed password string, e.g. "$2b$12$...".
    """
    salt = bcrypt.gensalt(rounds=BCRYPT_ROUNDS)
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """
    Verify a password against its bcrypt hash.

    Hashes that are not bcrypt are always rejected, plain-text
    passwords are never compared.
    """
    if not hashed_password or not hashed_password.startswith(BCRYPT_PREFIXES):
        logger.warning("SECURITY: Non-bcrypt password hash rejected")
        return False

    return bcrypt.checkpw(plain_password.encode("utf-8"), hashed_password.encode("utf-8"))


def needs_rehash(hashed_password: str) -> bool:
    """
    Check if a stored hash should be replaced after a successful login.

    True for non-bcrypt values and for bcrypt hashes made with fewer rounds
    than BCRYPT_ROUNDS.
    """
    if not hashed_password.startswith(BCRYPT_PREFIXES):
        return True

    try:
        rounds = int(hashed_password.split("$")[2])
    except (IndexError, ValueError):
        return True
    return rounds < BCRYPT_ROUNDS


def generate_reset_token() -> str:
    """Random URL-safe token for password reset links."""
    return secrets.token_urlsafe(32)
