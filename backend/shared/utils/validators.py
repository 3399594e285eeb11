"""
Shared validators for input sanitization and security.
"""

import re
from decimal import Decimal, InvalidOperation
from urllib.parse import urlparse
from typing import Optional

from shared.config.constants import Limits

# Hosts that must never appear in stored image or link URLs (SSRF prevention)
BLOCKED_HOSTS = [
    "localhost",
    "127.0.0.1",
    "0.0.0.0",
    "10.",
    "192.168.",
    "169.254.",  # Link-local, cloud metadata
    "[::1]",
    "metadata.google",
] + [f"172.{n}." for n in range(16, 32)]

BLOCKED_SCHEMES = {"javascript", "data", "file", "ftp", "mailto", "tel"}


def validate_image_url(url: Optional[str]) -> Optional[str]:
    """
    Validate and sanitize an image or link URL.

    Relative paths (e.g. "/uploads/logo.png") are kept as-is.

    Returns:
        The validated URL or None if empty

    Raises:
        ValueError: If the URL is invalid or points at an internal host
    """
    if url is None:
        return None

    url = url.strip()
    if not url:
        return None

    if len(url) > Limits.MAX_URL_LENGTH:
        raise ValueError(f"URL too long (maximum {Limits.MAX_URL_LENGTH} characters)")

    if url.startswith("/") and not url.startswith("//"):
        return url

    parsed = urlparse(url)
    scheme = parsed.scheme.lower()
    if scheme in BLOCKED_SCHEMES:
        raise ValueError(f"URL scheme not allowed: {scheme}")

    if scheme not in ("http", "https"):
        raise ValueError("Only HTTP/HTTPS URLs are allowed")

    host = parsed.netloc.lower()
    if not host:
        raise ValueError("URL has no valid host")

    for blocked in BLOCKED_HOSTS:
        if host.startswith(blocked) or host == blocked.rstrip("."):
            raise ValueError("Internal URLs are not allowed")

    return url


def validate_price(value: Optional[str]) -> Optional[str]:
    """
    Validate a price given as a decimal string ("12.50").

    Prices are stored as text so the currency precision is never lost.

    Raises:
        ValueError: If the value is not a non-negative number
    """
    if value is None:
        return None

    value = str(value).strip()
    try:
        amount = Decimal(value)
    except InvalidOperation:
        raise ValueError("Price must be a decimal number")

    if not amount.is_finite() or amount < 0:
        raise ValueError("Price must be a non-negative number")
    return value


def validate_password(password: str) -> str:
    """Enforce the minimum password length."""
    if len(password) < Limits.MIN_PASSWORD_LENGTH:
        raise ValueError(
            f"Password must be at least {Limits.MIN_PASSWORD_LENGTH} characters"
        )
    return password


def slug_to_name(slug: str) -> str:
    """
    Turn a menu URL slug back into a restaurant name for lookup.

    "joes-pizza" becomes "joes pizza"; matching is case-insensitive.
    """
    return sanitize_search_term(slug.replace("-", " ")).lower()


def escape_like_pattern(value: str) -> str:
    """
    Escape special characters in LIKE patterns.

    SQL LIKE uses % and _ as wildcards; escape them so user input
    only ever matches literally.
    """
    if not value:
        return value

    value = value.replace("\\", "\\\\")
    value = value.replace("%", "\\%")
    value = value.replace("_", "\\_")
    return value


def sanitize_search_term(term: str, max_length: int = Limits.MAX_SEARCH_TERM_LENGTH) -> str:
    """
    Sanitize search term for safe use in queries.

    Trims whitespace, limits length and strips control characters.
    """
    if not term:
        return ""

    term = term.strip()[:max_length]
    return re.sub(r"[\x00-\x1f\x7f-\x9f]", "", term)
