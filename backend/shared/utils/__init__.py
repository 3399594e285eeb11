"""
Utilities module: Exceptions, validators, schemas, dates.
"""

from shared.utils.exceptions import (
    NotFoundError,
    ForbiddenError,
    ValidationError,
    ConflictError,
)
from shared.utils.validators import (
    validate_image_url,
    validate_price,
    escape_like_pattern,
)
from shared.utils.schemas import ErrorResponse
from shared.utils.dates import utcnow, as_utc, days_until

__all__ = [
    # exceptions
    "NotFoundError",
    "ForbiddenError",
    "ValidationError",
    "ConflictError",
    # validators
    "validate_image_url",
    "validate_price",
    "escape_like_pattern",
    # schemas
    "ErrorResponse",
    # dates
    "utcnow",
    "as_utc",
    "days_until",
]
