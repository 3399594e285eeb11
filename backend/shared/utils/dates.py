"""
Timezone helpers.

All timestamps are handled as timezone-aware UTC. SQLite hands back naive
datetimes even for DateTime(timezone=True) columns, so values read from
the database go through as_utc() before being compared.
"""

import math
from datetime import datetime, timezone


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: datetime | None) -> datetime | None:
    """Attach UTC to naive datetimes, convert aware ones to UTC."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def days_until(value: datetime | None, now: datetime | None = None) -> int:
    """Whole days left until value, rounded up. 0 once it has passed."""
    if value is None:
        return 0
    now = now or utcnow()
    seconds = (as_utc(value) - now).total_seconds()
    if seconds <= 0:
        return 0
    return math.ceil(seconds / 86400)
