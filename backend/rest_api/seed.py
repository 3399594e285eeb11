"""
Startup seed data.
Creates the first administrator (when configured) and one ad_settings row
per ad position. Idempotent: safe to run on every start.
"""

from sqlalchemy import or_, select
from sqlalchemy.orm import Session

from rest_api.models import User
from rest_api.services.domain import AdSettingsService
from shared.config.constants import SubscriptionTier
from shared.config.logging import get_logger, mask_email
from shared.config.settings import settings
from shared.infrastructure.db import safe_commit
from shared.security.password import hash_password

logger = get_logger(__name__)


def seed_admin(db: Session) -> User | None:
    """
    Create the configured administrator if no user holds its username or email.

    Skipped when SEED_ADMIN_PASSWORD is empty.
    """
    if not settings.seed_admin_password:
        return None

    existing = db.scalar(
        select(User).where(
            or_(
                User.username == settings.seed_admin_username,
                User.email == settings.seed_admin_email,
            )
        )
    )
    if existing is not None:
        return existing

    admin = User(
        username=settings.seed_admin_username,
        email=settings.seed_admin_email,
        password=hash_password(settings.seed_admin_password),
        full_name="Administrator",
        subscription_tier=SubscriptionTier.FREE,
        is_admin=True,
        is_active=True,
    )
    db.add(admin)
    safe_commit(db)
    db.refresh(admin)
    logger.info("Seeded admin user", user_id=admin.id, email=mask_email(admin.email))
    return admin


def seed(db: Session) -> None:
    seed_admin(db)
    AdSettingsService(db).ensure_defaults()
