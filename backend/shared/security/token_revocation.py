"""
User-level token revocation persisted in the database.

Every JWT carries the user's token_version ("tv" claim). Bumping the
version on the user row invalidates all tokens issued before the bump,
so a logout or password reset survives process restarts.
"""

from sqlalchemy import text
from sqlalchemy.orm import Session

from shared.config.logging import get_logger

logger = get_logger(__name__)


def get_token_state(db: Session, user_id: int) -> tuple[bool, int] | None:
    """
    Return (is_active, token_version) for a user, or None if the user is gone.
    """
    row = db.execute(
        text("SELECT is_active, token_version FROM app_user WHERE id = :user_id"),
        {"user_id": user_id},
    ).first()
    if row is None:
        return None
    return bool(row[0]), int(row[1] or 0)


def is_token_revoked(db: Session, user_id: int, token_version: int | None) -> bool:
    """True if the user is missing, inactive, or the token predates a revocation."""
    state = get_token_state(db, user_id)
    if state is None:
        return True
    is_active, current_version = state
    if not is_active:
        return True
    return (token_version or 0) != current_version


def revoke_all_user_tokens(db: Session, user_id: int) -> int:
    """
    Invalidate every outstanding token for the user.

    The caller owns the transaction and must commit.

    Returns:
        The new token version.
    """
    db.execute(
        text(
            "UPDATE app_user SET token_version = COALESCE(token_version, 0) + 1 "
            "WHERE id = :user_id"
        ),
        {"user_id": user_id},
    )
    state = get_token_state(db, user_id)
    new_version = state[1] if state else 0
    logger.info("User tokens revoked", user_id=user_id, token_version=new_version)
    return new_version
