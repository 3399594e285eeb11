"""
Admin audit logging service.
Records every admin mutation in the admin_log table.
"""

from datetime import datetime
from typing import Any, Optional

from sqlalchemy.orm import Session

from rest_api.models import AdminLog
from rest_api.repositories import AdminLogRepository
from shared.config.logging import admin_logger


def log_admin_action(
    db: Session,
    *,
    admin_id: int,
    action: str,
    entity_type: Optional[str] = None,
    entity_id: Optional[int] = None,
    details: Optional[dict] = None,
) -> AdminLog:
    """
    Log an action performed by an admin.

    Args:
        db: Database session
        admin_id: Admin who performed the action
        action: One of AdminAction (LOGIN, CREATE, UPGRADE_SUBSCRIPTION, ...)
        entity_type: Type of entity (e.g., "user", "pricing_plan")
        entity_id: ID of the entity
        details: Free-form JSON context

    Returns:
        Created AdminLog entry
    """
    entry = AdminLogRepository(db).record(
        admin_id=admin_id,
        action=action,
        entity_type=entity_type,
        entity_id=entity_id,
        details=details,
    )
    admin_logger.info(
        "Admin action",
        admin_id=admin_id,
        action=action,
        entity_type=entity_type,
        entity_id=entity_id,
    )
    # Don't commit here - let the caller handle the transaction
    return entry


def serialize_model(obj: Any, exclude: list[str] = None) -> dict:
    """
    Serialize a SQLAlchemy model to a dictionary for audit details.

    Args:
        obj: SQLAlchemy model instance
        exclude: Fields to exclude from serialization

    Returns:
        Dictionary representation of the model
    """
    if exclude is None:
        exclude = []

    result = {}
    for column in obj.__table__.columns:
        if column.name in exclude:
            continue
        value = getattr(obj, column.name)
        # Convert datetime to ISO string
        if isinstance(value, datetime):
            value = value.isoformat()
        result[column.name] = value

    return result


def diff_values(old_values: dict, new_values: dict) -> dict:
    """Return {field: {"old": ..., "new": ...}} for fields that changed."""
    changes = {}
    for key in set(old_values.keys()) | set(new_values.keys()):
        old_val = old_values.get(key)
        new_val = new_values.get(key)
        if old_val != new_val:
            changes[key] = {"old": old_val, "new": new_val}
    return changes
