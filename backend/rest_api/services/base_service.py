"""
Base Service Classes.

Provides abstract base classes for application services that:
- Use a Repository for data access (not direct queries)
- Convert entities to Pydantic output DTOs
- Handle business rules and transactions
- Write the admin audit trail when an admin performs the change

Architecture:
    Router (thin) → Service (business logic) → Repository (data access) → Model

Usage:
    from rest_api.services.base_service import BaseCRUDService

    class TestimonialService(BaseCRUDService[Testimonial, TestimonialOutput]):
        def __init__(self, db: Session):
            super().__init__(
                db=db,
                repo=ModelRepository(db, Testimonial, order_by=Testimonial.display_order),
                output_schema=TestimonialOutput,
                entity_name="Testimonial",
                audit_entity_type="testimonial",
            )
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Generic, Type, TypeVar

from pydantic import BaseModel
from sqlalchemy.orm import Session

from rest_api.models import Base
from rest_api.repositories import BaseRepository
from rest_api.services.audit import diff_values, log_admin_action, serialize_model
from shared.config.constants import AdminAction
from shared.config.logging import get_logger
from shared.infrastructure.db import safe_commit
from shared.utils.exceptions import DatabaseError, ForbiddenError, NotFoundError

logger = get_logger(__name__)

ModelT = TypeVar("ModelT", bound=Base)
OutputT = TypeVar("OutputT", bound=BaseModel)


class BaseService(ABC, Generic[ModelT]):
    """
    Abstract base service for domain operations.

    Subclasses implement specific business logic while this class
    provides common infrastructure (repository access, logging).
    """

    def __init__(self, db: Session, repo: BaseRepository[ModelT]):
        self._db = db
        self._repo = repo

    @property
    def db(self) -> Session:
        """Database session."""
        return self._db

    @property
    def repo(self) -> BaseRepository[ModelT]:
        """Repository for data access."""
        return self._repo


class BaseCRUDService(BaseService[ModelT], Generic[ModelT, OutputT]):
    """
    Base service for entities with CRUD operations.

    Provides standard CRUD methods that can be overridden for
    custom business logic. Uses Repository for all data access.

    When ``admin_id`` is passed to a mutation and the service has an
    ``audit_entity_type``, an AdminLog row is written in the same transaction.
    """

    def __init__(
        self,
        db: Session,
        repo: BaseRepository[ModelT],
        output_schema: Type[OutputT],
        entity_name: str,
        *,
        audit_entity_type: str | None = None,
    ):
        super().__init__(db, repo)
        self._model = repo.model
        self._output_schema = output_schema
        self._entity_name = entity_name
        self._audit_entity_type = audit_entity_type

    @property
    def entity_name(self) -> str:
        """Human-readable entity name for messages."""
        return self._entity_name

    # =========================================================================
    # Read Operations
    # =========================================================================

    def get_entity(self, entity_id: int) -> ModelT:
        """
        Get raw entity (for internal use).

        Raises:
            NotFoundError: If entity not found.
        """
        entity = self._repo.find_by_id(entity_id)
        if entity is None:
            raise NotFoundError(self._entity_name, entity_id)
        return entity

    def get_by_id(self, entity_id: int) -> OutputT:
        """Get entity by ID as output DTO."""
        return self.to_output(self.get_entity(entity_id))

    def list_all(self) -> list[OutputT]:
        """List all entities in repository order."""
        return [self.to_output(e) for e in self._repo.find_all()]

    # =========================================================================
    # Write Operations
    # =========================================================================

    def create(self, data: dict[str, Any], *, admin_id: int | None = None) -> OutputT:
        """
        Create new entity.

        Raises:
            ValidationError: If data is invalid.
            DatabaseError: If creation fails.
        """
        self._validate_create(data)

        entity = self._model(**data)
        self._db.add(entity)

        try:
            self._db.flush()
            self._audit(admin_id, AdminAction.CREATE, entity, {"values": serialize_model(entity)})
            safe_commit(self._db)
            self._db.refresh(entity)
        except Exception as e:
            self._db.rollback()
            logger.error(f"Failed to create {self._entity_name}", error=str(e))
            raise DatabaseError(f"create {self._entity_name.lower()}")

        return self.to_output(entity)

    def update(
        self,
        entity_id: int,
        data: dict[str, Any],
        *,
        admin_id: int | None = None,
    ) -> OutputT:
        """
        Update existing entity with the fields present in data.

        Raises:
            NotFoundError: If entity not found.
            ValidationError: If data is invalid.
        """
        entity = self.get_entity(entity_id)
        return self.update_entity(entity, data, admin_id=admin_id)

    def update_entity(
        self,
        entity: ModelT,
        data: dict[str, Any],
        *,
        admin_id: int | None = None,
    ) -> OutputT:
        """Apply data to an already loaded entity."""
        self._validate_update(entity, data)

        entity_id = entity.id
        old_values = serialize_model(entity)
        for field_name, value in data.items():
            if hasattr(entity, field_name):
                setattr(entity, field_name, value)

        try:
            self._db.flush()
            changes = diff_values(old_values, serialize_model(entity))
            self._audit(admin_id, AdminAction.UPDATE, entity, {"changes": changes})
            safe_commit(self._db)
            self._db.refresh(entity)
        except Exception as e:
            self._db.rollback()
            logger.error(
                f"Failed to update {self._entity_name}",
                error=str(e),
                entity_id=entity_id,
            )
            raise DatabaseError(f"update {self._entity_name.lower()}")

        return self.to_output(entity)

    def delete(self, entity_id: int, *, admin_id: int | None = None) -> None:
        """
        Hard delete entity.

        Raises:
            NotFoundError: If entity not found.
        """
        entity = self.get_entity(entity_id)
        self.delete_entity(entity, admin_id=admin_id)

    def delete_entity(self, entity: ModelT, *, admin_id: int | None = None) -> None:
        self._validate_delete(entity)
        self._audit(admin_id, AdminAction.DELETE, entity, {"values": serialize_model(entity)})
        self._delete_dependents(entity)
        self._repo.delete(entity)
        safe_commit(self._db)

    # =========================================================================
    # Transformation
    # =========================================================================

    def to_output(self, entity: ModelT) -> OutputT:
        """
        Convert entity to output DTO.

        Override this method for custom transformation logic.
        """
        return self._output_schema.model_validate(entity)

    # =========================================================================
    # Hooks (override in subclasses)
    # =========================================================================

    def _validate_create(self, data: dict[str, Any]) -> None:
        pass

    def _validate_update(self, entity: ModelT, data: dict[str, Any]) -> None:
        pass

    def _validate_delete(self, entity: ModelT) -> None:
        pass

    def _delete_dependents(self, entity: ModelT) -> None:
        """Remove rows that reference entity. Runs before the entity is deleted."""
        pass

    # =========================================================================
    # Internal Helpers
    # =========================================================================

    def _audit(
        self,
        admin_id: int | None,
        action: str,
        entity: ModelT,
        details: dict[str, Any] | None = None,
    ) -> None:
        if admin_id is None or self._audit_entity_type is None:
            return
        log_admin_action(
            self._db,
            admin_id=admin_id,
            action=action,
            entity_type=self._audit_entity_type,
            entity_id=entity.id,
            details=details,
        )


class OwnedEntityService(BaseCRUDService[ModelT, OutputT], Generic[ModelT, OutputT]):
    """
    Service for entities that belong to a restaurant owner.

    Extends BaseCRUDService with an ownership check used by every mutation.
    """

    @abstractmethod
    def owner_id_of(self, entity: ModelT) -> int:
        """Return the id of the user who owns entity."""
        ...

    def get_owned(self, entity_id: int, user_id: int, *, action: str = "modify this resource") -> ModelT:
        """
        Load an entity and check that user_id owns it.

        Raises:
            NotFoundError: If entity not found.
            ForbiddenError: If it belongs to someone else.
        """
        entity = self.get_entity(entity_id)
        self.ensure_owner(entity, user_id, action=action)
        return entity

    def ensure_owner(self, entity: ModelT, user_id: int, *, action: str = "modify this resource") -> None:
        if self.owner_id_of(entity) != user_id:
            raise ForbiddenError(action, user_id=user_id, entity=self._entity_name, entity_id=entity.id)
