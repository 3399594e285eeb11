"""
Base Repository implementation.
Provides common data access patterns over a SQLAlchemy Session.

The repositories are the storage interface of the application. The same
code runs against PostgreSQL in production and SQLite in tests; only the
engine behind the Session changes.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TypeVar, Generic, Sequence
from sqlalchemy.orm import Session
from sqlalchemy import Select, select, func

from shared.config.constants import Limits


ModelT = TypeVar("ModelT")


@dataclass
class RepositoryFilters:
    """Base filters for repository queries."""

    # Pagination
    limit: int = Limits.DEFAULT_PAGE_SIZE
    offset: int = 0

    # Only rows with is_active = True (for models that have the column)
    active_only: bool = False

    # Search
    search: str | None = None

    def __post_init__(self):
        """Validate and normalize filters."""
        self.limit = min(max(1, self.limit), Limits.MAX_PAGE_SIZE)
        self.offset = max(0, self.offset)
        if self.search:
            self.search = self.search.strip()[:Limits.MAX_SEARCH_TERM_LENGTH]


class BaseRepository(ABC, Generic[ModelT]):
    """
    Abstract base repository with common operations.

    Subclasses must implement:
    - model: the SQLAlchemy model class
    - _base_query(): base select with ordering and eager loading
    """

    def __init__(self, db: Session):
        self._db = db

    @property
    def db(self) -> Session:
        return self._db

    @property
    @abstractmethod
    def model(self) -> type[ModelT]:
        """Return the SQLAlchemy model class."""
        ...

    @abstractmethod
    def _base_query(self) -> Select:
        """Return base query with ordering and eager loading."""
        ...

    def _apply_filters(self, query: Select, filters: RepositoryFilters) -> Select:
        """Apply entity-specific filters to query. No-op by default."""
        return query

    def find_all(self, filters: RepositoryFilters | None = None) -> Sequence[ModelT]:
        """Find all entities matching filters, paginated."""
        filters = filters or RepositoryFilters()
        query = self._base_query()

        if filters.active_only and hasattr(self.model, "is_active"):
            query = query.where(self.model.is_active.is_(True))

        query = self._apply_filters(query, filters)
        query = query.offset(filters.offset).limit(filters.limit)

        return self._db.execute(query).scalars().unique().all()

    def find_by_id(self, entity_id: int) -> ModelT | None:
        """Find entity by primary key."""
        return self._db.get(self.model, entity_id)

    def count(self, *criteria) -> int:
        """Count entities matching optional WHERE criteria."""
        query = select(func.count()).select_from(self.model)
        if criteria:
            query = query.where(*criteria)
        return self._db.scalar(query) or 0

    def exists(self, entity_id: int) -> bool:
        """Check if entity exists."""
        return self.count(self.model.id == entity_id) > 0

    def save(self, entity: ModelT) -> ModelT:
        """
        Save entity (insert or update).
        Flushes so the primary key and server defaults are available.
        """
        self._db.add(entity)
        self._db.flush()
        self._db.refresh(entity)
        return entity

    def delete(self, entity: ModelT) -> None:
        """Hard delete entity."""
        self._db.delete(entity)
        self._db.flush()


class ModelRepository(BaseRepository[ModelT]):
    """
    Generic repository for simple tables without custom queries.

    Usage:
        repo = ModelRepository(db, Testimonial, order_by=Testimonial.display_order)
    """

    def __init__(self, db: Session, model: type[ModelT], order_by=None):
        super().__init__(db)
        self._model = model
        self._order_by = order_by if order_by is not None else model.id

    @property
    def model(self) -> type[ModelT]:
        return self._model

    def _base_query(self) -> Select:
        return select(self._model).order_by(self._order_by)
