"""
Base repository with standardized CRUD operations, transaction management, and error handling.

Provides the foundation for all domain repositories. SQLAlchemy errors
never leave a repository: they are translated into application
exceptions (conflict, store unavailable, database error).
"""

from contextlib import contextmanager
from typing import Any, Dict, Generic, Iterator, List, Optional, Type, TypeVar

from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError

from school_fees.models.base import BaseModel
from school_fees.core.logging import get_logger
from school_fees.core.exceptions import (
    ResourceNotFoundError,
    handle_database_exception,
)

logger = get_logger(__name__)

# Type variable for model classes
ModelType = TypeVar("ModelType", bound=BaseModel)


class BaseRepository(Generic[ModelType]):
    """
    Base repository with standardized operations.

    Provides CRUD operations, transaction management, and error handling
    for all domain repositories.
    """

    def __init__(self, model: Type[ModelType], db: Session):
        """
        Initialize repository.

        Args:
            model: SQLAlchemy model class
            db: Database session
        """
        self.model = model
        self.db = db

    @property
    def resource_name(self) -> str:
        return self.model.__name__

    # ==================== Transaction Management ====================

    @contextmanager
    def db_operation(self, operation: str, rollback: bool = True) -> Iterator[Session]:
        """
        Run a block of session work, translating SQLAlchemy failures.

        Usage:
            with repository.db_operation("list_allocations") as db:
                return db.query(...).all()
        """
        try:
            yield self.db
        except SQLAlchemyError as e:
            if rollback:
                self.db.rollback()
            logger.error(
                f"{self.resource_name} {operation} failed: {e}",
                extra={"operation": operation, "table": self.model.__tablename__},
            )
            raise handle_database_exception(
                e, operation=operation, table=self.model.__tablename__
            ) from e

    @contextmanager
    def transaction(self) -> Iterator[Session]:
        """
        Transaction context manager with automatic rollback.

        Usage:
            with repository.transaction():
                repository.create(entity, commit=False)
                repository.update(other, data, commit=False)
        """
        try:
            yield self.db
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Transaction rollback: {e}")
            raise handle_database_exception(e, operation="transaction") from e
        except Exception:
            self.db.rollback()
            raise

    # ==================== Create Operations ====================

    def create(self, entity: ModelType, commit: bool = True) -> ModelType:
        """
        Create new entity.

        Args:
            entity: Entity to create
            commit: Whether to commit immediately

        Returns:
            Created entity

        Raises:
            ConflictRetryableError: If a uniqueness constraint rejects the row
            StoreUnavailableError: If the database cannot be reached
        """
        with self.db_operation("create"):
            self.db.add(entity)
            if commit:
                self.db.commit()
                self.db.refresh(entity)
            else:
                self.db.flush()

        logger.debug(f"Created {self.resource_name} with id: {entity.id}")
        return entity

    # ==================== Read Operations ====================

    def find_by_id(self, id: str) -> Optional[ModelType]:
        """
        Find entity by ID.

        Args:
            id: Entity ID

        Returns:
            Entity or None
        """
        with self.db_operation("find_by_id", rollback=False):
            return self.db.get(self.model, id)

    def get_by_id(self, id: str) -> ModelType:
        """
        Get entity by ID or raise exception.

        Raises:
            ResourceNotFoundError: If entity not found
        """
        entity = self.find_by_id(id)
        if entity is None:
            raise ResourceNotFoundError(self.resource_name, str(id))
        return entity

    def find_by_criteria(
        self,
        criteria: Dict[str, Any],
        skip: int = 0,
        limit: Optional[int] = 100,
        order_by: Optional[List[str]] = None,
    ) -> List[ModelType]:
        """
        Find entities matching criteria.

        Args:
            criteria: Filter criteria as key-value pairs (lists become IN filters)
            skip: Number of records to skip
            limit: Maximum number of records, None for no limit
            order_by: List of fields to order by (prefix with - for desc)

        Returns:
            List of matching entities
        """
        with self.db_operation("find_by_criteria", rollback=False):
            query = self.db.query(self.model)

            for key, value in criteria.items():
                if value is None or not hasattr(self.model, key):
                    continue
                column = getattr(self.model, key)
                if isinstance(value, (list, tuple)):
                    query = query.filter(column.in_(value))
                else:
                    query = query.filter(column == value)

            for field in order_by or []:
                if field.startswith('-'):
                    query = query.order_by(getattr(self.model, field[1:]).desc())
                else:
                    query = query.order_by(getattr(self.model, field))

            query = query.offset(skip)
            if limit is not None:
                query = query.limit(limit)
            return query.all()

    # ==================== Update Operations ====================

    def update(
        self,
        entity: ModelType,
        data: Dict[str, Any],
        commit: bool = True,
    ) -> ModelType:
        """
        Update entity fields.

        Args:
            entity: Entity to update
            data: Field values to apply
            commit: Whether to commit immediately

        Returns:
            Updated entity
        """
        with self.db_operation("update"):
            for key, value in data.items():
                if hasattr(entity, key):
                    setattr(entity, key, value)

            if commit:
                self.db.commit()
                self.db.refresh(entity)
            else:
                self.db.flush()

        logger.debug(f"Updated {self.resource_name} with id: {entity.id}")
        return entity
