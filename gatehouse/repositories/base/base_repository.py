"""
Base repository with standardized CRUD operations, transaction management
and error handling.

Every lookup of tenant-owned rows goes through ``find_in_tenant`` so a
caller can never reach another community's data by id alone.
"""

from contextlib import contextmanager
from typing import Generic, List, Optional, Type, TypeVar

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from gatehouse.core.exceptions import DatabaseError, ResourceNotFoundError
from gatehouse.core.logging import get_logger
from gatehouse.db.base import Base

logger = get_logger(__name__)

# Type variable for model classes
ModelType = TypeVar("ModelType", bound=Base)


class BaseRepository(Generic[ModelType]):
    """
    Base repository with standardized operations.

    Subclasses add domain queries; persistence failures surface as
    ``DatabaseError`` with a generic message.
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

    # ==================== Transaction Management ====================

    @contextmanager
    def transaction(self):
        """
        Transaction context manager with automatic rollback.

        Usage:
            with repository.transaction():
                entity.check_in_at = now
        """
        try:
            yield self.db
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Transaction rollback: {e}", exc_info=True)
            raise DatabaseError(operation="transaction", table=self.model.__tablename__) from e

    def commit(self) -> None:
        """Commit current transaction."""
        try:
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Commit failed: {e}", exc_info=True)
            raise DatabaseError(operation="commit", table=self.model.__tablename__) from e

    # ==================== Create Operations ====================

    def create(self, entity: ModelType) -> ModelType:
        """
        Persist a new entity and return it refreshed.

        Raises:
            DatabaseError: If the insert fails
        """
        self.db.add(entity)
        self.commit()
        self.db.refresh(entity)
        logger.info(f"Created {self.model.__name__} with id: {entity.id}")
        return entity

    # ==================== Read Operations ====================

    def find_by_id(self, id: str) -> Optional[ModelType]:
        """Find entity by id regardless of tenant."""
        try:
            return self.db.get(self.model, id)
        except SQLAlchemyError as e:
            logger.error(f"Find by ID failed: {e}", exc_info=True)
            raise DatabaseError(operation="read", table=self.model.__tablename__) from e

    def find_in_tenant(self, tenant_id: str, id: str) -> Optional[ModelType]:
        """Find entity by id within one community."""
        stmt = select(self.model).where(
            self.model.id == id,
            self.model.community_id == tenant_id,
        )
        return self._scalar_one_or_none(stmt)

    def get_in_tenant(self, tenant_id: str, id: str) -> ModelType:
        """
        Get entity by id within one community or raise.

        Raises:
            ResourceNotFoundError: If absent or owned by another community
        """
        entity = self.find_in_tenant(tenant_id, id)
        if entity is None:
            raise ResourceNotFoundError(self.model.__name__, id)
        return entity

    # ==================== Helpers ====================

    def _scalars(self, stmt) -> List[ModelType]:
        try:
            return list(self.db.execute(stmt).unique().scalars().all())
        except SQLAlchemyError as e:
            logger.error(f"Query failed: {e}", exc_info=True)
            raise DatabaseError(operation="query", table=self.model.__tablename__) from e

    def _scalar_one_or_none(self, stmt) -> Optional[ModelType]:
        try:
            return self.db.execute(stmt).unique().scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error(f"Query failed: {e}", exc_info=True)
            raise DatabaseError(operation="query", table=self.model.__tablename__) from e
