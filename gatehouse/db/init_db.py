# gatehouse/db/init_db.py
"""Database initialization utilities."""
from gatehouse.core.logging import get_logger
from gatehouse.db.base import Base, import_models
from gatehouse.db.session import engine

logger = get_logger(__name__)


def init_db() -> None:
    """
    Create any missing tables.

    Suitable for development and tests; production schemas are managed
    by migrations.
    """
    import_models()
    try:
        Base.metadata.create_all(bind=engine)
    except Exception as e:
        logger.error(f"Error initializing database: {e}")
        raise
    logger.info("Database tables ensured", extra={"tables": len(Base.metadata.tables)})


def drop_db() -> None:
    """
    Drop all database tables.

    WARNING: This will delete all data! Only for development/testing purposes.
    """
    import_models()
    Base.metadata.drop_all(bind=engine)
    logger.warning("All database tables dropped")
