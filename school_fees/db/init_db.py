"""Database initialization utilities."""
from typing import Optional

from sqlalchemy import inspect
from sqlalchemy.engine import Engine

from school_fees.core.logging import get_logger
from school_fees.db.base import Base, import_models

logger = get_logger(__name__)


def _default_engine() -> Engine:
    from school_fees.db.session import engine

    return engine


def init_db(bind: Optional[Engine] = None) -> None:
    """
    Initialize the database by creating all missing tables.

    Note: This is suitable for development/testing only.
    For production, manage the schema with migrations instead.
    """
    bind = bind or _default_engine()
    try:
        import_models()

        existing_tables = set(inspect(bind).get_table_names())
        missing = [name for name in Base.metadata.tables if name not in existing_tables]

        if missing:
            Base.metadata.create_all(bind=bind)
            logger.info("Database tables created", extra={"tables": sorted(missing)})
        else:
            logger.info(f"Database already initialized with {len(existing_tables)} tables")

    except Exception as e:
        logger.error(f"Error initializing database: {e}")
        raise


def drop_db(bind: Optional[Engine] = None) -> None:
    """
    Drop all database tables.

    WARNING: This will delete all data! Only for development/testing purposes.
    """
    bind = bind or _default_engine()
    try:
        import_models()
        Base.metadata.drop_all(bind=bind)
        logger.warning("All database tables dropped")
    except Exception as e:
        logger.error(f"Error dropping database: {e}")
        raise

