"""Database session management."""
from typing import Any, Dict, Generator

from sqlalchemy import create_engine
from sqlalchemy.engine import make_url
from sqlalchemy.orm import Session, sessionmaker

from school_fees.config.settings import settings


def _engine_options(database_url: str) -> Dict[str, Any]:
    """Pool options for the configured backend (SQLite has no sized pool)."""
    options: Dict[str, Any] = {
        "pool_pre_ping": True,
        "echo": settings.DB_ECHO or settings.DEBUG,
    }
    if make_url(database_url).get_backend_name() == "sqlite":
        options["connect_args"] = {"check_same_thread": False}
    else:
        options["pool_size"] = settings.DB_POOL_SIZE
        options["max_overflow"] = settings.DB_POOL_OVERFLOW
    return options


DATABASE_URL = settings.get_database_url()

# Create database engine using the get_database_url method
engine = create_engine(DATABASE_URL, **_engine_options(DATABASE_URL))

# Create SessionLocal class
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db() -> Generator[Session, None, None]:
    """
    Dependency function that yields a database session.

    Usage in FastAPI endpoints:
        @router.get("/fees/students/{student_id}")
        def student_fee(student_id: str, db: Session = Depends(get_db)):
            ...
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
