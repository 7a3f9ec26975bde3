"""Database connection and session management."""

import logging
from contextlib import contextmanager
from typing import Any, Generator

from sqlalchemy import Engine, create_engine, event
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from store_ratings.config import settings
from store_ratings.core.exceptions import AppError, StorageError

logger = logging.getLogger(__name__)


def engine_options(database_url: str) -> dict[str, Any]:
    """Build ``create_engine`` keyword arguments for a database URL.

    SQLite (used for local runs and tests) has no server-side pool and needs
    cross-thread access for the FastAPI threadpool; server databases get a
    sized connection pool.
    """
    if database_url.startswith("sqlite"):
        return {"connect_args": {"check_same_thread": False}}
    return {
        "pool_pre_ping": True,  # Verify connections before using
        "pool_size": 10,  # Number of connections to maintain
        "max_overflow": 20,  # Maximum number of connections beyond pool_size
    }


def enable_sqlite_foreign_keys(engine: Engine) -> None:
    """Turn on foreign key enforcement for every SQLite connection of ``engine``."""
    if engine.dialect.name != "sqlite":
        return

    @event.listens_for(engine, "connect")
    def _set_sqlite_pragma(dbapi_connection, connection_record) -> None:
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


# Create database engine with connection pooling
engine = create_engine(
    settings.database_url,
    echo=False,  # Set to True for SQL query logging in development
    **engine_options(settings.database_url),
)
enable_sqlite_foreign_keys(engine)

# Create session factory
SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine,
)

# Base class for declarative models
Base = declarative_base()


def get_db() -> Generator[Session, None, None]:
    """Dependency for getting database session.

    Yields:
        Session: SQLAlchemy database session

    Example:
        ```python
        from store_ratings.database import get_db

        @app.get("/stores")
        def get_stores(db: Session = Depends(get_db)):
            return db.query(Store).all()
        ```
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@contextmanager
def storage_errors(db: Session, action: str) -> Generator[None, None, None]:
    """Roll back and translate database failures raised inside the block.

    Application errors pass through after a rollback. Any other
    ``SQLAlchemyError`` is logged and re-raised as ``StorageError`` so callers
    only ever see a generic message.

    Example:
        ```python
        with storage_errors(db, "creating store"):
            db.add(store)
            db.commit()
        ```
    """
    try:
        yield
    except AppError:
        db.rollback()
        raise
    except SQLAlchemyError as e:
        db.rollback()
        logger.exception(f"Database error while {action}: {e}")
        raise StorageError() from e
