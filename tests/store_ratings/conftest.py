"""Pytest fixtures for store ratings tests."""

import os

# Settings are read at import time; give tests a key and a throwaway URL
os.environ.setdefault("SECRET_KEY", "test-secret-key-not-for-production")
os.environ.setdefault("DATABASE_URL", "sqlite:///./store_ratings_app.db")

from datetime import datetime, timezone
from typing import Callable, Generator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from store_ratings.core.security import hash_password
from store_ratings.database import Base, enable_sqlite_foreign_keys, engine_options, get_db
from store_ratings.main import app
from store_ratings.models.store import Store
from store_ratings.models.user import ROLE_NORMAL, User
from store_ratings.services.auth import issue_token

VALID_PASSWORD = "Secret#Pass1"
VALID_NAME = "Alexandra Catherine Smith"
VALID_ADDRESS = "12 Market Street, Springfield"


@pytest.fixture(scope="function")
def test_db_engine():
    """Create a database engine for testing.

    Uses TEST_DATABASE_URL when set (e.g. a PostgreSQL test database),
    otherwise a private in-memory SQLite database.
    """
    test_db_url = os.getenv("TEST_DATABASE_URL")

    if test_db_url:
        engine = create_engine(test_db_url, **engine_options(test_db_url))
    else:
        engine = create_engine(
            "sqlite://",
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
    enable_sqlite_foreign_keys(engine)

    # Create all tables
    Base.metadata.create_all(bind=engine)

    yield engine

    # Cleanup: drop all tables
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture(scope="function")
def test_db_session(test_db_engine) -> Generator[Session, None, None]:
    """Create a database session for testing with automatic rollback."""
    TestingSessionLocal = sessionmaker(
        autocommit=False,
        autoflush=False,
        bind=test_db_engine,
    )

    session = TestingSessionLocal()

    try:
        yield session
    finally:
        # Rollback any uncommitted changes to clean up test data
        session.rollback()
        session.close()


@pytest.fixture(scope="function")
def test_client(test_db_session: Session) -> Generator[TestClient, None, None]:
    """Create a test client with database dependency override."""

    def override_get_db() -> Generator[Session, None, None]:
        """Override get_db dependency to use test database session."""
        try:
            yield test_db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db

    client = TestClient(app)

    try:
        yield client
    finally:
        app.dependency_overrides.clear()


@pytest.fixture(scope="function")
def create_user(test_db_session: Session) -> Callable:
    """Factory function to create users directly in the database.

    Returns:
        Function that creates a user with given parameters and returns (user, token)

    Example:
        ```python
        def test_example(create_user):
            user, token = create_user(email="owner@example.com", role="store_owner")
            assert user.role == "store_owner"
        ```
    """

    def _create_user(
        email: str,
        password: str = VALID_PASSWORD,
        name: str = VALID_NAME,
        role: str = ROLE_NORMAL,
        address: str = VALID_ADDRESS,
    ) -> tuple[User, str]:
        """Create a user in the database and return user with access token."""
        user = User(
            email=email,
            name=name,
            password_hash=hash_password(password),
            role=role,
            address=address,
            created_at=datetime.now(timezone.utc),
        )
        test_db_session.add(user)
        test_db_session.commit()
        test_db_session.refresh(user)

        return user, issue_token(user)

    return _create_user


@pytest.fixture(scope="function")
def create_store(test_db_session: Session) -> Callable:
    """Factory function to create stores directly in the database."""

    def _create_store(
        owner: User,
        name: str = "Corner Grocery",
        address: str = "1 Main Road",
        email: str | None = None,
    ) -> Store:
        store = Store(
            name=name,
            address=address,
            email=email,
            owner_id=owner.id,
            created_at=datetime.now(timezone.utc),
        )
        test_db_session.add(store)
        test_db_session.commit()
        test_db_session.refresh(store)
        return store

    return _create_store
