"""
pytest Fixtures for Books Reviews API Tests

This file contains shared fixtures used across all test files.

WHAT ARE FIXTURES?
==================
Fixtures are reusable test setup/teardown functions.
They provide:
- Test data (sample books, users, reviews)
- Test resources (database sessions, HTTP clients)
- Setup/cleanup logic (create/drop tables)

For database tests, every test function gets its own in-memory database.
Review mutations commit and roll back for real, so tests can't share one
outer transaction that gets rolled back at the end.
"""

# =============================================================================
# TEST ENVIRONMENT SETUP
# =============================================================================
# IMPORTANT: Set environment variables BEFORE importing the app
import os

os.environ["CREATE_TABLES_ON_STARTUP"] = "false"

from collections.abc import Generator
from datetime import date

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from app.database import Base, get_db
from app.main import app
from app.models import Book, Review, User
from app.services.ratings import ReviewAggregationService

# =============================================================================
# DATABASE FIXTURES
# =============================================================================
# We use SQLite in-memory for tests because:
# - Fast: No disk I/O, runs in memory
# - Isolated: Each test starts fresh
# - Simple: No external database needed
#
# SELECT ... FOR UPDATE compiles to a plain SELECT on SQLite; SQLite
# serializes writers with its database lock instead.


@pytest.fixture(scope="function")
def engine():
    """
    Create a SQLite in-memory database engine.

    StaticPool keeps a single connection alive for the whole test.
    Without it, the in-memory database would disappear between connections.
    """
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    Base.metadata.create_all(bind=engine)

    yield engine

    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture(scope="function")
def db_session(engine) -> Generator[Session, None, None]:
    """Create a fresh database session for each test."""
    TestSessionLocal = sessionmaker(
        autocommit=False,
        autoflush=False,
        bind=engine,
    )
    session = TestSessionLocal()

    yield session

    session.close()


@pytest.fixture(scope="function")
def client(db_session: Session) -> Generator[TestClient, None, None]:
    """
    Create a test client with the test database.

    We override the get_db dependency to use our test session.
    """

    def override_get_db():
        """Provide test database session instead of real one."""
        try:
            yield db_session
        finally:
            pass  # Session cleanup handled by db_session fixture

    app.dependency_overrides[get_db] = override_get_db

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


@pytest.fixture
def service(db_session: Session) -> ReviewAggregationService:
    """Review service bound to the test session."""
    return ReviewAggregationService(db_session)


# =============================================================================
# SAMPLE DATA FIXTURES
# =============================================================================
# These fixtures provide test data.
# They depend on db_session, so they're created fresh for each test.


def make_user(db_session: Session, username: str) -> User:
    user = User(
        email=f"{username}@example.com",
        username=username,
        password_hash="not-a-real-hash",
    )
    db_session.add(user)
    db_session.commit()
    db_session.refresh(user)
    return user


def make_book(db_session: Session, title: str, author: str) -> Book:
    book = Book(title=title, author=author)
    db_session.add(book)
    db_session.commit()
    db_session.refresh(book)
    return book


@pytest.fixture
def sample_book(db_session: Session) -> Book:
    """Create a sample book with no reviews."""
    book = Book(
        title="1984",
        author="George Orwell",
        description="A dystopian novel set in a totalitarian society.",
        published_date=date(1949, 6, 8),
        category="Dystopian",
    )
    db_session.add(book)
    db_session.commit()
    db_session.refresh(book)
    return book


@pytest.fixture
def second_book(db_session: Session) -> Book:
    """Create a second book for cross-book isolation tests."""
    return make_book(db_session, "Brave New World", "Aldous Huxley")


@pytest.fixture
def sample_user(db_session: Session) -> User:
    """Create a sample user for testing."""
    return make_user(db_session, "testuser")


@pytest.fixture
def second_user(db_session: Session) -> User:
    """Create a second user for testing ownership scenarios."""
    return make_user(db_session, "seconduser")


@pytest.fixture
def third_user(db_session: Session) -> User:
    """Create a third user for testing ownership scenarios."""
    return make_user(db_session, "thirduser")


@pytest.fixture
def sample_review(
    service: ReviewAggregationService,
    sample_book: Book,
    sample_user: User,
) -> Review:
    """Create a sample review (rating 4) through the service."""
    result = service.create_review(
        sample_book.id,
        sample_user.id,
        rating=4,
        comment="I really enjoyed reading this book.",
    )
    assert result.ok
    return result.value


@pytest.fixture
def reviewed_book(
    service: ReviewAggregationService,
    sample_book: Book,
    sample_user: User,
    second_user: User,
) -> Book:
    """A book with two reviews rated 3 and 5 (average 4.00, count 2)."""
    assert service.create_review(sample_book.id, sample_user.id, rating=3).ok
    assert service.create_review(sample_book.id, second_user.id, rating=5).ok
    return sample_book
