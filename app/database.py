"""
Database Configuration Module

This module sets up SQLAlchemy 2.0 with PostgreSQL for the Books Reviews API.

Session Management Pattern
==========================
We use the "session per request" pattern:
1. Request arrives → a session is taken from SessionLocal
2. The session borrows a connection from the engine's pool
3. Review mutations commit on success, roll back on failure
4. The session is closed (connection returned to the pool) when the
   request ends, on every exit path

There is no module-level connection object: the engine only owns the pool,
and every unit of work gets its own session through get_db().
"""

from collections.abc import Generator

from sqlalchemy import create_engine
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker

from app.config import get_settings

settings = get_settings()


# =============================================================================
# Database Engine
# =============================================================================
# Key parameters:
# - pool_size: Number of connections to keep open permanently
# - max_overflow: How many extra connections can be created during high load
# - pool_pre_ping: Test connection health before using (prevents stale connections)
# - echo: Log all SQL statements (debug only)

engine = create_engine(
    settings.database_url,
    pool_size=settings.db_pool_size,
    max_overflow=settings.db_max_overflow,
    pool_pre_ping=True,
    echo=settings.debug,
)


# =============================================================================
# Session Factory
# =============================================================================
# - autocommit=False: We control when to commit
# - autoflush=False: Writes reach the database only on explicit flush/commit

SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine,
)


# =============================================================================
# Base Model Class
# =============================================================================

class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy models.

        class Book(Base):
            __tablename__ = "books"
            ...
    """
    pass


# =============================================================================
# Dependency Injection
# =============================================================================
def get_db() -> Generator[Session, None, None]:
    """
    Database session dependency for FastAPI.

    Code before yield creates the session, the route handler uses it, and the
    finally block closes it even if the handler raised. Closing a session
    rolls back anything left uncommitted and returns its connection to the
    pool.

    Yields:
        SQLAlchemy Session instance
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


# =============================================================================
# Utility Functions
# =============================================================================
def create_tables() -> None:
    """
    Create all database tables.

    Used by the seed script and, when CREATE_TABLES_ON_STARTUP is set, by
    the application lifespan.
    """
    Base.metadata.create_all(bind=engine)
