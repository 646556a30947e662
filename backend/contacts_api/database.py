"""
Contacts API — Database Session Management
============================================

What:  Async SQLAlchemy engine construction, session factory, declarative
       base and the per-request session dependency.
How:   `build_engine()` creates an engine from Settings; `create_app()` stores
       the resulting session factory on `app.state`, and `get_db_session()`
       opens one session per request from it. Nothing here is created at
       import time, so tests can hand the app their own engine.
Who:   Used by the app factory, route dependencies, Alembic and tests.

Connection Pooling Strategy (server databases only):
    pool_size:      Persistent connections for normal load
    max_overflow:   Temporary connections for traffic spikes
    pool_pre_ping:  Validates connections before use
    pool_recycle:   Recycles connections every hour

    SQLite URLs get no pool sizing; in-memory SQLite additionally uses a
    StaticPool so every session sees the same database.
"""

from typing import AsyncGenerator

from fastapi import Request
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.pool import StaticPool

from contacts_api.config import Settings


# ── Base Model ────────────────────────────────────────────────────────────
class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy ORM models.

    All models inherit from this class so they share one metadata object,
    which Alembic and the test fixtures use to create the schema.
    """
    pass


# ── Engine / Session Factory ──────────────────────────────────────────────
def build_engine(settings: Settings) -> AsyncEngine:
    """
    Create the async engine for the configured database URL.

    Args:
        settings: Application settings (database_url, pool options, log level)

    Returns:
        An AsyncEngine; the caller owns it and must dispose it on shutdown.
    """
    echo = settings.log_level == "DEBUG"

    if settings.is_sqlite:
        kwargs = {"connect_args": {"check_same_thread": False}}
        if ":memory:" in settings.database_url or settings.database_url.rstrip("/").endswith(":"):
            kwargs["poolclass"] = StaticPool
        return create_async_engine(settings.database_url, echo=echo, **kwargs)

    return create_async_engine(
        settings.database_url,
        pool_size=settings.db_pool_size,
        max_overflow=settings.db_max_overflow,
        pool_pre_ping=settings.db_pool_pre_ping,
        pool_recycle=3600,
        echo=echo,
    )


def build_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """
    Create the session factory bound to `engine`.

    expire_on_commit=False keeps ORM attributes readable after commit, which
    the routes rely on when serializing the object they just wrote.
    """
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )


async def create_schema(engine: AsyncEngine) -> None:
    """
    Create all tables known to `Base.metadata` (idempotent).

    Used for SQLite databases and by the test-suite; PostgreSQL deployments
    run the Alembic migrations instead.
    """
    # Register models with the metadata before create_all
    from contacts_api.models import contact  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


# ── Session Dependency ────────────────────────────────────────────────────
async def get_db_session(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency that provides a database session per request.

    How it works:
        1. Opens a session from the factory stored on `app.state`
        2. Yields it to the route handler
        3. On success: commits the transaction
        4. On error: rolls back and re-raises so the exception handlers
           can build the response
        5. Always: closes the session (returns the connection to the pool)
    """
    session_factory: async_sessionmaker[AsyncSession] = request.app.state.session_factory
    async with session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()
