"""Async SQLAlchemy engine and session factory helpers."""

from __future__ import annotations

from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

DEFAULT_POOL_SIZE = 10
DEFAULT_MAX_OVERFLOW = 0
DEFAULT_POOL_TIMEOUT_SECONDS = 30.0


def create_database_engine(
    database_url: str,
    *,
    pool_size: int = DEFAULT_POOL_SIZE,
    max_overflow: int = DEFAULT_MAX_OVERFLOW,
    pool_timeout_seconds: float = DEFAULT_POOL_TIMEOUT_SECONDS,
) -> AsyncEngine:
    """Create the process-wide async engine with a bounded connection pool.

    Callers beyond ``pool_size + max_overflow`` wait for a free connection up
    to ``pool_timeout_seconds``. SQLite keeps SQLAlchemy's default pool.
    """

    if make_url(database_url).get_backend_name() == "sqlite":
        return create_async_engine(database_url)

    return create_async_engine(
        database_url,
        pool_size=pool_size,
        max_overflow=max_overflow,
        pool_timeout=pool_timeout_seconds,
        pool_pre_ping=True,
    )


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Create a reusable async session factory bound to the provided engine."""

    return async_sessionmaker(engine, expire_on_commit=False)
