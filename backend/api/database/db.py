"""PostgreSQL connection management.

The schema is declared with SQLAlchemy models and created at startup; request
handlers and the worker talk to the database through an asyncpg pool.
"""

from typing import Optional

import asyncpg
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine
from sqlalchemy.orm import DeclarativeBase

from ..config import DATABASE_URL


class Base(DeclarativeBase):
    """SQLAlchemy declarative base for all models."""

    pass


# Global asyncpg pool (set during API startup)
_pool: Optional[asyncpg.Pool] = None


def get_database_dsn() -> str:
    """Get the asyncpg DSN for DATABASE_URL."""
    # Convert SQLAlchemy-style URL to asyncpg format
    return DATABASE_URL.replace("+asyncpg", "")


def _check_configured():
    """Raise an error if the database is not configured."""
    if not DATABASE_URL:
        raise RuntimeError(
            "Database not configured. Set DATABASE_URL environment variable "
            "to a PostgreSQL connection string."
        )


def _create_engine() -> AsyncEngine:
    url = DATABASE_URL
    if url.startswith("postgresql://"):
        url = url.replace("postgresql://", "postgresql+asyncpg://", 1)
    return create_async_engine(url, echo=False, pool_pre_ping=True)


async def init_db() -> None:
    """Initialize database - create all tables."""
    _check_configured()
    # Register models on Base.metadata
    from . import models  # noqa: F401

    engine = _create_engine()
    try:
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
    finally:
        await engine.dispose()


async def create_pool() -> asyncpg.Pool:
    """Create the asyncpg pool and make it available to request handlers."""
    global _pool
    _check_configured()
    _pool = await asyncpg.create_pool(get_database_dsn(), min_size=1, max_size=10)
    return _pool


def get_pool() -> asyncpg.Pool:
    """Get the asyncpg pool. Raises if not initialized."""
    if _pool is None:
        raise RuntimeError(
            "Database pool not initialized. Ensure the API server is running."
        )
    return _pool


async def close_pool() -> None:
    """Close the asyncpg pool. Called during API shutdown."""
    global _pool
    if _pool is not None:
        await _pool.close()
        _pool = None
