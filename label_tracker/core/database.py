"""
Database configuration and session management.

Provides async SQLAlchemy setup, connection pooling,
and dependency injection for FastAPI routes.
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

from sqlalchemy import event
from sqlalchemy.engine import Engine
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase

from label_tracker.core.config import get_settings

# Database engine and session factory (initialized during startup)
engine = None
async_session_factory = None

SUPPORTED_URL_PREFIXES = ("postgresql", "sqlite")


class Base(DeclarativeBase):
    """Base class for all database models."""
    pass


@event.listens_for(Engine, "connect")
def _enable_sqlite_foreign_keys(dbapi_connection, connection_record) -> None:
    """SQLite ignores ON DELETE rules unless foreign keys are switched on per connection."""
    module_name = type(dbapi_connection).__module__
    if "sqlite" not in module_name:
        return
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def build_engine(database_url: str, echo: bool = False):
    """Create the async engine for the given URL with pool options that fit the backend."""
    if not database_url.startswith(SUPPORTED_URL_PREFIXES):
        raise ValueError(
            f"Only PostgreSQL or SQLite databases are supported. Current URL: {database_url[:20]}..."
        )

    if database_url.startswith("sqlite"):
        return create_async_engine(database_url, echo=echo)

    settings = get_settings()
    return create_async_engine(
        database_url,
        echo=echo,
        pool_size=settings.database_pool_size,
        pool_recycle=settings.database_pool_recycle,
        pool_pre_ping=True,  # Validate connections before use
    )


async def init_db() -> None:
    """
    Initialize database engine and session factory.

    This should be called during application startup.
    """
    global engine, async_session_factory

    settings = get_settings()
    engine = build_engine(settings.database_url, echo=settings.database_echo)

    async_session_factory = async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
        autocommit=False,
    )


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    Dependency to get database session.

    Provides async database session with automatic cleanup.
    Use this as a FastAPI dependency.

    Yields:
        AsyncSession: Database session
    """
    if async_session_factory is None:
        raise RuntimeError(
            "Database not initialized. Call init_db() during startup."
        )

    async with async_session_factory() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()


@asynccontextmanager
async def get_db_context() -> AsyncGenerator[AsyncSession, None]:
    """
    Context manager for database session.

    Use this for database operations outside of FastAPI routes.

    Example:
        ```python
        async with get_db_context() as db:
            order = await db.get(ProductionOrder, order_id)
        ```
    """
    if async_session_factory is None:
        raise RuntimeError(
            "Database not initialized. Call init_db() during startup."
        )

    async with async_session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()


async def close_db() -> None:
    """
    Close database engine.

    This should be called during application shutdown.
    """
    global engine
    if engine:
        await engine.dispose()
        engine = None
