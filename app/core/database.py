"""
Database configuration and session management
"""

from typing import AsyncGenerator
from sqlalchemy.ext.asyncio import (
    AsyncSession,
    AsyncEngine,
    async_sessionmaker,
    create_async_engine
)
from sqlalchemy.orm import declarative_base
from sqlalchemy.pool import NullPool, AsyncAdaptedQueuePool
from sqlalchemy import event
import logging
from contextlib import asynccontextmanager

from app.config import settings

logger = logging.getLogger(__name__)


def configure_sqlite(engine: AsyncEngine) -> AsyncEngine:
    """
    Make SQLite behave like a store we can trust for seat claims:
    enforce foreign keys and take the write lock at BEGIN so that
    concurrent reservation transactions serialize instead of failing
    on lock upgrade.
    """

    @event.listens_for(engine.sync_engine, "connect")
    def _on_connect(dbapi_connection, connection_record):
        # aiosqlite must not emit its own BEGIN; we do it below
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    @event.listens_for(engine.sync_engine, "begin")
    def _on_begin(conn):
        conn.exec_driver_sql("BEGIN IMMEDIATE")

    return engine


def build_engine(database_url: str) -> AsyncEngine:
    """
    Create the async engine for the given URL
    """
    if database_url.startswith("sqlite"):
        engine = create_async_engine(
            database_url,
            echo=settings.DB_ECHO,
            poolclass=NullPool,
            connect_args={"timeout": settings.SQLITE_BUSY_TIMEOUT},
        )
        return configure_sqlite(engine)

    if settings.is_testing:
        # NullPool doesn't accept pool parameters
        return create_async_engine(
            database_url,
            echo=settings.DB_ECHO,
            poolclass=NullPool,
        )

    return create_async_engine(
        database_url,
        echo=settings.DB_ECHO,
        pool_size=settings.DB_POOL_SIZE,
        max_overflow=settings.DB_MAX_OVERFLOW,
        pool_timeout=settings.DB_POOL_TIMEOUT,
        pool_recycle=settings.DB_POOL_RECYCLE,
        poolclass=AsyncAdaptedQueuePool,
    )


def build_session_factory(bind: AsyncEngine) -> async_sessionmaker:
    return async_sessionmaker(
        bind,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


engine: AsyncEngine = build_engine(settings.DATABASE_URL)

# Create async session factory
async_session = build_session_factory(engine)

# Create declarative base
Base = declarative_base()


async def init_db():
    """
    Initialize database schema
    """
    # Register every mapped class on Base.metadata
    import app.models  # noqa: F401

    try:
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("Database initialized successfully")
    except Exception as e:
        logger.error(f"Failed to initialize database: {e}")
        raise


async def close_db():
    """
    Close database connections
    """
    await engine.dispose()
    logger.info("Database connections closed")


async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """
    Dependency to get database session with explicit transaction management
    Each endpoint must use explicit transaction boundaries
    """
    async with async_session() as session:
        try:
            yield session
            # No auto-commit - endpoints must handle transactions explicitly
        except Exception:
            await session.rollback()
            raise


@asynccontextmanager
async def transaction(session: AsyncSession):
    """
    Run a block inside one transaction on the given session.
    Commits on normal exit, rolls back and re-raises otherwise.
    """
    if session.in_transaction():
        # Close out reads that autobegan on this session
        await session.commit()
    try:
        async with session.begin():
            yield session
    except Exception as e:
        logger.debug(f"Transaction rolled back: {type(e).__name__}: {e}")
        raise
