"""Database configuration and session management.

Provides async SQLAlchemy engine and session factory.
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import declarative_base

from catalogfeed.infrastructure.config import settings

# Create async engine
engine = create_async_engine(
    settings.database_url,
    echo=settings.debug,
    pool_pre_ping=True,
)

# Session factory
async_session_factory = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)

# Base class for models
Base = declarative_base()


@asynccontextmanager
async def session_scope() -> AsyncIterator[AsyncSession]:
    """Open a session that lives for one whole feed run.

    Yields:
        AsyncSession released when the block exits, whatever the outcome.
    """
    async with async_session_factory() as session:
        try:
            yield session
        finally:
            await session.rollback()


async def ping() -> bool:
    """Check database connectivity.

    Returns:
        True if a trivial query succeeds.
    """
    async with engine.connect() as conn:
        await conn.execute(text("SELECT 1"))
    return True
