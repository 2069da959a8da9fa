"""
Store engine and session management with SQLAlchemy async.

The store is opened per logical operation and released on completion, so the
write path and the read path never share a long-lived handle.
"""

from contextlib import asynccontextmanager
from typing import AsyncIterator

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool
from core.config import settings
import logging

logger = logging.getLogger(__name__)


def create_store_engine(
    database_url: str = settings.DATABASE_URL,
    lock_timeout: float = settings.STORE_LOCK_TIMEOUT,
) -> AsyncEngine:
    """Create an engine whose connections give up after ``lock_timeout`` seconds"""
    return create_async_engine(
        database_url,
        echo=False,
        poolclass=NullPool,  # every open is a fresh handle
        connect_args={"timeout": lock_timeout},
        future=True
    )


@asynccontextmanager
async def open_session(
    database_url: str = settings.DATABASE_URL,
    lock_timeout: float = settings.STORE_LOCK_TIMEOUT,
) -> AsyncIterator[AsyncSession]:
    """Open the store, yield a session, and release the store afterwards"""
    engine = create_store_engine(database_url, lock_timeout)
    session_maker = async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False
    )
    try:
        async with session_maker() as session:
            yield session
    finally:
        await engine.dispose()


async def create_schema(
    database_url: str = settings.DATABASE_URL,
    lock_timeout: float = settings.STORE_LOCK_TIMEOUT,
) -> None:
    """Create every table registered on the declarative base"""
    from models import Base

    engine = create_store_engine(database_url, lock_timeout)
    try:
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
    finally:
        await engine.dispose()
