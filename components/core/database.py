"""Core classes and helpers for DB connections"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncEngine
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.ext.asyncio import async_sessionmaker
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import declarative_base

from components.core import config

logger = logging.getLogger(__name__)

Base = declarative_base()


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


class DatabaseManager:
    def __init__(self, engine: Optional[AsyncEngine] = None) -> None:
        """Initialize DatabaseManager with optional engine for testing."""
        self.engine = engine or self._create_engine()
        if self.engine.dialect.name == "sqlite":
            event.listen(self.engine.sync_engine, "connect", _enable_sqlite_foreign_keys)
        self._sessionmaker = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
            autoflush=False,
        )

    def _create_engine(self) -> AsyncEngine:
        """Create async engine for the embedded database file."""
        settings = config.get_settings()
        return create_async_engine(settings.DB_URL, echo=settings.DB_ECHO)

    def get_session(self) -> async_sessionmaker:
        """Returns sessionmaker for database sessions."""
        if not self.engine:
            raise ValueError("Database engine wasn't initialized")
        return self._sessionmaker

    async def create_all(self) -> None:
        """Create every registered table if it does not exist yet."""
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("Database schema ready at %s", self.engine.url)

    async def dispose(self) -> None:
        await self.engine.dispose()

    @asynccontextmanager
    async def get_db(self) -> AsyncIterator[AsyncSession]:
        """Get database session context manager."""
        async with self.get_session()() as session:
            try:
                yield session
            finally:
                await session.close()


@asynccontextmanager
async def unit_of_work(session: AsyncSession) -> AsyncIterator[AsyncSession]:
    """
    Run a group of statements as one atomic unit.

    Commits when the block exits cleanly and rolls back on any exception,
    so a ledger row and its balance adjustment are never split.
    """
    try:
        yield session
        await session.commit()
    except BaseException:
        await session.rollback()
        raise
