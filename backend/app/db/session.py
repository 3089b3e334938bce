"""
Database connection manager.

The engine is created lazily on first use and cached for the process
lifetime. Concurrent first callers await the same in-flight connection
attempt instead of opening duplicate pools; a failed attempt is discarded
so the next call can retry.
"""

import asyncio
from functools import lru_cache
from typing import AsyncGenerator, Optional

from sqlalchemy import text
from sqlalchemy.exc import ArgumentError, SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from app.core.config import get_settings
from app.core.exceptions import ConfigurationError, DatabaseConnectionError
from app.core.logging import get_logger
from app.core.metrics import record_db_connection

logger = get_logger(__name__)


class DatabaseConnectionManager:
    def __init__(self, database_url: Optional[str], **engine_options):
        self.database_url = database_url
        self.engine_options = engine_options
        self._engine: Optional[AsyncEngine] = None
        self._sessionmaker: Optional[async_sessionmaker[AsyncSession]] = None
        self._pending: Optional[asyncio.Task] = None

    @property
    def is_connected(self) -> bool:
        return self._engine is not None

    async def _connect(self) -> AsyncEngine:
        try:
            engine = create_async_engine(self.database_url, **self.engine_options)
        except ArgumentError as e:
            raise ConfigurationError("DATABASE_URL is not a valid database URL") from e

        try:
            async with engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
        except (SQLAlchemyError, OSError) as e:
            await engine.dispose()
            record_db_connection(success=False)
            logger.error("database_connection_failed", error=str(e))
            raise DatabaseConnectionError("Database is unavailable") from e

        record_db_connection(success=True)
        logger.info("database_connected", dialect=engine.dialect.name)
        return engine

    async def get_engine(self) -> AsyncEngine:
        if self._engine is not None:
            return self._engine

        if not self.database_url:
            raise ConfigurationError("DATABASE_URL is not configured")

        if self._pending is None:
            self._pending = asyncio.ensure_future(self._connect())
        pending = self._pending

        try:
            # Shielded so one cancelled caller does not abort the shared attempt
            engine = await asyncio.shield(pending)
        except Exception:
            if pending.done() and self._pending is pending:
                self._pending = None
            raise

        if self._engine is None:
            self._engine = engine
            self._sessionmaker = async_sessionmaker(
                engine, class_=AsyncSession, expire_on_commit=False
            )
            self._pending = None
        return self._engine

    async def get_sessionmaker(self) -> async_sessionmaker[AsyncSession]:
        await self.get_engine()
        return self._sessionmaker

    async def dispose(self) -> None:
        pending, self._pending = self._pending, None
        if pending is not None and not pending.done():
            pending.cancel()
        if self._engine is not None:
            await self._engine.dispose()
            logger.info("database_disposed")
        self._engine = None
        self._sessionmaker = None


def engine_options_for(database_url: Optional[str]) -> dict:
    """Pool options from settings; SQLite does not take queue-pool sizing."""
    if not database_url or database_url.startswith("sqlite"):
        return {}
    settings = get_settings()
    return {
        "pool_size": settings.DB_POOL_SIZE,
        "max_overflow": settings.DB_MAX_OVERFLOW,
        "pool_timeout": settings.DB_POOL_TIMEOUT,
        "pool_recycle": settings.DB_POOL_RECYCLE,
        "pool_pre_ping": True,
    }


@lru_cache()
def get_connection_manager() -> DatabaseConnectionManager:
    settings = get_settings()
    return DatabaseConnectionManager(
        settings.DATABASE_URL, **engine_options_for(settings.DATABASE_URL)
    )


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency: one session per request."""
    session_factory = await get_connection_manager().get_sessionmaker()
    async with session_factory() as session:
        yield session
