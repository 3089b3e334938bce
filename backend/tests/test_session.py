"""
Tests for the shared database connection manager.
"""

import asyncio

import pytest
from sqlalchemy import text

from app.core.exceptions import ConfigurationError, DatabaseConnectionError
from app.db.session import DatabaseConnectionManager, engine_options_for


@pytest.mark.asyncio
async def test_missing_url_raises_configuration_error():
    manager = DatabaseConnectionManager(None)
    with pytest.raises(ConfigurationError):
        await manager.get_engine()
    assert not manager.is_connected


@pytest.mark.asyncio
async def test_unparseable_url_raises_configuration_error():
    manager = DatabaseConnectionManager("not a database url")
    with pytest.raises(ConfigurationError):
        await manager.get_engine()


@pytest.mark.asyncio
async def test_concurrent_callers_share_one_connection(tmp_path):
    """Callers arriving while the first connect is in flight await the same attempt."""
    manager = DatabaseConnectionManager(f"sqlite+aiosqlite:///{tmp_path / 'shared.db'}")
    attempts = 0
    connect = manager._connect

    async def counting_connect():
        nonlocal attempts
        attempts += 1
        await asyncio.sleep(0.01)
        return await connect()

    manager._connect = counting_connect

    engines = await asyncio.gather(*(manager.get_engine() for _ in range(5)))

    assert attempts == 1
    assert all(engine is engines[0] for engine in engines)
    assert manager.is_connected
    # Later calls reuse the cached engine
    assert await manager.get_engine() is engines[0]
    await manager.dispose()
    assert not manager.is_connected


@pytest.mark.asyncio
async def test_failed_attempt_is_discarded_and_retried(tmp_path):
    manager = DatabaseConnectionManager(f"sqlite+aiosqlite:///{tmp_path / 'missing' / 'app.db'}")
    with pytest.raises(DatabaseConnectionError):
        await manager.get_engine()
    assert not manager.is_connected

    manager.database_url = f"sqlite+aiosqlite:///{tmp_path / 'app.db'}"
    engine = await manager.get_engine()
    assert manager.is_connected
    assert engine is await manager.get_engine()
    await manager.dispose()


@pytest.mark.asyncio
async def test_sessionmaker_opens_working_sessions(tmp_path):
    manager = DatabaseConnectionManager(f"sqlite+aiosqlite:///{tmp_path / 'app.db'}")
    session_factory = await manager.get_sessionmaker()
    async with session_factory() as session:
        result = await session.execute(text("SELECT 1"))
        assert result.scalar() == 1
    await manager.dispose()


def test_engine_options_skip_pool_sizing_for_sqlite():
    assert engine_options_for("sqlite+aiosqlite:///./app.db") == {}
    options = engine_options_for("postgresql+asyncpg://user:pw@db/events")
    assert options["pool_pre_ping"] is True
    assert "pool_size" in options
