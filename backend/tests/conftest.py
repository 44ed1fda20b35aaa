"""Root conftest — shared test configuration and the in-memory local store.

Invariants:
    - Every test using db_manager gets a fresh in-memory SQLite database
    - Concurrent-writer tests use file_db_manager: separate connections per session

Design Decisions:
    - StaticPool: one shared connection, so the in-memory schema survives across sessions
"""

import os

# Tests never talk to the real upstream services or PostgreSQL
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("LOG_FORMAT", "text")

import pytest  # noqa: E402
from sqlalchemy.ext.asyncio import create_async_engine  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from shelter.db.base import Base  # noqa: E402
from shelter.infrastructure.database import DatabaseSessionManager  # noqa: E402
import shelter.models  # noqa: E402,F401


@pytest.fixture
async def test_engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:", echo=False, poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
def db_manager(test_engine):
    return DatabaseSessionManager.from_engine(test_engine)


@pytest.fixture
async def file_db_manager(tmp_path):
    """File-backed SQLite with a regular pool: one connection per session, like PostgreSQL."""
    manager = DatabaseSessionManager(f"sqlite+aiosqlite:///{tmp_path / 'shelter.db'}")
    async with manager.engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield manager
    await manager.dispose()
