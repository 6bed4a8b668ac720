"""Integration test fixtures for the registry sync request queue.

These fixtures require a running PostgreSQL instance. The queue table is
created from the ORM metadata when it does not exist yet, so either a
migrated database or an empty one works.
"""

from __future__ import annotations

from collections.abc import AsyncGenerator
import os

import pytest
import pytest_asyncio
from pydantic import SecretStr
from sqlalchemy import text
from sqlalchemy.exc import OperationalError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from infrastructure.database.engines import create_write_engine
from infrastructure.settings import DatabaseSettings
from infrastructure.sync_queue.models import SyncRequestModel


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers",
        "integration: mark test as integration test (requires database)",
    )


@pytest.fixture(scope="session")
def integration_db_settings() -> DatabaseSettings:
    """Database settings for integration tests.

    Override with environment variables:
        REGISTRY_SYNC_DB_HOST, REGISTRY_SYNC_DB_PORT, etc.
    """
    return DatabaseSettings(
        host=os.getenv("REGISTRY_SYNC_DB_HOST", "localhost"),
        port=int(os.getenv("REGISTRY_SYNC_DB_PORT", "5432")),
        database=os.getenv("REGISTRY_SYNC_DB_DATABASE", "registry_sync"),
        username=os.getenv("REGISTRY_SYNC_DB_USERNAME", "registry_sync"),
        password=SecretStr(
            os.getenv("REGISTRY_SYNC_DB_PASSWORD", "registry_sync_dev_password")
        ),
    )


@pytest_asyncio.fixture
async def session_factory(
    integration_db_settings: DatabaseSettings,
) -> AsyncGenerator[async_sessionmaker[AsyncSession], None]:
    """Provide a session factory over a clean queue table.

    The queue opens its own sessions, so tests get the factory rather than
    a session. Rows are deleted before and after each test.
    """
    engine = create_write_engine(integration_db_settings)
    factory = async_sessionmaker(engine, expire_on_commit=False)

    try:
        async with engine.begin() as conn:
            await conn.run_sync(
                SyncRequestModel.__table__.create, checkfirst=True
            )
            await conn.execute(text("DELETE FROM registry_sync_requests"))
    except (OperationalError, OSError) as e:
        await engine.dispose()
        pytest.skip(f"PostgreSQL is not reachable: {e}")

    yield factory

    async with engine.begin() as conn:
        await conn.execute(text("DELETE FROM registry_sync_requests"))
    await engine.dispose()
