"""Pytest configuration for integration tests.

These tests run against a real PostgreSQL database whose schema was created
with ``db-init``. They are skipped unless DATABASE_URL_APP is set.
"""

import os
from uuid import uuid4

import pytest_asyncio
from sqlalchemy import text

os.environ.setdefault("APP_ENV", "test")

if "DATABASE_URL_APP" not in os.environ:
    collect_ignore_glob = ["test_*.py"]


@pytest_asyncio.fixture
async def engine():
    from balance_api.core.config import DatabaseConfig
    from balance_api.core.database import create_async_engine

    engine = create_async_engine(DatabaseConfig())
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def session_factory(engine):
    from balance_api.core.database import create_session_factory

    return create_session_factory(engine)


@pytest_asyncio.fixture
async def team(engine):
    """A throwaway team with its own key and website; removed afterwards."""
    suffix = uuid4().hex[:12]
    team = {
        "id": f"it-team-{suffix}",
        "name": f"Integration {suffix}",
        "api_key": f"it-key-{suffix}",
        "website_id": f"it-web-{suffix}",
    }
    async with engine.begin() as conn:
        await conn.execute(
            text("INSERT INTO teams (id, name, api_key) VALUES (:id, :name, :api_key)"),
            team,
        )
        await conn.execute(
            text("""
                INSERT INTO websites (id, team_id, name, balance)
                VALUES (:website_id, :id, 'integration-web', 100000)
            """),
            team,
        )
    yield team
    async with engine.begin() as conn:
        await conn.execute(text("DELETE FROM transactions WHERE team_id = :id"), team)
        await conn.execute(text("DELETE FROM websites WHERE team_id = :id"), team)
        await conn.execute(text("DELETE FROM teams WHERE id = :id"), team)
