"""Tests for schema bootstrap and seeding."""

from __future__ import annotations

import pytest
from sqlalchemy import inspect
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.pool import StaticPool

from flagstore.bootstrap import init_db
from flagstore.core.config import DEFAULT_FLAG_TYPES
from flagstore.db.session import create_session_maker
from flagstore.store import FlagStore


@pytest.fixture
async def empty_engine():
    """An in-memory engine with no tables."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:", echo=False, poolclass=StaticPool
    )
    yield engine
    await engine.dispose()


@pytest.mark.asyncio
async def test_init_db_creates_schema(empty_engine):
    await init_db(empty_engine, seed=False)

    async with empty_engine.connect() as conn:
        tables = await conn.run_sync(lambda sync_conn: inspect(sync_conn).get_table_names())
        flag_indexes = await conn.run_sync(
            lambda sync_conn: inspect(sync_conn).get_indexes("flags")
        )
        flag_uniques = await conn.run_sync(
            lambda sync_conn: inspect(sync_conn).get_unique_constraints("flags")
        )

    assert {"flag_types", "flag_targets", "flag_links", "flags"} <= set(tables)
    assert any(
        index["column_names"] == ["flagger_type", "flagger_id"] for index in flag_indexes
    )
    assert any(
        unique["column_names"] == ["flag_link_id", "flagger_type", "flagger_id"]
        for unique in flag_uniques
    )


@pytest.mark.asyncio
async def test_init_db_seeds_once(empty_engine):
    assert await init_db(empty_engine, seed=True) == len(DEFAULT_FLAG_TYPES)
    assert await init_db(empty_engine, seed=True) == 0

    store = FlagStore(create_session_maker(empty_engine))
    names = {flag_type.name for flag_type in await store.list_flag_types()}
    assert names == set(DEFAULT_FLAG_TYPES)


@pytest.mark.asyncio
async def test_init_db_without_seed(empty_engine):
    assert await init_db(empty_engine, seed=False) == 0

    store = FlagStore(create_session_maker(empty_engine))
    assert await store.list_flag_types() == []
