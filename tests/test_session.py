"""Tests for session helpers."""

from __future__ import annotations

import pytest
from sqlalchemy import text

from flagstore.db import session as session_module
from flagstore.db.session import create_engine, create_session_maker, get_db
from flagstore.services.flag import FlagService
from flagstore.store import FlagStore


@pytest.fixture
def patched_session_maker(db_engine, monkeypatch):
    session_maker = create_session_maker(db_engine)
    monkeypatch.setattr(session_module, "async_session_maker", session_maker)
    return session_maker


@pytest.mark.asyncio
async def test_get_db_commits(patched_session_maker):
    db = get_db()
    session = await db.__anext__()
    await FlagService(session).add_flag_type("star")

    with pytest.raises(StopAsyncIteration):
        await db.__anext__()

    store = FlagStore(patched_session_maker)
    assert await store.get_flag_type("star") is not None


@pytest.mark.asyncio
async def test_get_db_rolls_back_on_error(patched_session_maker):
    db = get_db()
    session = await db.__anext__()
    await FlagService(session).add_flag_type("star")

    with pytest.raises(RuntimeError):
        await db.athrow(RuntimeError("boom"))

    store = FlagStore(patched_session_maker)
    assert await store.get_flag_type("star") is None


@pytest.mark.asyncio
async def test_create_engine_configures_sqlite(tmp_path):
    engine = create_engine(f"sqlite+aiosqlite:///{tmp_path / 'pragma.db'}", echo=False)
    try:
        async with engine.connect() as conn:
            journal_mode = (await conn.execute(text("PRAGMA journal_mode"))).scalar()
            foreign_keys = (await conn.execute(text("PRAGMA foreign_keys"))).scalar()
    finally:
        await engine.dispose()

    assert journal_mode.lower() == "wal"
    assert foreign_keys == 0
