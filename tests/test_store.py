"""Tests for the transactional FlagStore."""

from __future__ import annotations

import asyncio

import pytest
from sqlalchemy.exc import SQLAlchemyError

from flagstore.bootstrap import init_db
from flagstore.db.session import create_engine, create_session_maker
from flagstore.refs import EntityRef
from flagstore.store import FlagStore

ALICE = EntityRef("User", 1)


@pytest.fixture
async def file_store(tmp_path):
    """A store on a file-backed SQLite database shared by many connections."""
    engine = create_engine(f"sqlite+aiosqlite:///{tmp_path / 'flags.db'}", echo=False)
    await init_db(engine, seed=False)
    yield FlagStore(create_session_maker(engine))
    await engine.dispose()


@pytest.mark.asyncio
async def test_operations_commit(store):
    """Each call commits, so the next call in a new session sees it."""
    flag = await store.flag(ALICE, "PostKind", "like")

    assert flag.id is not None
    assert await store.is_flagged_by("PostKind", ALICE, "like") is True
    assert await store.get_flag_count("PostKind") == 1

    assert await store.unflag(ALICE, "PostKind", "like") is True
    assert await store.is_flagged_by("PostKind", ALICE, "like") is False


@pytest.mark.asyncio
async def test_flag_is_idempotent(store):
    first = await store.flag(ALICE, "PostKind", "like")
    second = await store.flag(ALICE, "PostKind", "like")

    assert first.id == second.id
    assert await store.get_flag_count("PostKind", "like") == 1


@pytest.mark.asyncio
async def test_failed_operation_rolls_back(store):
    """Rows written before a failure are not left behind."""

    async def add_then_fail(service):
        await service.add_flag_type("doomed")
        raise SQLAlchemyError("boom")

    with pytest.raises(SQLAlchemyError):
        await store._run("add_then_fail", add_then_fail)

    assert await store.get_flag_type("doomed") is None


@pytest.mark.asyncio
async def test_returned_rows_are_usable_after_commit(store):
    await store.flag(ALICE, "PostKind", "like")

    flags = await store.get_flags_by(ALICE)

    assert flags[0].link.type.name == "like"
    assert flags[0].link.target.name == "PostKind"


@pytest.mark.asyncio
async def test_get_flaggers(store, users):
    await store.flag(users[1], "PostKind", "follow")
    await store.flag(users[2], "PostKind", "follow")

    flaggers = await store.get_flaggers("PostKind", "follow", "User")

    assert [user.name for user in flaggers] == ["bob"]


@pytest.mark.asyncio
async def test_remove_flag_type(store):
    await store.flag(ALICE, "PostKind", "like")

    assert await store.remove_flag_type("like") is True
    assert await store.get_flag_count("PostKind", "like") == 0
    assert await store.remove_flag_type("like") is False


@pytest.mark.asyncio
async def test_seed_and_list(store):
    assert await store.seed_default_flag_types(["like", "follow"]) == 2

    names = [flag_type.name for flag_type in await store.list_flag_types()]
    assert names == ["follow", "like"]


@pytest.mark.asyncio
async def test_concurrent_flagging_creates_one_row(file_store):
    """Racing get-or-create calls converge on a single row per table."""
    flags = await asyncio.gather(
        *(file_store.flag(ALICE, "PostKind", "like") for _ in range(10))
    )

    assert len({flag.id for flag in flags}) == 1
    assert await file_store.get_flag_count("PostKind", "like") == 1
    assert [t.name for t in await file_store.list_flag_types()] == ["like"]


@pytest.mark.asyncio
async def test_concurrent_flaggers(file_store):
    """Different flaggers racing on the same new type and target."""
    await asyncio.gather(
        *(file_store.flag(EntityRef("User", n), "PostKind", "like") for n in range(1, 9))
    )

    assert await file_store.get_flag_count("PostKind", "like") == 8
    refs = await file_store.get_flagger_refs("PostKind", "like", "User")
    assert sorted(ref.id for ref in refs) == list(range(1, 9))
