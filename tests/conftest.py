"""Pytest configuration and fixtures."""

from __future__ import annotations

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from flagstore.db.base import Base
from flagstore.db.models import Flag, FlagLink, FlagTarget, FlagType  # noqa: F401
from flagstore.db.session import create_session_maker
from flagstore.registry import FlaggerRegistry
from flagstore.services.flag import FlagService
from flagstore.store import FlagStore

from tests.host_models import Admin, HostBase, Member, User


# =============================================================================
# Database fixtures
# =============================================================================


@pytest.fixture
async def db_engine():
    """Create an in-memory test database engine."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:", echo=False, poolclass=StaticPool
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
        await conn.run_sync(HostBase.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
async def db_session(db_engine):
    """Create a test database session."""
    async_session = async_sessionmaker(
        db_engine, class_=AsyncSession, expire_on_commit=False
    )
    async with async_session() as session:
        yield session


@pytest.fixture
def registry() -> FlaggerRegistry:
    """Registry resolving User and Admin flaggers."""
    registry = FlaggerRegistry()
    registry.register_model(User)
    registry.register_model(Admin)
    registry.register_model(Member)
    return registry


@pytest.fixture
def service(db_session, registry) -> FlagService:
    """Flag service bound to the test session."""
    return FlagService(db_session, registry)


@pytest.fixture
def store(db_engine, registry) -> FlagStore:
    """Transactional flag store on the test engine."""
    return FlagStore(create_session_maker(db_engine), registry)


@pytest.fixture
async def users(db_engine):
    """Persist two users and an admin whose id collides with a user's."""
    session_maker = create_session_maker(db_engine)
    async with session_maker() as session, session.begin():
        rows = [
            User(id=1, name="alice"),
            User(id=2, name="bob"),
            Admin(id=1, name="root"),
        ]
        session.add_all(rows)
    return rows
