"""Schema creation and seed data."""

from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncEngine

from flagstore.core.config import settings
from flagstore.core.logging import get_logger
from flagstore.db.base import Base
from flagstore.db.session import create_session_maker
from flagstore.services.flag import FlagService

# Register models with Base.metadata
from flagstore.db import models  # noqa: F401

logger = get_logger(__name__)


async def init_db(engine: AsyncEngine | None = None, seed: bool | None = None) -> int:
    """Create all tables and seed the default flag types.

    Safe to run repeatedly: existing tables and flag types are kept.
    Deployments that manage the schema with alembic only need the seed.

    Args:
        engine: Engine to bootstrap. Defaults to the configured engine.
        seed: Seed the default vocabulary. Defaults to the setting.

    Returns:
        Number of flag types created by seeding.
    """
    if engine is None:
        from flagstore.db.session import engine

    if seed is None:
        seed = settings.seed_default_flag_types

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    logger.info("schema_ready", url=engine.url.render_as_string(hide_password=True))

    if not seed:
        return 0

    session_maker = create_session_maker(engine)
    async with session_maker() as session, session.begin():
        return await FlagService(session).seed_default_flag_types()
