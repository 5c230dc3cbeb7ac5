"""Transactional flag store.

``FlagStore`` is the entry point host applications hold on to: build one per
process and pass it to whatever needs to flag. Each call opens its own
session and runs in one transaction, so a failure never leaves half the
normalization rows behind.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Iterable
from typing import Any, TypeVar

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from flagstore.core.logging import get_logger
from flagstore.db.models import Flag, FlagType
from flagstore.refs import EntityRef
from flagstore.registry import FlaggerRegistry
from flagstore.services.flag import FlagService

logger = get_logger(__name__)

T = TypeVar("T")


class FlagStore:
    """Flag operations, each in its own transaction."""

    def __init__(
        self,
        session_maker: async_sessionmaker[AsyncSession] | None = None,
        registry: FlaggerRegistry | None = None,
    ):
        """Initialize the store.

        Args:
            session_maker: Session factory. Defaults to the configured database.
            registry: Flagger entity stores, needed by ``get_flaggers``.
        """
        if session_maker is None:
            from flagstore.db.session import async_session_maker

            session_maker = async_session_maker

        self.session_maker = session_maker
        self.registry = registry or FlaggerRegistry()

    async def _run(self, operation: str, call: Callable[[FlagService], Awaitable[T]]) -> T:
        """Run one service call in a fresh session and transaction."""
        async with self.session_maker() as session:
            try:
                async with session.begin():
                    return await call(FlagService(session, self.registry))
            except SQLAlchemyError as exc:
                logger.warning(
                    "flag_store_operation_failed",
                    operation=operation,
                    error=str(exc),
                )
                raise

    async def add_flag_type(self, name: str) -> FlagType:
        return await self._run("add_flag_type", lambda s: s.add_flag_type(name))

    async def remove_flag_type(self, name: str) -> bool:
        return await self._run("remove_flag_type", lambda s: s.remove_flag_type(name))

    async def get_flag_type(self, name: str) -> FlagType | None:
        return await self._run("get_flag_type", lambda s: s.get_flag_type(name))

    async def list_flag_types(self) -> list[FlagType]:
        return await self._run("list_flag_types", lambda s: s.list_flag_types())

    async def seed_default_flag_types(self, names: Iterable[str] | None = None) -> int:
        return await self._run(
            "seed_default_flag_types", lambda s: s.seed_default_flag_types(names)
        )

    async def flag(self, flagger: Any, flagable: Any, flag_type_name: str) -> Flag:
        return await self._run("flag", lambda s: s.flag(flagger, flagable, flag_type_name))

    async def unflag(self, flagger: Any, flagable: Any, flag_type_name: str) -> bool:
        return await self._run(
            "unflag", lambda s: s.unflag(flagger, flagable, flag_type_name)
        )

    async def is_flagged_by(
        self, flagable: Any, flagger: Any, flag_type_name: str | None = None
    ) -> bool:
        return await self._run(
            "is_flagged_by", lambda s: s.is_flagged_by(flagable, flagger, flag_type_name)
        )

    async def get_flag_count(self, flagable: Any, flag_type_name: str | None = None) -> int:
        return await self._run(
            "get_flag_count", lambda s: s.get_flag_count(flagable, flag_type_name)
        )

    async def get_flagger_refs(
        self, flagable: Any, flag_type_name: str, flagger_kind: str
    ) -> list[EntityRef]:
        return await self._run(
            "get_flagger_refs",
            lambda s: s.get_flagger_refs(flagable, flag_type_name, flagger_kind),
        )

    async def get_flaggers(
        self, flagable: Any, flag_type_name: str, flagger_kind: str
    ) -> list[Any]:
        return await self._run(
            "get_flaggers",
            lambda s: s.get_flaggers(flagable, flag_type_name, flagger_kind),
        )

    async def get_flags_by(self, flagger: Any, flag_type_name: str | None = None) -> list[Flag]:
        return await self._run(
            "get_flags_by", lambda s: s.get_flags_by(flagger, flag_type_name)
        )

    async def get_flags_on(self, flagable: Any, flag_type_name: str | None = None) -> list[Flag]:
        return await self._run(
            "get_flags_on", lambda s: s.get_flags_on(flagable, flag_type_name)
        )
