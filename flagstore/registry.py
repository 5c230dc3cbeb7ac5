"""Registry of flagger entity stores, keyed by kind name."""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Sequence
from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from flagstore.core.exceptions import UnknownFlaggerKindError
from flagstore.core.logging import get_logger
from flagstore.refs import require_name

logger = get_logger(__name__)

FlaggerLoader = Callable[[AsyncSession, Sequence[int]], Awaitable[Sequence[Any]]]


class FlaggerRegistry:
    """Maps flagger kind names to loaders for their full records.

    Flags only store a flagger's kind and id. Resolving those back to
    entities needs the host application to say where each kind lives.
    """

    def __init__(self) -> None:
        self._loaders: dict[str, FlaggerLoader] = {}

    def register(self, kind: str, loader: FlaggerLoader) -> None:
        """Register a loader for a flagger kind.

        Args:
            kind: The flagger kind name, as stored in ``flags.flagger_type``.
            loader: Async callable taking a session and ids, returning entities.
        """
        require_name(kind, "flagger kind")
        self._loaders[kind] = loader
        logger.debug("flagger_loader_registered", kind=kind)

    def register_model(self, model: type, kind: str | None = None) -> str:
        """Register an ORM model whose ``id`` column keys its flaggers.

        Args:
            model: A mapped class with an ``id`` attribute.
            kind: Kind name. Defaults to ``__flag_kind__`` or the class name.

        Returns:
            The kind name the model was registered under.
        """
        kind = kind or getattr(model, "__flag_kind__", None) or model.__name__

        async def load(session: AsyncSession, ids: Sequence[int]) -> Sequence[Any]:
            result = await session.execute(select(model).where(model.id.in_(ids)))
            return result.scalars().all()

        self.register(kind, load)
        return kind

    def loader_for(self, kind: str) -> FlaggerLoader:
        """Get the loader for a kind.

        Raises:
            UnknownFlaggerKindError: If nothing is registered for the kind.
        """
        try:
            return self._loaders[kind]
        except KeyError:
            raise UnknownFlaggerKindError(kind) from None

    def __contains__(self, kind: object) -> bool:
        return kind in self._loaders

    @property
    def kinds(self) -> list[str]:
        """Registered kind names, sorted."""
        return sorted(self._loaders)

    async def resolve(
        self, session: AsyncSession, kind: str, ids: Sequence[int]
    ) -> list[Any]:
        """Load the entities for ids, in the order of ids.

        Ids the entity store no longer has are skipped.
        """
        loader = self.loader_for(kind)
        if not ids:
            return []

        entities = await loader(session, list(ids))
        by_id = {entity.id: entity for entity in entities}

        missing = [entity_id for entity_id in ids if entity_id not in by_id]
        if missing:
            logger.debug("flaggers_missing", kind=kind, ids=missing)

        return [by_id[entity_id] for entity_id in ids if entity_id in by_id]
