"""Flag service: flag, unflag, query and count flags on target kinds."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any, TypeVar

from sqlalchemy import Select, delete, func, insert, select
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from flagstore.core.config import settings
from flagstore.core.exceptions import FlagStoreError, UnknownFlaggerKindError
from flagstore.core.logging import get_logger
from flagstore.db.models import Flag, FlagLink, FlagTarget, FlagType
from flagstore.refs import EntityRef, kind_of, require_name, to_ref
from flagstore.registry import FlaggerRegistry

logger = get_logger(__name__)

ModelT = TypeVar("ModelT", FlagType, FlagTarget, FlagLink, Flag)

# Dialects with an INSERT ... ON CONFLICT DO NOTHING construct
ON_CONFLICT_INSERTS = {
    "sqlite": sqlite.insert,
    "postgresql": postgresql.insert,
}


class FlagService:
    """Service for flags and their normalization rows.

    Works inside the caller's session and only flushes, so the caller owns
    the transaction. Only ``flag`` and ``add_flag_type`` create rows; every
    other lookup returns a "not found" result on the first missing link.
    """

    def __init__(self, db: AsyncSession, registry: FlaggerRegistry | None = None):
        """Initialize the flag service.

        Args:
            db: The database session.
            registry: Flagger entity stores, needed by ``get_flaggers``.
        """
        self.db = db
        self.registry = registry

    # ------------------------------------------------------------------
    # Flag types
    # ------------------------------------------------------------------

    async def add_flag_type(self, name: str) -> FlagType:
        """Get an existing flag type or create a new one.

        Args:
            name: The flag type name, stored as given.

        Returns:
            The existing or newly created FlagType.
        """
        require_name(name, "flag type name")
        return await self._get_or_create(FlagType, name=name)

    async def remove_flag_type(self, name: str) -> bool:
        """Delete a flag type by name.

        Links and flags that reference it are left in place. Queries filtered
        by flag type stop finding them.

        Returns:
            True if a row was deleted.
        """
        result = await self.db.execute(
            delete(FlagType)
            .where(FlagType.name == name)
            .execution_options(synchronize_session="fetch")
        )
        removed = result.rowcount > 0

        if removed:
            logger.info("flag_type_removed", name=name)

        return removed

    async def get_flag_type(self, name: str) -> FlagType | None:
        """Get a flag type by name without creating it."""
        return await self._find(FlagType, name=name)

    async def list_flag_types(self) -> list[FlagType]:
        """Get all flag types ordered by name."""
        result = await self.db.execute(select(FlagType).order_by(FlagType.name))
        return list(result.scalars().all())

    async def seed_default_flag_types(self, names: Iterable[str] | None = None) -> int:
        """Insert the default flag type vocabulary where absent.

        Args:
            names: Names to seed. Defaults to the configured vocabulary.

        Returns:
            Number of flag types created.
        """
        if names is None:
            names = settings.default_flag_types

        created_count = 0
        for name in names:
            require_name(name, "flag type name")
            if await self._insert_ignore(FlagType, name=name):
                created_count += 1

        await self.db.flush()

        if created_count > 0:
            logger.info("flag_types_seeded", count=created_count)

        return created_count

    # ------------------------------------------------------------------
    # Flagging
    # ------------------------------------------------------------------

    async def flag(self, flagger: Any, flagable: Any, flag_type_name: str) -> Flag:
        """Flag a target kind on behalf of a flagger.

        Creates the flag type, target, link and flag rows as needed.
        Flagging twice returns the same row.

        Args:
            flagger: EntityRef or entity with an id.
            flagable: Target kind name, or an entity whose kind is used.
            flag_type_name: Name of the flag type.

        Returns:
            The Flag row.
        """
        ref = to_ref(flagger)
        target_name = kind_of(flagable)

        flag_type = await self.add_flag_type(flag_type_name)
        flag_target = await self._get_or_create(FlagTarget, name=target_name)
        flag_link = await self._get_or_create(
            FlagLink,
            flag_type_id=flag_type.id,
            flag_target_id=flag_target.id,
        )

        return await self._get_or_create(
            Flag,
            flag_link_id=flag_link.id,
            flagger_type=ref.kind,
            flagger_id=ref.id,
        )

    async def unflag(self, flagger: Any, flagable: Any, flag_type_name: str) -> bool:
        """Remove a flagger's flag from a target kind.

        Returns:
            True if a flag was deleted, False if there was nothing to remove.
        """
        ref = to_ref(flagger)
        target_name = kind_of(flagable)
        require_name(flag_type_name, "flag type name")

        flag_type = await self._find(FlagType, name=flag_type_name)
        if not flag_type:
            return False

        flag_target = await self._find(FlagTarget, name=target_name)
        if not flag_target:
            return False

        flag_link = await self._find(
            FlagLink,
            flag_type_id=flag_type.id,
            flag_target_id=flag_target.id,
        )
        if not flag_link:
            return False

        result = await self.db.execute(
            delete(Flag)
            .where(
                Flag.flag_link_id == flag_link.id,
                Flag.flagger_type == ref.kind,
                Flag.flagger_id == ref.id,
            )
            .execution_options(synchronize_session="fetch")
        )
        removed = result.rowcount > 0

        if removed:
            logger.debug(
                "flag_removed",
                flagger=str(ref),
                target=target_name,
                flag_type=flag_type_name,
            )

        return removed

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    async def is_flagged_by(
        self,
        flagable: Any,
        flagger: Any,
        flag_type_name: str | None = None,
    ) -> bool:
        """Check whether a flagger has flagged a target kind.

        Args:
            flagable: Target kind name or entity.
            flagger: EntityRef or entity with an id.
            flag_type_name: Only match this flag type. Any type if omitted.
        """
        ref = to_ref(flagger)
        query = self._flags_on(kind_of(flagable), flag_type_name, Flag.id).where(
            Flag.flagger_type == ref.kind,
            Flag.flagger_id == ref.id,
        )

        result = await self.db.execute(select(query.exists()))
        return bool(result.scalar())

    async def get_flag_count(self, flagable: Any, flag_type_name: str | None = None) -> int:
        """Count flags on a target kind, optionally of one flag type."""
        query = self._flags_on(kind_of(flagable), flag_type_name, func.count(Flag.id))

        result = await self.db.execute(query)
        return result.scalar() or 0

    async def get_flagger_refs(
        self,
        flagable: Any,
        flag_type_name: str,
        flagger_kind: str,
    ) -> list[EntityRef]:
        """Get distinct flaggers of one kind, ordered by their first flag."""
        first_flag = func.min(Flag.id)
        query = (
            self._flags_on(kind_of(flagable), flag_type_name, Flag.flagger_id)
            .where(Flag.flagger_type == flagger_kind)
            .group_by(Flag.flagger_id)
            .order_by(first_flag)
        )

        result = await self.db.execute(query)
        return [EntityRef(flagger_kind, flagger_id) for flagger_id in result.scalars()]

    async def get_flaggers(
        self,
        flagable: Any,
        flag_type_name: str,
        flagger_kind: str,
    ) -> list[Any]:
        """Get the flagger entities of one kind that flagged a target kind.

        Args:
            flagable: Target kind name or entity.
            flag_type_name: Name of the flag type (required).
            flagger_kind: Which flagger entity store to resolve against.

        Returns:
            Distinct entities ordered by their first flag.

        Raises:
            UnknownFlaggerKindError: If no loader is registered for the kind.
        """
        if self.registry is None:
            raise UnknownFlaggerKindError(flagger_kind)
        # Fail before querying when the kind is unknown
        self.registry.loader_for(flagger_kind)

        refs = await self.get_flagger_refs(flagable, flag_type_name, flagger_kind)
        return await self.registry.resolve(
            self.db, flagger_kind, [ref.id for ref in refs]
        )

    async def get_flags_by(self, flagger: Any, flag_type_name: str | None = None) -> list[Flag]:
        """Get the flags a flagger has made, oldest first.

        Links, types and targets are loaded with each flag.
        """
        ref = to_ref(flagger)
        query = (
            select(Flag)
            .where(Flag.flagger_type == ref.kind, Flag.flagger_id == ref.id)
            .options(
                selectinload(Flag.link).selectinload(FlagLink.type),
                selectinload(Flag.link).selectinload(FlagLink.target),
            )
            .order_by(Flag.id)
        )
        if flag_type_name is not None:
            require_name(flag_type_name, "flag type name")
            query = (
                query.join(FlagLink, Flag.flag_link_id == FlagLink.id)
                .join(FlagType, FlagLink.flag_type_id == FlagType.id)
                .where(FlagType.name == flag_type_name)
            )

        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def get_flags_on(self, flagable: Any, flag_type_name: str | None = None) -> list[Flag]:
        """Get the flags on a target kind, oldest first."""
        query = (
            self._flags_on(kind_of(flagable), flag_type_name, Flag)
            .options(
                selectinload(Flag.link).selectinload(FlagLink.type),
                selectinload(Flag.link).selectinload(FlagLink.target),
            )
            .order_by(Flag.id)
        )

        result = await self.db.execute(query)
        return list(result.scalars().all())

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _flags_on(self, target_name: str, flag_type_name: str | None, *columns: Any) -> Select:
        """Build a query over flags joined to their target kind.

        The flag type is only joined when filtering by it, so flags whose
        type was removed still count towards unfiltered totals.
        An empty flag type name is rejected rather than matched.
        """
        query = (
            select(*columns)
            .select_from(Flag)
            .join(FlagLink, Flag.flag_link_id == FlagLink.id)
            .join(FlagTarget, FlagLink.flag_target_id == FlagTarget.id)
            .where(FlagTarget.name == target_name)
        )

        if flag_type_name is not None:
            require_name(flag_type_name, "flag type name")
            query = query.join(FlagType, FlagLink.flag_type_id == FlagType.id).where(
                FlagType.name == flag_type_name
            )

        return query

    async def _find(self, model: type[ModelT], **values: Any) -> ModelT | None:
        """Find a row by exact column values."""
        result = await self.db.execute(select(model).filter_by(**values))
        return result.scalar_one_or_none()

    async def _get_or_create(self, model: type[ModelT], **values: Any) -> ModelT:
        """Fetch a row by its unique columns, inserting it first if absent.

        A concurrent writer may insert the same row between the lookup and
        the insert. The insert then does nothing and the re-fetch returns
        the other writer's row.
        """
        row = await self._find(model, **values)
        if row is not None:
            return row

        if await self._insert_ignore(model, **values):
            logger.info(f"{model.__tablename__[:-1]}_created", **values)

        row = await self._find(model, **values)
        if row is None:
            raise FlagStoreError(
                f"{model.__name__} missing after insert: {values}", "ROW_MISSING"
            )
        return row

    async def _insert_ignore(self, model: type[ModelT], **values: Any) -> bool:
        """Insert a row unless an identical row already exists.

        Uses ``ON CONFLICT DO NOTHING`` where the dialect has it. Elsewhere
        the insert runs in a savepoint, and an IntegrityError is only taken
        as a conflict when the row can be found afterwards. Foreign key and
        other violations propagate.

        Returns:
            True if a row was inserted.
        """
        table = model.__table__
        dialect = self.db.get_bind().dialect.name
        dialect_insert = ON_CONFLICT_INSERTS.get(dialect)

        if dialect_insert is None:
            try:
                async with self.db.begin_nested():
                    await self.db.execute(insert(table).values(**values))
            except IntegrityError:
                if await self._find(model, **values) is None:
                    raise
                logger.debug("insert_conflict", table=table.name, **values)
                return False
            return True

        statement = dialect_insert(table).values(**values).on_conflict_do_nothing()
        result = await self.db.execute(statement)
        return result.rowcount > 0
