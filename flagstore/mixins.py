"""Capability mixins for host application models.

Add ``CanFlag`` to models that flag things and ``Flaggable`` to models that
get flagged. Neither adds columns. The store is always passed in
explicitly; there is no global instance.

    class User(Base, CanFlag):
        ...

    class Post(Base, Flaggable):
        __flag_kind__ = "post"

    await user.flag(store, post, "like")
    await post.flag_count(store, "like")
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from flagstore.core.exceptions import EntityRefError
from flagstore.refs import EntityRef

if TYPE_CHECKING:
    from flagstore.db.models import Flag
    from flagstore.services.flag import FlagService
    from flagstore.store import FlagStore

    AnyStore = FlagStore | FlagService


def _kind_name(cls: type) -> str:
    return getattr(cls, "__flag_kind__", None) or cls.__name__


class CanFlag:
    """Mixin for entities that flag others."""

    __flag_kind__ = None

    def flag_ref(self) -> EntityRef:
        """Reference this entity by kind and id."""
        entity_id = getattr(self, "id", None)
        if entity_id is None:
            raise EntityRefError(
                f"{type(self).__name__} has no id; persist it before flagging"
            )
        return EntityRef(_kind_name(type(self)), entity_id)

    async def flag(self, store: AnyStore, flagable: Any, flag_type_name: str) -> Flag:
        return await store.flag(self, flagable, flag_type_name)

    async def unflag(self, store: AnyStore, flagable: Any, flag_type_name: str) -> bool:
        return await store.unflag(self, flagable, flag_type_name)

    async def has_flagged(
        self, store: AnyStore, flagable: Any, flag_type_name: str | None = None
    ) -> bool:
        return await store.is_flagged_by(flagable, self, flag_type_name)

    async def flags_made(self, store: AnyStore, flag_type_name: str | None = None) -> list[Flag]:
        return await store.get_flags_by(self, flag_type_name)


class Flaggable:
    """Mixin for entities that can be flagged.

    Flags are recorded against the entity's kind, so every instance of a
    class shares the same flags.
    """

    __flag_kind__ = None

    @classmethod
    def flag_kind(cls) -> str:
        """The target kind name: ``__flag_kind__`` or the class name."""
        return _kind_name(cls)

    async def is_flagged_by(
        self, store: AnyStore, flagger: Any, flag_type_name: str | None = None
    ) -> bool:
        return await store.is_flagged_by(self, flagger, flag_type_name)

    async def flag_count(self, store: AnyStore, flag_type_name: str | None = None) -> int:
        return await store.get_flag_count(self, flag_type_name)

    async def flaggers(self, store: AnyStore, flag_type_name: str, flagger_kind: str) -> list[Any]:
        return await store.get_flaggers(self, flag_type_name, flagger_kind)

    async def flags_received(
        self, store: AnyStore, flag_type_name: str | None = None
    ) -> list[Flag]:
        return await store.get_flags_on(self, flag_type_name)
