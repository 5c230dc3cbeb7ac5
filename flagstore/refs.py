"""Polymorphic entity references.

A flagger is identified by a ``(kind, id)`` pair rather than a foreign key,
so any entity of the host application can flag. Targets are identified by
kind alone.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from flagstore.core.exceptions import EntityRefError, InvalidNameError


@dataclass(frozen=True)
class EntityRef:
    """A discriminated reference to an entity: its kind name and key."""

    kind: str
    id: int

    def __str__(self) -> str:
        return f"{self.kind}:{self.id}"


def to_ref(entity: Any) -> EntityRef:
    """Coerce a flagger into an EntityRef.

    Accepts an EntityRef, an object with a ``flag_ref()`` method (see
    ``CanFlag``), or any object with an ``id`` attribute, in which case the
    kind is its class name.

    Raises:
        EntityRefError: If no usable id can be found.
        InvalidNameError: If the kind name is empty.
    """
    if isinstance(entity, EntityRef):
        ref = entity
    elif callable(getattr(entity, "flag_ref", None)):
        ref = entity.flag_ref()
    else:
        entity_id = getattr(entity, "id", None)
        if entity_id is None:
            raise EntityRefError(
                f"{type(entity).__name__} has no id; persist it before flagging"
            )
        ref = EntityRef(type(entity).__name__, entity_id)

    if ref.id is None:
        raise EntityRefError(f"Reference to {ref.kind} has no id")
    require_name(ref.kind, "flagger kind")
    return ref


def kind_of(flagable: Any) -> str:
    """Get the target kind name for a flagable.

    Strings are used verbatim and EntityRefs give their kind. Objects or
    classes with a ``flag_kind()`` method (see ``Flaggable``) give its
    result. A plain class gives its own name, any other object the name of
    its class.
    """
    if isinstance(flagable, str):
        kind = flagable
    elif isinstance(flagable, EntityRef):
        kind = flagable.kind
    elif callable(getattr(flagable, "flag_kind", None)):
        kind = flagable.flag_kind()
    elif isinstance(flagable, type):
        kind = flagable.__name__
    else:
        kind = type(flagable).__name__
    return require_name(kind, "target kind")


def require_name(name: str, field: str) -> str:
    """Reject empty or whitespace-only names. Names are never trimmed."""
    if not isinstance(name, str) or not name.strip():
        raise InvalidNameError(field)
    return name
