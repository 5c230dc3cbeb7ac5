"""Flag store: let any entity like, follow or bookmark any kind of entity."""

from flagstore.core.exceptions import (
    EntityRefError,
    FlagStoreError,
    InvalidNameError,
    UnknownFlaggerKindError,
)
from flagstore.mixins import CanFlag, Flaggable
from flagstore.refs import EntityRef
from flagstore.registry import FlaggerRegistry
from flagstore.services.flag import FlagService
from flagstore.store import FlagStore

__version__ = "0.1.0"

__all__ = [
    "CanFlag",
    "EntityRef",
    "EntityRefError",
    "FlagService",
    "FlagStore",
    "FlagStoreError",
    "Flaggable",
    "FlaggerRegistry",
    "InvalidNameError",
    "UnknownFlaggerKindError",
]
