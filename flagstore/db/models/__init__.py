"""Database models for the flag store."""

from flagstore.db.models.flag import Flag
from flagstore.db.models.flag_link import FlagLink
from flagstore.db.models.flag_target import FlagTarget
from flagstore.db.models.flag_type import FlagType

__all__ = [
    "Flag",
    "FlagLink",
    "FlagTarget",
    "FlagType",
]
