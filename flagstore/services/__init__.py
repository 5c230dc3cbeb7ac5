"""Business logic services for the flag store."""

from flagstore.services.flag import FlagService

__all__ = [
    "FlagService",
]
