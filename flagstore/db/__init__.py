"""Database package for the flag store."""

from flagstore.db.base import Base
from flagstore.db.session import (
    async_session_maker,
    create_engine,
    create_session_maker,
    engine,
    get_db,
)

__all__ = [
    "Base",
    "async_session_maker",
    "create_engine",
    "create_session_maker",
    "engine",
    "get_db",
]
