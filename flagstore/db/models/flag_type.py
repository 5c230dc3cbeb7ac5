"""FlagType model: the vocabulary of flag kinds."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from flagstore.db.base import Base

if TYPE_CHECKING:
    from flagstore.db.models.flag_link import FlagLink


class FlagType(Base):
    """A named kind of flag such as "like" or "bookmark"."""

    __tablename__ = "flag_types"

    # Primary key
    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    name: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)

    # Relationships (no delete cascade, removed types orphan their links)
    links: Mapped[list[FlagLink]] = relationship(
        "FlagLink", back_populates="type", passive_deletes="all"
    )

    # Ids of removed types must not be reused, or re-adding a type by name
    # would pick up the flags orphaned under its old id
    __table_args__ = {"sqlite_autoincrement": True}

    def __repr__(self) -> str:
        return f"<FlagType(id={self.id}, name='{self.name}')>"
