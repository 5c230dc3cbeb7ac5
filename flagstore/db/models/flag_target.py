"""FlagTarget model: the vocabulary of flagable entity kinds."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from flagstore.db.base import Base

if TYPE_CHECKING:
    from flagstore.db.models.flag_link import FlagLink


class FlagTarget(Base):
    """A flagable entity kind, identified by its stable type name.

    Targets are kinds, not instances: flags on two rows of the same kind
    share one FlagTarget.
    """

    __tablename__ = "flag_targets"

    # Primary key
    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    name: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)

    # Relationships
    links: Mapped[list[FlagLink]] = relationship(
        "FlagLink", back_populates="target", passive_deletes="all"
    )

    def __repr__(self) -> str:
        return f"<FlagTarget(id={self.id}, name='{self.name}')>"
