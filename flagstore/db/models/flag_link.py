"""FlagLink model for flag type / target kind pairings."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import ForeignKey, Integer, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from flagstore.db.base import Base

if TYPE_CHECKING:
    from flagstore.db.models.flag import Flag
    from flagstore.db.models.flag_target import FlagTarget
    from flagstore.db.models.flag_type import FlagType


class FlagLink(Base):
    """Association of one flag type with one target kind."""

    __tablename__ = "flag_links"

    # Primary key
    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    # Foreign keys
    flag_type_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("flag_types.id"), nullable=False
    )
    flag_target_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("flag_targets.id"), nullable=False
    )

    # Relationships
    type: Mapped[FlagType] = relationship("FlagType", back_populates="links")
    target: Mapped[FlagTarget] = relationship("FlagTarget", back_populates="links")
    flags: Mapped[list[Flag]] = relationship(
        "Flag", back_populates="link", passive_deletes="all"
    )

    __table_args__ = (
        UniqueConstraint(
            "flag_type_id", "flag_target_id", name="uq_flag_links_type_target"
        ),
    )

    def __repr__(self) -> str:
        return (
            f"<FlagLink(id={self.id}, type={self.flag_type_id}, "
            f"target={self.flag_target_id})>"
        )
