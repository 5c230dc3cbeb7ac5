"""Flag model: one flagger's mark of one flag link."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import TYPE_CHECKING

from sqlalchemy import BigInteger, DateTime, ForeignKey, Index, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from flagstore.db.base import Base

if TYPE_CHECKING:
    from flagstore.db.models.flag_link import FlagLink


class Flag(Base):
    """A flag applied by a flagger to a target kind.

    The flagger is a polymorphic reference: ``flagger_type`` names the
    entity kind and ``flagger_id`` its key. There is no foreign key on the
    pair since the flagger can live in any table.
    """

    __tablename__ = "flags"

    # Primary key
    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    # Foreign key
    flag_link_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("flag_links.id"), nullable=False
    )

    # Polymorphic flagger reference
    flagger_type: Mapped[str] = mapped_column(String(255), nullable=False)
    flagger_id: Mapped[int] = mapped_column(BigInteger, nullable=False)

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(timezone.utc)
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    # Relationships
    link: Mapped[FlagLink] = relationship("FlagLink", back_populates="flags")

    __table_args__ = (
        UniqueConstraint(
            "flag_link_id", "flagger_type", "flagger_id", name="uq_flags_link_flagger"
        ),
        Index("ix_flags_flagger", "flagger_type", "flagger_id"),
    )

    def __repr__(self) -> str:
        return (
            f"<Flag(id={self.id}, link={self.flag_link_id}, "
            f"flagger={self.flagger_type}:{self.flagger_id})>"
        )
