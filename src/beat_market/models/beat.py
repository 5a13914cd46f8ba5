# src/beat_market/models/beat.py
"""SQLAlchemy models for beat listings and their tags."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from sqlalchemy import (
    CheckConstraint,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from beat_market.db.session import Base
from beat_market.db.time import utcnow
from beat_market.models.types import Money


class Beat(Base):
    """A purchasable audio-track listing owned by exactly one user."""

    __tablename__ = "beat"
    __table_args__ = (
        CheckConstraint("price >= 0", name="ck_beat_price_non_negative"),
        Index("ix_beat_created_at", "created_at"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    # Display name shown on the listing; may differ from the owner's username.
    author_display_name: Mapped[str] = mapped_column(String(200), nullable=False)
    price: Mapped[Decimal] = mapped_column(Money, nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    image_ref: Mapped[str] = mapped_column(Text, nullable=False, default="")
    audio_ref: Mapped[str] = mapped_column(Text, nullable=False, default="")
    owner_user_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("user_account.id"),
        nullable=False,
        index=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow
    )

    tag_rows: Mapped[list[BeatTag]] = relationship(
        "BeatTag",
        cascade="all, delete-orphan",
        order_by="BeatTag.tag",
        lazy="selectin",
    )

    @property
    def tags(self) -> list[str]:
        """Return the beat's tags in alphabetical order."""
        return [row.tag for row in self.tag_rows]

    def set_tags(self, tags: list[str] | set[str]) -> None:
        """Replace the tag set, dropping blanks and duplicates."""
        wanted = sorted({tag.strip() for tag in tags if tag and tag.strip()})
        self.tag_rows = [BeatTag(tag=tag) for tag in wanted]


class BeatTag(Base):
    """Single tag attached to a beat."""

    __tablename__ = "beat_tag"
    __table_args__ = (UniqueConstraint("beat_id", "tag", name="uq_beat_tag_beat_tag"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    beat_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("beat.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    tag: Mapped[str] = mapped_column(String(64), nullable=False)
