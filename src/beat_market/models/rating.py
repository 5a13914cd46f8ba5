# src/beat_market/models/rating.py
"""Model capturing a user's score for a beat."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import (
    CheckConstraint,
    DateTime,
    ForeignKey,
    Integer,
    SmallInteger,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column

from beat_market.db.session import Base
from beat_market.db.time import utcnow


class Rating(Base):
    """Per-user 1..5 score on a beat.

    The unique constraint on (beat_id, user_id) makes concurrent first-time
    ratings from the same user collapse into a single row.
    """

    __tablename__ = "rating"
    __table_args__ = (
        CheckConstraint("value BETWEEN 1 AND 5", name="ck_rating_value_range"),
        UniqueConstraint("beat_id", "user_id", name="uq_rating_beat_user"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    beat_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("beat.id"),
        nullable=False,
        index=True,
    )
    user_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("user_account.id"),
        nullable=False,
        index=True,
    )
    value: Mapped[int] = mapped_column(SmallInteger, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )
