# src/beat_market/models/user.py
"""SQLAlchemy model for marketplace accounts."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from sqlalchemy import Boolean, CheckConstraint, DateTime, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from beat_market.db.session import Base
from beat_market.db.time import utcnow
from beat_market.models.types import Money


class User(Base):
    """Account that can list, rate, comment on and buy beats.

    ``balance`` is an in-database ledger value. Only the purchase flow and
    the top-up operation write it.
    """

    __tablename__ = "user_account"
    __table_args__ = (
        CheckConstraint("balance >= 0", name="ck_user_account_balance_non_negative"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    username: Mapped[str] = mapped_column(String(64), unique=True, nullable=False, index=True)
    password_hash: Mapped[str] = mapped_column(Text, nullable=False)
    photo_ref: Mapped[str] = mapped_column(Text, nullable=False, default="")
    balance: Mapped[Decimal] = mapped_column(Money, nullable=False, default=Decimal("0.00"))
    bio: Mapped[str] = mapped_column(Text, nullable=False, default="")
    is_admin: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )
