# src/beat_market/models/transaction.py
"""Immutable ledger entries for completed purchases."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from sqlalchemy import DateTime, ForeignKey, Index, Integer, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from beat_market.db.session import Base
from beat_market.db.time import utcnow
from beat_market.models.types import Money


class Transaction(Base):
    """Record of a beat sold from seller to buyer.

    ``amount`` is the beat's price at purchase time and ``commission`` the
    platform's share of it; both stay valid if the beat is edited later.
    Rows are never updated or deleted.
    """

    __tablename__ = "purchase_transaction"
    __table_args__ = (
        # Store-enforced guard against a buyer purchasing the same beat twice.
        UniqueConstraint("beat_id", "buyer_user_id", name="uq_purchase_transaction_beat_buyer"),
        Index("ix_purchase_transaction_seller", "seller_user_id"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    beat_id: Mapped[int] = mapped_column(Integer, ForeignKey("beat.id"), nullable=False)
    buyer_user_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("user_account.id"),
        nullable=False,
        index=True,
    )
    seller_user_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("user_account.id"),
        nullable=False,
    )
    amount: Mapped[Decimal] = mapped_column(Money, nullable=False)
    commission: Mapped[Decimal] = mapped_column(Money, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )
