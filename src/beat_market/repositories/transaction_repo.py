"""Data access helpers for the purchase ledger."""
from __future__ import annotations

from typing import Literal

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from beat_market.models.transaction import Transaction

__all__ = ["TransactionRepository"]


class TransactionRepository:
    """Thin wrapper around database access for ledger entries.

    Exposes no update or delete: ledger rows are immutable.
    """

    def __init__(self, session: Session) -> None:
        self.session = session

    def find(self, beat_id: int, buyer_user_id: int) -> Transaction | None:
        """Return the purchase of a beat by a buyer, if any."""
        return self.session.scalars(
            select(Transaction).where(
                Transaction.beat_id == beat_id,
                Transaction.buyer_user_id == buyer_user_id,
            )
        ).first()

    def count_for_beat(self, beat_id: int) -> int:
        """Return how many times a beat has been sold."""
        return int(
            self.session.scalar(
                select(func.count()).select_from(Transaction).where(Transaction.beat_id == beat_id)
            )
            or 0
        )

    def list_for_user(
        self,
        user_id: int,
        kind: Literal["purchases", "sales"],
        *,
        offset: int = 0,
        limit: int = 5,
    ) -> tuple[list[Transaction], int]:
        """Return a page of a user's purchases or sales, newest first."""
        column = Transaction.buyer_user_id if kind == "purchases" else Transaction.seller_user_id
        stmt = select(Transaction).where(column == user_id)
        total = self.session.scalar(select(func.count()).select_from(stmt.subquery())) or 0
        rows = self.session.scalars(
            stmt.order_by(Transaction.created_at.desc(), Transaction.id.desc())
            .offset(offset)
            .limit(limit)
        ).all()
        return list(rows), int(total)

    def add(self, transaction: Transaction) -> Transaction:
        """Insert a ledger entry and flush so the unique index is checked now."""
        self.session.add(transaction)
        self.session.flush()
        return transaction
