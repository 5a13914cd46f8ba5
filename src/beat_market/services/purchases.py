"""Balance-based purchase flow with platform commission."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from decimal import Decimal

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from beat_market.core.errors import (
    ConflictError,
    InsufficientFundsError,
    NotFoundError,
    ValidationError,
)
from beat_market.core.money import ensure_fits, split_commission, to_money
from beat_market.core.settings import settings
from beat_market.db.time import utcnow
from beat_market.db.transaction import run_in_transaction
from beat_market.models import Beat, Transaction, User
from beat_market.repositories import BeatRepository, TransactionRepository, UserRepository

logger = logging.getLogger(__name__)

TRANSACTION_KINDS = ("purchases", "sales")


@dataclass(frozen=True)
class PurchaseResult:
    transaction: Transaction
    buyer_new_balance: Decimal


@dataclass(frozen=True)
class TransactionView:
    """Ledger entry joined with what the profile screen shows about it."""

    transaction: Transaction
    beat: Beat | None
    buyer_username: str | None
    seller_username: str | None


@dataclass(frozen=True)
class TransactionPage:
    items: list[TransactionView]
    total: int
    page: int
    total_pages: int


class PurchaseService:
    """Moves balance from buyer to seller and platform as one unit.

    All balance writes in the application go through this service.
    """

    def __init__(self, db: Session) -> None:
        self.db = db
        self.users = UserRepository(db)
        self.beats = BeatRepository(db)
        self.transactions = TransactionRepository(db)

    def purchase(self, beat_id: int, buyer_id: int) -> PurchaseResult:
        """Buy a beat on behalf of ``buyer_id``.

        Preconditions are checked in a fixed order and each failure has its
        own error. On success the buyer is debited the price, the seller is
        credited the price minus commission, the platform account is credited
        the commission and a ledger entry is written, all in one transaction.

        Raises:
            NotFoundError: Beat, buyer, seller or platform account missing.
            ConflictError: The buyer already owns the beat.
            ValidationError: The buyer owns the listing, or a credited balance
                would exceed the storable maximum.
            InsufficientFundsError: The buyer balance is below the price.
        """
        result = run_in_transaction(self.db, lambda db: self._purchase(beat_id, buyer_id))
        logger.info(
            "Beat %s purchased by user %s for %s (commission %s)",
            beat_id,
            buyer_id,
            result.transaction.amount,
            result.transaction.commission,
        )
        return result

    def _purchase(self, beat_id: int, buyer_id: int) -> PurchaseResult:
        beat = self.beats.get_by_id(beat_id)
        if beat is None:
            raise NotFoundError("beat")
        if self.transactions.find(beat_id, buyer_id) is not None:
            raise ConflictError("already purchased")
        if beat.owner_user_id == buyer_id:
            raise ValidationError("self purchase")
        if self.users.get_by_id(buyer_id) is None:
            raise NotFoundError("buyer")
        platform = self.users.get_by_username(settings.platform_username)
        if platform is None:
            raise NotFoundError("platform account")

        price = to_money(beat.price, field="price")
        locked = self.users.lock_many([buyer_id, beat.owner_user_id, platform.id])
        buyer = locked[buyer_id]
        seller = locked.get(beat.owner_user_id)
        if seller is None:
            raise NotFoundError("seller")
        platform = locked[platform.id]

        if buyer.balance < price:
            raise InsufficientFundsError()

        commission, seller_amount = split_commission(price, settings.commission_rate)
        buyer.balance = buyer.balance - price
        seller.balance = ensure_fits(seller.balance + seller_amount, field="seller balance")
        platform.balance = ensure_fits(platform.balance + commission, field="platform balance")

        transaction = Transaction(
            beat_id=beat.id,
            buyer_user_id=buyer.id,
            seller_user_id=seller.id,
            amount=price,
            commission=commission,
            created_at=utcnow(),
        )
        try:
            self.transactions.add(transaction)
        except IntegrityError as err:
            # Lost a race against an identical purchase; the unique index wins.
            raise ConflictError("already purchased") from err

        return PurchaseResult(transaction=transaction, buyer_new_balance=buyer.balance)

    def top_up(self, user_id: int, amount: Decimal | int | str | float) -> Decimal:
        """Credit a user's balance and return the new balance."""
        value = to_money(amount)
        if value <= 0:
            raise ValidationError("amount must be positive")

        def work(db: Session) -> Decimal:
            user = self.users.lock_many([user_id]).get(user_id)
            if user is None:
                raise NotFoundError("user")
            user.balance = ensure_fits(user.balance + value)
            db.flush()
            return user.balance

        balance = run_in_transaction(self.db, work)
        logger.info("User %s topped up %s", user_id, value)
        return balance

    def list_transactions(
        self,
        user_id: int,
        kind: str = "purchases",
        *,
        page: int = 1,
        limit: int = 5,
    ) -> TransactionPage:
        """Return a page of the user's purchases or sales, newest first."""
        if kind not in TRANSACTION_KINDS:
            raise ValidationError("type must be 'purchases' or 'sales'")
        page = max(page, 1)
        rows, total = self.transactions.list_for_user(
            user_id, kind, offset=(page - 1) * limit, limit=limit  # type: ignore[arg-type]
        )
        items = [
            TransactionView(
                transaction=row,
                beat=self.beats.get_by_id(row.beat_id),
                buyer_username=_username(self.users.get_by_id(row.buyer_user_id)),
                seller_username=_username(self.users.get_by_id(row.seller_user_id)),
            )
            for row in rows
        ]
        return TransactionPage(
            items=items,
            total=total,
            page=page,
            total_pages=math.ceil(total / limit) if limit else 0,
        )


def _username(user: User | None) -> str | None:
    return user.username if user else None
