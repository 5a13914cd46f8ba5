# tests/services/test_purchases.py
"""Tests for the purchase flow and balance bookkeeping."""

from decimal import Decimal

import pytest
from sqlalchemy import func, select

from beat_market.core.errors import (
    ConflictError,
    InsufficientFundsError,
    NotFoundError,
    ValidationError,
)
from beat_market.models import Transaction
from beat_market.repositories import TransactionRepository
from beat_market.services.purchases import PurchaseService


def _transaction_count(db_session) -> int:
    return db_session.scalar(select(func.count()).select_from(Transaction))


def test_purchase_scenario_moves_money_three_ways(
    db_session, beat, buyer, seller, platform_account
) -> None:
    """100.00 beat, buyer at 150.00: 50.00 / 97.00 / 3.00 afterwards."""
    result = PurchaseService(db_session).purchase(beat.id, buyer.id)

    db_session.refresh(buyer)
    db_session.refresh(seller)
    db_session.refresh(platform_account)
    assert result.buyer_new_balance == Decimal("50.00")
    assert buyer.balance == Decimal("50.00")
    assert seller.balance == Decimal("97.00")
    assert platform_account.balance == Decimal("3.00")
    assert result.transaction.amount == Decimal("100.00")
    assert result.transaction.commission == Decimal("3.00")
    assert result.transaction.buyer_user_id == buyer.id
    assert result.transaction.seller_user_id == seller.id
    assert _transaction_count(db_session) == 1


@pytest.mark.parametrize("price", ["0.01", "0.17", "9.99", "33.33", "49.50", "123.45"])
def test_purchase_conserves_money(
    db_session, make_user, make_beat, seller, platform_account, price
) -> None:
    buyer = make_user(balance="500.00")
    listing = make_beat(seller, price=price)

    PurchaseService(db_session).purchase(listing.id, buyer.id)

    for user in (buyer, seller, platform_account):
        db_session.refresh(user)
    debit = Decimal("500.00") - buyer.balance
    assert debit == Decimal(price)
    assert debit == seller.balance + platform_account.balance


def test_commission_rounds_half_up(db_session, make_user, make_beat, seller, platform_account) -> None:
    buyer = make_user(balance="100.00")
    # 0.50 * 0.03 = 0.015 -> 0.02
    listing = make_beat(seller, price="0.50")

    result = PurchaseService(db_session).purchase(listing.id, buyer.id)

    assert result.transaction.commission == Decimal("0.02")
    db_session.refresh(seller)
    assert seller.balance == Decimal("0.48")


def test_purchase_of_free_beat_records_zero_amount(
    db_session, make_user, make_beat, seller, platform_account
) -> None:
    buyer = make_user()
    listing = make_beat(seller, price="0.00")

    result = PurchaseService(db_session).purchase(listing.id, buyer.id)

    assert result.transaction.amount == Decimal("0.00")
    assert result.buyer_new_balance == Decimal("0.00")


def test_purchase_unknown_beat(db_session, buyer, platform_account) -> None:
    with pytest.raises(NotFoundError) as exc_info:
        PurchaseService(db_session).purchase(999_999, buyer.id)
    assert exc_info.value.entity == "beat"


def test_second_purchase_is_a_conflict(db_session, beat, buyer, seller, platform_account) -> None:
    service = PurchaseService(db_session)
    service.purchase(beat.id, buyer.id)

    with pytest.raises(ConflictError, match="already purchased"):
        service.purchase(beat.id, buyer.id)

    db_session.refresh(buyer)
    assert buyer.balance == Decimal("50.00")
    assert _transaction_count(db_session) == 1


def test_self_purchase_is_rejected_without_side_effects(
    db_session, make_beat, make_user, platform_account
) -> None:
    owner = make_user(balance="500.00")
    listing = make_beat(owner, price="10.00")

    with pytest.raises(ValidationError, match="self purchase"):
        PurchaseService(db_session).purchase(listing.id, owner.id)

    db_session.refresh(owner)
    assert owner.balance == Decimal("500.00")
    assert _transaction_count(db_session) == 0


def test_missing_buyer(db_session, beat, platform_account) -> None:
    with pytest.raises(NotFoundError) as exc_info:
        PurchaseService(db_session).purchase(beat.id, 424242)
    assert exc_info.value.entity == "buyer"


def test_missing_platform_account(db_session, beat, buyer) -> None:
    with pytest.raises(NotFoundError) as exc_info:
        PurchaseService(db_session).purchase(beat.id, buyer.id)
    assert exc_info.value.entity == "platform account"

    db_session.refresh(buyer)
    assert buyer.balance == Decimal("150.00")


def test_insufficient_funds_changes_nothing(
    db_session, make_user, beat, seller, platform_account
) -> None:
    poor_buyer = make_user(balance="99.99")

    with pytest.raises(InsufficientFundsError):
        PurchaseService(db_session).purchase(beat.id, poor_buyer.id)

    for user in (poor_buyer, seller, platform_account):
        db_session.refresh(user)
    assert poor_buyer.balance == Decimal("99.99")
    assert seller.balance == Decimal("0.00")
    assert platform_account.balance == Decimal("0.00")
    assert _transaction_count(db_session) == 0


def test_exact_balance_is_enough(db_session, make_user, beat, platform_account) -> None:
    buyer = make_user(balance="100.00")

    result = PurchaseService(db_session).purchase(beat.id, buyer.id)

    assert result.buyer_new_balance == Decimal("0.00")


def test_unique_index_catches_a_lost_race(
    db_session, make_user, beat, seller, platform_account, monkeypatch
) -> None:
    """A duplicate that slips past the pre-check is stopped by the store."""
    buyer = make_user(balance="300.00")
    service = PurchaseService(db_session)
    service.purchase(beat.id, buyer.id)
    monkeypatch.setattr(TransactionRepository, "find", lambda self, beat_id, buyer_id: None)

    with pytest.raises(ConflictError, match="already purchased"):
        service.purchase(beat.id, buyer.id)

    for user in (buyer, seller, platform_account):
        db_session.refresh(user)
    assert buyer.balance == Decimal("200.00")
    assert seller.balance == Decimal("97.00")
    assert platform_account.balance == Decimal("3.00")
    assert _transaction_count(db_session) == 1


def test_price_edit_after_sale_keeps_ledger_amount(
    db_session, beat, buyer, seller, platform_account
) -> None:
    result = PurchaseService(db_session).purchase(beat.id, buyer.id)
    beat.price = Decimal("250.00")
    db_session.flush()

    stored = db_session.get(Transaction, result.transaction.id)
    db_session.refresh(stored)
    assert stored.amount == Decimal("100.00")


class TestTopUp:
    def test_top_up_credits_balance(self, db_session, buyer) -> None:
        balance = PurchaseService(db_session).top_up(buyer.id, "25.50")
        assert balance == Decimal("175.50")

    def test_top_up_cannot_push_balance_past_column_limit(self, db_session, make_user) -> None:
        rich = make_user(balance="9999999990.00")

        with pytest.raises(ValidationError):
            PurchaseService(db_session).top_up(rich.id, "10.00")

        db_session.refresh(rich)
        assert rich.balance == Decimal("9999999990.00")

    @pytest.mark.parametrize("amount", ["0", "-5", "1.001", "NaN", "abc"])
    def test_top_up_rejects_bad_amounts(self, db_session, buyer, amount) -> None:
        with pytest.raises(ValidationError):
            PurchaseService(db_session).top_up(buyer.id, amount)
        db_session.refresh(buyer)
        assert buyer.balance == Decimal("150.00")

    def test_top_up_unknown_user(self, db_session) -> None:
        with pytest.raises(NotFoundError):
            PurchaseService(db_session).top_up(777_777, "10")


class TestTransactionHistory:
    def test_purchases_and_sales_views(
        self, db_session, make_beat, beat, buyer, seller, platform_account
    ) -> None:
        second = make_beat(seller, price="20.00")
        service = PurchaseService(db_session)
        service.purchase(beat.id, buyer.id)
        service.purchase(second.id, buyer.id)

        purchases = service.list_transactions(buyer.id, "purchases")
        sales = service.list_transactions(seller.id, "sales")

        assert purchases.total == 2
        assert {item.beat.id for item in purchases.items} == {beat.id, second.id}
        assert sales.total == 2
        assert all(item.buyer_username == "buyer" for item in sales.items)
        assert service.list_transactions(seller.id, "purchases").total == 0

    def test_paging(self, db_session, make_beat, buyer, seller, platform_account) -> None:
        service = PurchaseService(db_session)
        for _ in range(3):
            service.purchase(make_beat(seller, price="1.00").id, buyer.id)

        page = service.list_transactions(buyer.id, "purchases", page=2, limit=2)

        assert page.total == 3
        assert page.total_pages == 2
        assert len(page.items) == 1

    def test_unknown_kind(self, db_session, buyer) -> None:
        with pytest.raises(ValidationError):
            PurchaseService(db_session).list_transactions(buyer.id, "refunds")


def test_credit_past_column_limit_rolls_back_purchase(
    db_session, make_user, make_beat, platform_account
) -> None:
    full_seller = make_user(balance="9999999999.00")
    listing = make_beat(full_seller, price="100.00")
    buyer = make_user(balance="100.00")

    with pytest.raises(ValidationError):
        PurchaseService(db_session).purchase(listing.id, buyer.id)

    for user in (buyer, full_seller, platform_account):
        db_session.refresh(user)
    assert buyer.balance == Decimal("100.00")
    assert full_seller.balance == Decimal("9999999999.00")
    assert platform_account.balance == Decimal("0.00")
    assert _transaction_count(db_session) == 0
