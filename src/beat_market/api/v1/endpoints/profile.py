"""Endpoints for the caller's own profile, balance and ledger."""

from __future__ import annotations

from typing import Literal

from fastapi import APIRouter, Query

from beat_market.schemas.beat import BeatResponse
from beat_market.schemas.purchase import (
    TransactionHistoryItem,
    TransactionHistoryResponse,
    TransactionResponse,
)
from beat_market.schemas.user import (
    BalanceResponse,
    BioUpdate,
    PhotoUpdate,
    TopUpRequest,
    UserResponse,
)
from beat_market.services import PurchaseService, accounts

from ..dependencies import CurrentUserDep, SessionDep

router = APIRouter(prefix="/profile", tags=["profile"])


@router.get("/", response_model=UserResponse)
def get_profile(current_user: CurrentUserDep) -> UserResponse:
    return UserResponse.model_validate(current_user)


@router.put("/bio", response_model=UserResponse)
def update_bio(payload: BioUpdate, current_user: CurrentUserDep, db: SessionDep) -> UserResponse:
    user = accounts.update_profile(db, current_user, bio=payload.bio)
    return UserResponse.model_validate(user)


@router.put("/photo", response_model=UserResponse)
def update_photo(payload: PhotoUpdate, current_user: CurrentUserDep, db: SessionDep) -> UserResponse:
    """Point the profile photo at an already uploaded blob."""
    user = accounts.update_profile(db, current_user, photo_ref=payload.photo_ref)
    return UserResponse.model_validate(user)


@router.put("/balance", response_model=BalanceResponse)
def top_up_balance(payload: TopUpRequest, current_user: CurrentUserDep, db: SessionDep) -> BalanceResponse:
    """Credit the caller's in-app balance."""
    balance = PurchaseService(db).top_up(current_user.id, payload.amount)
    return BalanceResponse(balance=balance)


@router.get("/transactions", response_model=TransactionHistoryResponse)
def list_transactions(
    current_user: CurrentUserDep,
    db: SessionDep,
    type: Literal["purchases", "sales"] = Query("purchases"),  # noqa: A002
    page: int = Query(1, ge=1),
    limit: int = Query(5, ge=1, le=100),
) -> TransactionHistoryResponse:
    """The caller's purchases or sales, newest first."""
    result = PurchaseService(db).list_transactions(current_user.id, type, page=page, limit=limit)
    return TransactionHistoryResponse(
        transactions=[
            TransactionHistoryItem(
                transaction=TransactionResponse.model_validate(item.transaction),
                beat=BeatResponse.model_validate(item.beat) if item.beat else None,
                buyer_username=item.buyer_username,
                seller_username=item.seller_username,
            )
            for item in result.items
        ],
        total=result.total,
        page=result.page,
        total_pages=result.total_pages,
    )
