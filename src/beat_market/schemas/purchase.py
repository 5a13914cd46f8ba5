"""Purchase and ledger Pydantic schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict

from .beat import BeatResponse
from .common import Money, PageInfo


class TransactionResponse(BaseModel):
    """Immutable ledger entry."""

    id: int
    beat_id: int
    buyer_user_id: int
    seller_user_id: int
    amount: Money
    commission: Money
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class PurchaseResponse(BaseModel):
    transaction: TransactionResponse
    new_balance: Money


class TransactionHistoryItem(BaseModel):
    transaction: TransactionResponse
    beat: BeatResponse | None
    buyer_username: str | None
    seller_username: str | None


class TransactionHistoryResponse(PageInfo):
    transactions: list[TransactionHistoryItem]
