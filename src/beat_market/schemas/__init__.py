"""
Pydantic schemas for API request/response models.

These schemas define the structure of API data for serialization and validation.
"""

from .beat import BeatCreate, BeatResponse, BeatUpdate
from .comment import CommentCreate, CommentResponse, CommentUpdate
from .purchase import PurchaseResponse, TransactionResponse
from .rating import RatingCreate, RatingSummaryResponse
from .user import LoginRequest, RegisterRequest, UserResponse

__all__ = [
    "BeatCreate", "BeatResponse", "BeatUpdate",
    "CommentCreate", "CommentResponse", "CommentUpdate",
    "PurchaseResponse", "TransactionResponse",
    "RatingCreate", "RatingSummaryResponse",
    "LoginRequest", "RegisterRequest", "UserResponse",
]
