"""Data access helpers consumed by the marketplace services."""

from .beat_repo import BeatRepository
from .comment_repo import CommentRepository
from .rating_repo import RatingRepository
from .transaction_repo import TransactionRepository
from .user_repo import UserRepository

__all__ = [
    "BeatRepository",
    "CommentRepository",
    "RatingRepository",
    "TransactionRepository",
    "UserRepository",
]
