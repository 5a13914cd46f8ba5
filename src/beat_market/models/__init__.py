# src/beat_market/models/__init__.py
"""SQLAlchemy models for the Beat Market application."""

from .beat import Beat, BeatTag
from .comment import Comment
from .rating import Rating
from .transaction import Transaction
from .user import User

__all__ = [
    "Beat", "BeatTag",
    "Comment",
    "Rating",
    "Transaction",
    "User",
]
