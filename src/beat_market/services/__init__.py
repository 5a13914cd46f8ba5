"""Business logic services for the Beat Market application."""

from .popularity import PopularBeat, rank_popular
from .purchases import PurchaseResult, PurchaseService
from .ratings import RatingService, RatingSummary

__all__ = [
    "PopularBeat",
    "PurchaseResult",
    "PurchaseService",
    "RatingService",
    "RatingSummary",
    "rank_popular",
]
