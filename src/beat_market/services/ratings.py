"""Rating submission and per-beat aggregation."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from beat_market.core.errors import NotFoundError, ValidationError
from beat_market.core.money import average_rating
from beat_market.db.time import utcnow
from beat_market.db.transaction import run_in_transaction
from beat_market.models import Beat, Rating
from beat_market.repositories import BeatRepository, RatingRepository

logger = logging.getLogger(__name__)

MIN_RATING = 1
MAX_RATING = 5


@dataclass(frozen=True)
class RatingSummary:
    """Aggregate view of a beat's ratings from one user's perspective."""

    user_rating: int
    average_rating: float
    ratings_count: int


@dataclass(frozen=True)
class RatedBeat:
    beat: Beat
    user_rating: int
    average_rating: float
    ratings_count: int


@dataclass(frozen=True)
class RatedBeatsPage:
    items: list[RatedBeat]
    total: int
    page: int
    total_pages: int


def validate_rating_value(value: object) -> int:
    """Return ``value`` if it is an integer score in [1, 5]."""
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError("rating must be an integer between 1 and 5")
    if not MIN_RATING <= value <= MAX_RATING:
        raise ValidationError("rating must be an integer between 1 and 5")
    return value


class RatingService:
    """Service handling rating upserts and summaries."""

    def __init__(self, db: Session) -> None:
        self.db = db
        self.beats = BeatRepository(db)
        self.ratings = RatingRepository(db)

    def submit_rating(self, beat_id: int, user_id: int, value: int) -> Rating:
        """Create or overwrite the user's rating of a beat.

        Raises:
            ValidationError: If ``value`` is outside [1, 5].
            NotFoundError: If the beat does not exist.
        """
        score = validate_rating_value(value)

        def work(db: Session) -> Rating:
            if self.beats.get_by_id(beat_id) is None:
                raise NotFoundError("beat")
            return self._upsert(beat_id, user_id, score)

        rating = run_in_transaction(self.db, work)
        logger.info("User %s rated beat %s with %s", user_id, beat_id, score)
        return rating

    def _upsert(self, beat_id: int, user_id: int, value: int) -> Rating:
        now = utcnow()
        existing = self.ratings.get(beat_id, user_id)
        if existing is None:
            try:
                with self.db.begin_nested():
                    return self.ratings.add(
                        Rating(
                            beat_id=beat_id,
                            user_id=user_id,
                            value=value,
                            created_at=now,
                            updated_at=now,
                        )
                    )
            except IntegrityError:
                # A concurrent first rating won the unique index; update that row.
                existing = self.ratings.get(beat_id, user_id)
                if existing is None:
                    raise

        existing.value = value
        existing.updated_at = now
        self.db.flush()
        return existing

    def get_rating_summary(self, beat_id: int, user_id: int | None = None) -> RatingSummary:
        """Return the user's own score plus the beat's average and count.

        Both the user score and the average are 0 when absent.
        """
        if self.beats.get_by_id(beat_id) is None:
            raise NotFoundError("beat")

        total, count = self.ratings.totals(beat_id)
        user_rating = 0
        if user_id is not None:
            own = self.ratings.get(beat_id, user_id)
            user_rating = own.value if own else 0

        return RatingSummary(
            user_rating=user_rating,
            average_rating=average_rating(total, count),
            ratings_count=count,
        )

    def list_rated_beats(
        self,
        user_id: int,
        *,
        min_score: int | None = None,
        search: str | None = None,
        page: int = 1,
        limit: int = 20,
    ) -> RatedBeatsPage:
        """Return beats the user has rated, most recently rated first."""
        if min_score is not None:
            validate_rating_value(min_score)
        page = max(page, 1)
        pairs, total = self.ratings.rated_by_user(
            user_id,
            min_score=min_score,
            search=search,
            offset=(page - 1) * limit,
            limit=limit,
        )
        totals = self.ratings.totals_for_beats([beat.id for beat, _ in pairs])
        items = []
        for beat, rating in pairs:
            beat_total, beat_count = totals.get(beat.id, (0, 0))
            items.append(
                RatedBeat(
                    beat=beat,
                    user_rating=rating.value,
                    average_rating=average_rating(beat_total, beat_count),
                    ratings_count=beat_count,
                )
            )
        return RatedBeatsPage(
            items=items,
            total=total,
            page=page,
            total_pages=math.ceil(total / limit) if limit else 0,
        )
