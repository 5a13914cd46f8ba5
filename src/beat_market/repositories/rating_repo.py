"""Data access helpers for beat ratings."""
from __future__ import annotations

from sqlalchemy import delete, func, select
from sqlalchemy.orm import Session

from beat_market.models.beat import Beat
from beat_market.models.rating import Rating

__all__ = ["RatingRepository"]


class RatingRepository:
    """Thin wrapper around database access for rating entities."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def get(self, beat_id: int, user_id: int) -> Rating | None:
        """Return the rating a user gave a beat, if any."""
        return self.session.scalars(
            select(Rating).where(Rating.beat_id == beat_id, Rating.user_id == user_id)
        ).first()

    def totals(self, beat_id: int) -> tuple[int, int]:
        """Return ``(sum_of_values, count)`` for a beat."""
        row = self.session.execute(
            select(func.coalesce(func.sum(Rating.value), 0), func.count(Rating.id)).where(
                Rating.beat_id == beat_id
            )
        ).one()
        return int(row[0]), int(row[1])

    def totals_for_beats(self, beat_ids: list[int]) -> dict[int, tuple[int, int]]:
        """Return ``{beat_id: (sum_of_values, count)}`` for the given beats."""
        if not beat_ids:
            return {}
        rows = self.session.execute(
            select(Rating.beat_id, func.sum(Rating.value), func.count(Rating.id))
            .where(Rating.beat_id.in_(beat_ids))
            .group_by(Rating.beat_id)
        ).all()
        return {beat_id: (int(total), int(count)) for beat_id, total, count in rows}

    def rated_by_user(
        self,
        user_id: int,
        *,
        min_score: int | None = None,
        search: str | None = None,
        offset: int = 0,
        limit: int = 20,
    ) -> tuple[list[tuple[Beat, Rating]], int]:
        """Return beats a user rated, most recently rated first."""
        stmt = select(Beat, Rating).join(Rating, Rating.beat_id == Beat.id).where(
            Rating.user_id == user_id
        )
        if min_score is not None:
            stmt = stmt.where(Rating.value >= min_score)
        if search:
            stmt = stmt.where(Beat.title.ilike(f"%{search}%"))

        total = self.session.scalar(select(func.count()).select_from(stmt.subquery())) or 0
        rows = self.session.execute(
            stmt.order_by(Rating.updated_at.desc(), Rating.id.desc()).offset(offset).limit(limit)
        ).all()
        return [(beat, rating) for beat, rating in rows], int(total)

    def add(self, rating: Rating) -> Rating:
        """Stage a new rating and flush so the unique index is checked now."""
        self.session.add(rating)
        self.session.flush()
        return rating

    def delete_for_beat(self, beat_id: int) -> int:
        """Delete every rating of a beat and return how many were removed."""
        result = self.session.execute(delete(Rating).where(Rating.beat_id == beat_id))
        return result.rowcount or 0
