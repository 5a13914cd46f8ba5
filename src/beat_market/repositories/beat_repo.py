"""Data access helpers for beat listings."""
from __future__ import annotations

from sqlalchemy import func, or_, select
from sqlalchemy.orm import Session

from beat_market.models.beat import Beat, BeatTag

__all__ = ["BeatRepository"]


class BeatRepository:
    """Thin wrapper around database access for beat entities."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def get_by_id(self, beat_id: int) -> Beat | None:
        """Return a beat by identifier."""
        return self.session.get(Beat, beat_id)

    def search(
        self,
        *,
        search: str | None = None,
        tag: str | None = None,
        owner_user_id: int | None = None,
        offset: int = 0,
        limit: int = 20,
    ) -> tuple[list[Beat], int]:
        """Return one page of beats, newest first, plus the total match count."""
        stmt = select(Beat)
        if search:
            pattern = f"%{search}%"
            stmt = stmt.where(
                or_(Beat.title.ilike(pattern), Beat.author_display_name.ilike(pattern))
            )
        if tag:
            stmt = stmt.where(Beat.tag_rows.any(BeatTag.tag == tag))
        if owner_user_id is not None:
            stmt = stmt.where(Beat.owner_user_id == owner_user_id)

        total = self.session.scalar(select(func.count()).select_from(stmt.subquery())) or 0
        rows = self.session.scalars(
            stmt.order_by(Beat.created_at.desc(), Beat.id.desc()).offset(offset).limit(limit)
        ).all()
        return list(rows), int(total)

    def add(self, beat: Beat) -> Beat:
        """Stage a new beat and flush to obtain its id."""
        self.session.add(beat)
        self.session.flush()
        return beat

    def delete(self, beat: Beat) -> None:
        """Delete a beat; its tag rows go with it."""
        self.session.delete(beat)
        self.session.flush()
