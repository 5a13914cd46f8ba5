"""Data access helpers for beat comments."""
from __future__ import annotations

from sqlalchemy import delete, func, select
from sqlalchemy.orm import Session

from beat_market.models.comment import Comment

__all__ = ["CommentRepository"]


class CommentRepository:
    """Thin wrapper around database access for comment entities."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def get_by_id(self, comment_id: int) -> Comment | None:
        """Return a comment by identifier."""
        return self.session.get(Comment, comment_id)

    def list_for_beat(
        self, beat_id: int, *, offset: int = 0, limit: int = 10
    ) -> tuple[list[Comment], int]:
        """Return a page of a beat's comments, newest first."""
        stmt = select(Comment).where(Comment.beat_id == beat_id)
        total = self.session.scalar(select(func.count()).select_from(stmt.subquery())) or 0
        rows = self.session.scalars(
            stmt.order_by(Comment.created_at.desc(), Comment.id.desc()).offset(offset).limit(limit)
        ).all()
        return list(rows), int(total)

    def add(self, comment: Comment) -> Comment:
        self.session.add(comment)
        self.session.flush()
        return comment

    def delete(self, comment: Comment) -> None:
        self.session.delete(comment)
        self.session.flush()

    def delete_for_beat(self, beat_id: int) -> int:
        """Delete every comment on a beat and return how many were removed."""
        result = self.session.execute(delete(Comment).where(Comment.beat_id == beat_id))
        return result.rowcount or 0
