"""Comment operations on beats."""
from __future__ import annotations

import math
from dataclasses import dataclass

from sqlalchemy.orm import Session

from beat_market.core.errors import NotFoundError, ValidationError
from beat_market.db.time import utcnow
from beat_market.db.transaction import run_in_transaction
from beat_market.models import Comment, User
from beat_market.repositories import BeatRepository, CommentRepository
from beat_market.services import policy

__all__ = [
    "CommentPage",
    "add_comment",
    "delete_comment",
    "edit_comment",
    "list_comments",
]


@dataclass(frozen=True)
class CommentPage:
    items: list[Comment]
    total: int
    page: int
    total_pages: int


def _clean_text(text: str) -> str:
    cleaned = text.strip()
    if not cleaned:
        raise ValidationError("comment text must not be empty")
    return cleaned


def list_comments(db: Session, beat_id: int, *, page: int = 1, limit: int = 10) -> CommentPage:
    """Return a page of comments on a beat, newest first."""
    page = max(page, 1)
    items, total = CommentRepository(db).list_for_beat(
        beat_id, offset=(page - 1) * limit, limit=limit
    )
    return CommentPage(
        items=items,
        total=total,
        page=page,
        total_pages=math.ceil(total / limit) if limit else 0,
    )


def add_comment(db: Session, author: User, beat_id: int, text: str) -> Comment:
    """Attach a comment by ``author`` to an existing beat."""
    body = _clean_text(text)

    def work(db: Session) -> Comment:
        if BeatRepository(db).get_by_id(beat_id) is None:
            raise NotFoundError("beat")
        now = utcnow()
        return CommentRepository(db).add(
            Comment(
                beat_id=beat_id,
                user_id=author.id,
                author_username=author.username,
                text=body,
                created_at=now,
                updated_at=now,
            )
        )

    return run_in_transaction(db, work)


def _load_for_change(db: Session, principal: User, comment_id: int) -> Comment:
    comment = CommentRepository(db).get_by_id(comment_id)
    if comment is None:
        raise NotFoundError("comment")
    beat = BeatRepository(db).get_by_id(comment.beat_id)
    policy.ensure_can_modify_comment(principal, comment, beat)
    return comment


def edit_comment(db: Session, principal: User, comment_id: int, text: str) -> Comment:
    """Replace a comment's text if the principal may modify it."""
    body = _clean_text(text)

    def work(db: Session) -> Comment:
        comment = _load_for_change(db, principal, comment_id)
        comment.text = body
        comment.updated_at = utcnow()
        db.flush()
        return comment

    return run_in_transaction(db, work)


def delete_comment(db: Session, principal: User, comment_id: int) -> None:
    """Remove a comment if the principal may modify it."""

    def work(db: Session) -> None:
        comment = _load_for_change(db, principal, comment_id)
        CommentRepository(db).delete(comment)

    run_in_transaction(db, work)
