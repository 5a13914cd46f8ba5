"""Beat catalogue operations: listing, creation, edits and guarded deletion."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from decimal import Decimal
from typing import Any

from sqlalchemy.orm import Session

from beat_market.core.errors import NotFoundError, ValidationError
from beat_market.core.money import to_money
from beat_market.db.time import utcnow
from beat_market.db.transaction import run_in_transaction
from beat_market.models import Beat, User
from beat_market.repositories import BeatRepository, CommentRepository, RatingRepository
from beat_market.services import policy

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = frozenset(
    {"title", "author_display_name", "price", "description", "image_ref", "audio_ref"}
)


@dataclass(frozen=True)
class BeatPage:
    items: list[Beat]
    total: int
    page: int
    total_pages: int


def _checked_price(value: Decimal | int | str | float) -> Decimal:
    price = to_money(value, field="price")
    if price < 0:
        raise ValidationError("price must not be negative")
    return price


def get_beat(db: Session, beat_id: int) -> Beat:
    """Return a beat or raise ``NotFoundError``."""
    beat = BeatRepository(db).get_by_id(beat_id)
    if beat is None:
        raise NotFoundError("beat")
    return beat


def list_beats(
    db: Session,
    *,
    search: str | None = None,
    tag: str | None = None,
    owner_user_id: int | None = None,
    page: int = 1,
    limit: int = 20,
) -> BeatPage:
    """Return a page of beats, newest first."""
    page = max(page, 1)
    items, total = BeatRepository(db).search(
        search=search,
        tag=tag,
        owner_user_id=owner_user_id,
        offset=(page - 1) * limit,
        limit=limit,
    )
    return BeatPage(
        items=items,
        total=total,
        page=page,
        total_pages=math.ceil(total / limit) if limit else 0,
    )


def create_beat(
    db: Session,
    owner: User,
    *,
    title: str,
    price: Decimal | int | str | float,
    author_display_name: str | None = None,
    description: str = "",
    tags: list[str] | None = None,
    image_ref: str = "",
    audio_ref: str = "",
) -> Beat:
    """List a new beat owned by ``owner``."""
    checked_price = _checked_price(price)
    if not title.strip():
        raise ValidationError("title must not be empty")

    def work(db: Session) -> Beat:
        now = utcnow()
        beat = Beat(
            title=title.strip(),
            author_display_name=(author_display_name or owner.username).strip(),
            price=checked_price,
            description=description,
            image_ref=image_ref,
            audio_ref=audio_ref,
            owner_user_id=owner.id,
            created_at=now,
            updated_at=now,
        )
        beat.set_tags(tags or [])
        return BeatRepository(db).add(beat)

    beat = run_in_transaction(db, work)
    logger.info("User %s listed beat %s", owner.id, beat.id)
    return beat


def update_beat(db: Session, principal: User, beat_id: int, changes: dict[str, Any]) -> Beat:
    """Apply a partial update to a beat the principal may modify.

    Existing ledger entries keep the price they were bought at.
    """
    unknown = set(changes) - EDITABLE_FIELDS - {"tags"}
    if unknown:
        raise ValidationError(f"cannot update fields: {', '.join(sorted(unknown))}")
    nulled = sorted(key for key, value in changes.items() if value is None and key != "tags")
    if nulled:
        raise ValidationError(f"fields must not be null: {', '.join(nulled)}")

    def work(db: Session) -> Beat:
        beat = get_beat(db, beat_id)
        policy.ensure_can_modify_beat(principal, beat)
        for key, value in changes.items():
            if key == "tags":
                beat.set_tags(value or [])
            elif key == "price":
                beat.price = _checked_price(value)
            elif key == "title":
                if not str(value).strip():
                    raise ValidationError("title must not be empty")
                beat.title = str(value).strip()
            else:
                setattr(beat, key, value)
        beat.updated_at = utcnow()
        db.flush()
        return beat

    return run_in_transaction(db, work)


def delete_beat(db: Session, principal: User, beat_id: int) -> None:
    """Delete an unsold beat along with its ratings, comments and tags.

    Raises:
        NotFoundError: The beat does not exist.
        AuthorizationError: The principal is neither owner nor admin.
        ConflictError: The beat has been purchased at least once.
    """

    def work(db: Session) -> None:
        beat = get_beat(db, beat_id)
        policy.ensure_can_modify_beat(principal, beat)
        policy.ensure_beat_deletable(db, beat)
        ratings = RatingRepository(db).delete_for_beat(beat.id)
        comments = CommentRepository(db).delete_for_beat(beat.id)
        BeatRepository(db).delete(beat)
        logger.info(
            "Beat %s deleted by user %s (%d ratings, %d comments removed)",
            beat_id,
            principal.id,
            ratings,
            comments,
        )

    run_in_transaction(db, work)
