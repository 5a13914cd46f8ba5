"""Ownership and authorization rules for beats and comments."""

from __future__ import annotations

from sqlalchemy.orm import Session

from beat_market.core.errors import AuthorizationError, ConflictError
from beat_market.core.settings import settings
from beat_market.models import Beat, Comment, User
from beat_market.repositories import TransactionRepository


def is_admin(principal: User) -> bool:
    """Return True if the principal holds platform-wide privileges.

    The ``is_admin`` flag is authoritative. The configured admin username is
    honoured as well so the single privileged account the mobile client
    relies on keeps working.
    """
    if principal.is_admin:
        return True
    return bool(settings.admin_username) and principal.username == settings.admin_username


def can_modify_beat(principal: User, beat: Beat) -> bool:
    """Owner or admin may edit or delete a beat."""
    return principal.id == beat.owner_user_id or is_admin(principal)


def can_modify_comment(principal: User, comment: Comment, beat: Beat | None = None) -> bool:
    """Comment author, owner of the commented beat, or admin."""
    if principal.id == comment.user_id or is_admin(principal):
        return True
    return beat is not None and beat.id == comment.beat_id and principal.id == beat.owner_user_id


def ensure_can_modify_beat(principal: User, beat: Beat) -> None:
    if not can_modify_beat(principal, beat):
        raise AuthorizationError("not allowed to modify this beat")


def ensure_can_modify_comment(principal: User, comment: Comment, beat: Beat | None = None) -> None:
    if not can_modify_comment(principal, comment, beat):
        raise AuthorizationError("not allowed to modify this comment")


def ensure_beat_deletable(db: Session, beat: Beat) -> None:
    """Refuse to delete a beat that is referenced by the purchase ledger."""
    if TransactionRepository(db).count_for_beat(beat.id) > 0:
        raise ConflictError("has purchases")
