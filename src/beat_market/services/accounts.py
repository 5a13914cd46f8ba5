"""Account registration, login and profile helpers."""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from beat_market.core import security
from beat_market.core.errors import (
    AuthenticationError,
    ConflictError,
    NotFoundError,
    ValidationError,
)
from beat_market.core.settings import settings
from beat_market.db.transaction import run_in_transaction
from beat_market.models import Beat, User
from beat_market.repositories import BeatRepository, UserRepository

__all__ = [
    "PublicProfile",
    "authenticate",
    "ensure_platform_account",
    "get_public_profile",
    "get_user",
    "register_user",
    "update_profile",
]

logger = logging.getLogger(__name__)

PROFILE_FIELDS = frozenset({"bio", "photo_ref"})


@dataclass(frozen=True)
class PublicProfile:
    user: User
    beats: list[Beat]
    total_beats: int
    page: int
    total_pages: int


def _reserved_usernames() -> set[str]:
    """Names tied to privileged accounts; never handed out by registration."""
    return {name for name in (settings.platform_username, settings.admin_username) if name}


def get_user(db: Session, user_id: int) -> User:
    """Return a single user by primary key or raise ``NotFoundError``."""
    user = UserRepository(db).get_by_id(user_id)
    if user is None:
        raise NotFoundError("user")
    return user


def register_user(db: Session, username: str, password: str) -> User:
    """Persist a new user with a hashed password."""
    name = username.strip()
    if not name:
        raise ValidationError("username must not be empty")
    if not password:
        raise ValidationError("password must not be empty")
    if name in _reserved_usernames():
        raise ConflictError("username already taken")
    password_hash = security.hash_password(password)

    def work(db: Session) -> User:
        repo = UserRepository(db)
        if repo.get_by_username(name) is not None:
            raise ConflictError("username already taken")
        try:
            return repo.add(User(username=name, password_hash=password_hash))
        except IntegrityError as err:
            raise ConflictError("username already taken") from err

    user = run_in_transaction(db, work)
    logger.info("Registered user %s (%s)", user.id, user.username)
    return user


def authenticate(db: Session, username: str, password: str) -> User:
    """Return the user matching the credentials.

    Raises:
        AuthenticationError: Unknown username or wrong password; the message
            does not reveal which.
    """
    user = UserRepository(db).get_by_username(username.strip())
    if user is None or not security.verify_password(password, user.password_hash):
        raise AuthenticationError("invalid username or password")
    return user


def update_profile(db: Session, user: User, **changes: str) -> User:
    """Apply partial updates to the caller's bio or photo reference."""
    unknown = set(changes) - PROFILE_FIELDS
    if unknown:
        raise ValidationError(f"cannot update fields: {', '.join(sorted(unknown))}")

    def work(db: Session) -> User:
        for key, value in changes.items():
            setattr(user, key, value)
        db.add(user)
        db.flush()
        return user

    return run_in_transaction(db, work)


def get_public_profile(db: Session, username: str, *, page: int = 1, limit: int = 20) -> PublicProfile:
    """Return a user's public data and a page of their beats."""
    user = UserRepository(db).get_by_username(username)
    if user is None:
        raise NotFoundError("user")
    page = max(page, 1)
    beats, total = BeatRepository(db).search(
        owner_user_id=user.id, offset=(page - 1) * limit, limit=limit
    )
    return PublicProfile(
        user=user,
        beats=beats,
        total_beats=total,
        page=page,
        total_pages=math.ceil(total / limit) if limit else 0,
    )


def ensure_platform_account(db: Session) -> User:
    """Create the commission-collecting account if it does not exist yet.

    The account gets an unusable random password; nobody logs into it.
    """
    repo = UserRepository(db)
    existing = repo.get_by_username(settings.platform_username)
    if existing is not None:
        return existing

    def work(db: Session) -> User:
        return repo.add(
            User(
                username=settings.platform_username,
                password_hash=security.hash_password(security.random_secret()),
            )
        )

    user = run_in_transaction(db, work)
    logger.info("Created platform account %s", settings.platform_username)
    return user
