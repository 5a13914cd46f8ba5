"""Data access helpers for user accounts."""
from __future__ import annotations

from collections.abc import Iterable

from sqlalchemy import select
from sqlalchemy.orm import Session

from beat_market.models.user import User

__all__ = ["UserRepository"]


class UserRepository:
    """Thin wrapper around database access for user entities."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def get_by_id(self, user_id: int) -> User | None:
        """Return a user by primary key."""
        return self.session.get(User, user_id)

    def get_by_username(self, username: str) -> User | None:
        """Return a user by unique username."""
        return self.session.scalars(select(User).where(User.username == username)).first()

    def lock_many(self, user_ids: Iterable[int]) -> dict[int, User]:
        """Load and row-lock users, always in ascending id order.

        A consistent lock order keeps two purchases touching the same pair of
        accounts from deadlocking each other. Rows are re-read so balances
        reflect the committed state at lock time.
        """
        ids = sorted(set(user_ids))
        rows = self.session.scalars(
            select(User)
            .where(User.id.in_(ids))
            .order_by(User.id)
            .with_for_update()
            .execution_options(populate_existing=True)
        ).all()
        return {user.id: user for user in rows}

    def add(self, user: User) -> User:
        """Stage a new user and flush to obtain its id."""
        self.session.add(user)
        self.session.flush()
        return user
