# tests/conftest.py
from __future__ import annotations

import os
from collections.abc import Callable, Generator, Iterator
from datetime import datetime
from decimal import Decimal
from itertools import count

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("BOOTSTRAP_PLATFORM_ACCOUNT", "false")
os.environ.setdefault("DB_RETRY_BASE_DELAY", "0")

from beat_market.core.security import create_access_token, hash_password
from beat_market.core.settings import settings
from beat_market.db.session import Base, build_engine
from beat_market.db.session import get_db as app_get_session
from beat_market.db.time import utcnow
from beat_market.main import app as fastapi_app
from beat_market.models import Beat, User

TEST_DB_URL = "sqlite://"
TEST_PASSWORD = "correct horse battery staple"

_USER_COUNTER = count(1)
_BEAT_COUNTER = count(1)
# bcrypt is slow on purpose; hash the shared test password once.
_TEST_PASSWORD_HASH = hash_password(TEST_PASSWORD)


@pytest.fixture(scope="session")
def engine() -> Generator[Engine, None, None]:
    engine = build_engine(TEST_DB_URL, poolclass=StaticPool)
    Base.metadata.create_all(bind=engine)
    try:
        yield engine
    finally:
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture()
def db_session(engine: Engine) -> Iterator[Session]:
    connection = engine.connect()
    transaction = connection.begin()
    # Session commits and rollbacks only touch savepoints inside the outer
    # connection transaction, which is rolled back at teardown.
    SessionLocal = sessionmaker(
        bind=connection,
        autocommit=False,
        autoflush=False,
        expire_on_commit=False,
        join_transaction_mode="create_savepoint",
    )
    session = SessionLocal()

    try:
        yield session
    finally:
        session.close()

        if transaction.is_active:
            transaction.rollback()
        connection.close()

        # Ensure each test sees a clean database even if commits occurred.
        with engine.begin() as cleanup_conn:
            for table in reversed(Base.metadata.sorted_tables):
                cleanup_conn.execute(table.delete())


@pytest.fixture(scope="session")
def app() -> FastAPI:
    return fastapi_app


@pytest.fixture(autouse=True)
def override_session_dependency(app: FastAPI, db_session: Session) -> Iterator[None]:
    def _get_session_override() -> Generator[Session, None, None]:
        yield db_session

    app.dependency_overrides[app_get_session] = _get_session_override
    try:
        yield
    finally:
        app.dependency_overrides.pop(app_get_session, None)


@pytest.fixture()
def client(app: FastAPI) -> Iterator[TestClient]:
    with TestClient(app, base_url="http://test") as test_client:
        yield test_client


@pytest.fixture()
def make_user(db_session: Session) -> Callable[..., User]:
    """Return a factory that persists users with a known password."""

    def _make_user(
        username: str | None = None,
        *,
        balance: str | Decimal = "0.00",
        is_admin: bool = False,
    ) -> User:
        user = User(
            username=username or f"user{next(_USER_COUNTER)}",
            password_hash=_TEST_PASSWORD_HASH,
            balance=Decimal(balance),
            is_admin=is_admin,
        )
        db_session.add(user)
        db_session.flush()
        db_session.refresh(user)
        return user

    return _make_user


@pytest.fixture()
def make_beat(db_session: Session) -> Callable[..., Beat]:
    """Return a factory that persists beats owned by a given user."""

    def _make_beat(
        owner: User,
        *,
        price: str | Decimal = "100.00",
        title: str | None = None,
        tags: list[str] | None = None,
        created_at: datetime | None = None,
    ) -> Beat:
        now = created_at or utcnow()
        beat = Beat(
            title=title or f"Beat {next(_BEAT_COUNTER)}",
            author_display_name=owner.username,
            price=Decimal(price),
            description="Test beat",
            image_ref="assets/cover.png",
            audio_ref="assets/loop.mp3",
            owner_user_id=owner.id,
            created_at=now,
            updated_at=now,
        )
        beat.set_tags(tags or ["trap"])
        db_session.add(beat)
        db_session.flush()
        db_session.refresh(beat)
        return beat

    return _make_beat


@pytest.fixture()
def platform_account(make_user: Callable[..., User]) -> User:
    """The commission-collecting account, starting at zero."""
    return make_user(settings.platform_username)


@pytest.fixture()
def seller(make_user: Callable[..., User]) -> User:
    return make_user("seller")


@pytest.fixture()
def buyer(make_user: Callable[..., User]) -> User:
    return make_user("buyer", balance="150.00")


@pytest.fixture()
def admin_user(make_user: Callable[..., User]) -> User:
    return make_user("moderator", is_admin=True)


@pytest.fixture()
def beat(make_beat: Callable[..., Beat], seller: User) -> Beat:
    """A 100.00 beat listed by ``seller``."""
    return make_beat(seller, price="100.00")


@pytest.fixture()
def auth_headers() -> Callable[[User], dict[str, str]]:
    """Return a helper building authorization headers for a user."""

    def _auth_headers(user: User) -> dict[str, str]:
        return {"Authorization": f"Bearer {create_access_token(user.id)}"}

    return _auth_headers
