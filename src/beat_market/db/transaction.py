"""Atomic units of work with retry on transient storage failures."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from typing import TypeVar

from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session

from beat_market.core.errors import StorageError
from beat_market.core.settings import settings

logger = logging.getLogger(__name__)

T = TypeVar("T")


def run_in_transaction(
    db: Session,
    work: Callable[[Session], T],
    *,
    attempts: int | None = None,
    base_delay: float | None = None,
) -> T:
    """Run ``work`` as a single all-or-nothing unit and commit it.

    The work runs inside a savepoint so that any exception, business errors
    included, discards every change it made. Transient ``OperationalError``
    failures (lock contention, dropped connections) re-run the whole unit with
    exponential backoff; once the attempts are exhausted a ``StorageError``
    is raised. Any other exception propagates untouched and is never retried.

    Args:
        db: Session the unit of work runs on.
        work: Callable receiving the session and returning the unit's result.
        attempts: Override for ``settings.db_retry_attempts``.
        base_delay: Override for ``settings.db_retry_base_delay`` (seconds).

    Returns:
        Whatever ``work`` returned.
    """
    max_attempts = attempts if attempts is not None else settings.db_retry_attempts
    delay = base_delay if base_delay is not None else settings.db_retry_base_delay

    for attempt in range(1, max_attempts + 1):
        try:
            with db.begin_nested():
                result = work(db)
            db.commit()
            return result
        except OperationalError as exc:
            db.rollback()
            if attempt >= max_attempts:
                logger.error("Unit of work failed after %d attempts: %s", attempt, exc)
                raise StorageError("storage temporarily unavailable") from exc
            backoff = delay * (2 ** (attempt - 1))
            logger.warning(
                "Transient storage failure (attempt %d/%d), retrying in %.3fs: %s",
                attempt,
                max_attempts,
                backoff,
                exc,
            )
            time.sleep(backoff)

    raise StorageError("storage temporarily unavailable")  # pragma: no cover - loop always returns
