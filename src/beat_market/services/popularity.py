"""Time-windowed popularity ranking of beats.

The ranking is expressed as one SQL statement whose parts mirror the logical
stages: window, filter, join/group, sort, limit and project.
"""

from __future__ import annotations

import calendar
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Literal

from sqlalchemy import case, func, select
from sqlalchemy.orm import Session

from beat_market.core.errors import ValidationError
from beat_market.core.money import average_rating
from beat_market.core.settings import settings
from beat_market.db.time import as_utc, utcnow
from beat_market.models import Beat, Rating

Period = Literal["day", "month", "year"]
PERIODS: tuple[str, ...] = ("day", "month", "year")


@dataclass(frozen=True)
class PopularBeat:
    beat: Beat
    average_rating: float
    ratings_count: int


def _shift_months(moment: datetime, months: int) -> datetime:
    """Move ``moment`` back by whole calendar months, clamping the day.

    March 31 minus one month is the last day of February.
    """
    month_index = moment.year * 12 + (moment.month - 1) - months
    year, month = divmod(month_index, 12)
    month += 1
    day = min(moment.day, calendar.monthrange(year, month)[1])
    return moment.replace(year=year, month=month, day=day)


def window_start(period: str, now: datetime) -> datetime:
    """Return ``now`` minus one day, calendar month or calendar year."""
    if period == "day":
        return now - timedelta(days=1)
    if period == "month":
        return _shift_months(now, 1)
    if period == "year":
        return _shift_months(now, 12)
    raise ValidationError(f"period must be one of {', '.join(PERIODS)}")


def rank_popular(
    db: Session,
    period: str,
    *,
    now: datetime | None = None,
    limit: int | None = None,
    include_unrated: bool | None = None,
) -> list[PopularBeat]:
    """Rank beats created within the window by average rating, then count.

    Args:
        db: Database session.
        period: One of ``"day"``, ``"month"`` or ``"year"``.
        now: Reference time; defaults to the current UTC time.
        limit: Maximum entries; defaults to ``settings.popular_limit``.
        include_unrated: Whether beats without ratings appear (with average
            and count 0); defaults to ``settings.popular_include_unrated``.

    Returns:
        Entries ordered by ``(average_rating DESC, ratings_count DESC)``.
    """
    # window
    end = as_utc(now) if now is not None else utcnow()
    start = window_start(period, end)
    limit = limit if limit is not None else settings.popular_limit
    if include_unrated is None:
        include_unrated = settings.popular_include_unrated

    # join/group
    rating_total = func.coalesce(func.sum(Rating.value), 0).label("rating_total")
    rating_count = func.count(Rating.id).label("rating_count")
    # Half-up average in tenths; equals the projected average_rating * 10.
    summed = func.coalesce(func.sum(Rating.value), 0)
    counted = func.count(Rating.id)
    mean_tenths = case(
        (counted > 0, (20 * summed + counted) // (2 * counted)),
        else_=0,
    )
    stmt = (
        select(Beat, rating_total, rating_count)
        .outerjoin(Rating, Rating.beat_id == Beat.id)
        # filter
        .where(Beat.created_at >= start, Beat.created_at <= end)
        .group_by(Beat.id)
    )
    if not include_unrated:
        stmt = stmt.having(func.count(Rating.id) > 0)

    # sort + limit
    stmt = stmt.order_by(mean_tenths.desc(), rating_count.desc(), Beat.id.asc()).limit(limit)

    # project
    return [
        PopularBeat(
            beat=beat,
            average_rating=average_rating(int(total), int(count)),
            ratings_count=int(count),
        )
        for beat, total, count in db.execute(stmt).all()
    ]
