"""Beat catalogue, rating and purchase endpoints."""

from __future__ import annotations

from typing import Literal

from fastapi import APIRouter, Query, status

from beat_market.schemas.beat import (
    BeatCreate,
    BeatListResponse,
    BeatResponse,
    BeatUpdate,
    PopularBeatResponse,
    RatedBeatResponse,
    RatedBeatsResponse,
)
from beat_market.schemas.purchase import PurchaseResponse, TransactionResponse
from beat_market.schemas.rating import RatingCreate, RatingResponse, RatingSummaryResponse
from beat_market.services import PurchaseService, RatingService, beats, rank_popular

from ..dependencies import CurrentUserDep, OptionalUserDep, SessionDep

router = APIRouter(prefix="/beats", tags=["beats"])


def _beat_page(page: beats.BeatPage) -> BeatListResponse:
    return BeatListResponse(
        beats=[BeatResponse.model_validate(beat) for beat in page.items],
        total=page.total,
        page=page.page,
        total_pages=page.total_pages,
    )


@router.get("/", response_model=BeatListResponse)
def list_beats(
    db: SessionDep,
    search: str | None = Query(None, max_length=200),
    tag: str | None = Query(None, max_length=64),
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
) -> BeatListResponse:
    """List beats newest first, optionally filtered by text or tag."""
    return _beat_page(beats.list_beats(db, search=search, tag=tag, page=page, limit=limit))


@router.get("/popular", response_model=list[PopularBeatResponse])
def popular_beats(
    db: SessionDep,
    period: Literal["day", "month", "year"] = Query("month"),
) -> list[PopularBeatResponse]:
    """Top-rated beats created within the last day, month or year."""
    return [
        PopularBeatResponse(
            beat=BeatResponse.model_validate(entry.beat),
            average_rating=entry.average_rating,
            ratings_count=entry.ratings_count,
        )
        for entry in rank_popular(db, period)
    ]


@router.get("/mine", response_model=BeatListResponse)
def my_beats(
    current_user: CurrentUserDep,
    db: SessionDep,
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
) -> BeatListResponse:
    """List the caller's own beats."""
    return _beat_page(
        beats.list_beats(db, owner_user_id=current_user.id, page=page, limit=limit)
    )


@router.get("/rated", response_model=RatedBeatsResponse)
def rated_beats(
    current_user: CurrentUserDep,
    db: SessionDep,
    search: str | None = Query(None, max_length=200),
    score: int | None = Query(None, description="Only beats the caller rated at least this"),
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
) -> RatedBeatsResponse:
    """List beats the caller has rated."""
    result = RatingService(db).list_rated_beats(
        current_user.id, min_score=score, search=search, page=page, limit=limit
    )
    return RatedBeatsResponse(
        beats=[
            RatedBeatResponse(
                beat=BeatResponse.model_validate(item.beat),
                user_rating=item.user_rating,
                average_rating=item.average_rating,
                ratings_count=item.ratings_count,
            )
            for item in result.items
        ],
        total=result.total,
        page=result.page,
        total_pages=result.total_pages,
    )


@router.get("/{beat_id}", response_model=BeatResponse)
def get_beat(beat_id: int, db: SessionDep) -> BeatResponse:
    return BeatResponse.model_validate(beats.get_beat(db, beat_id))


@router.post("/", status_code=status.HTTP_201_CREATED, response_model=BeatResponse)
def create_beat(payload: BeatCreate, current_user: CurrentUserDep, db: SessionDep) -> BeatResponse:
    """List a new beat owned by the caller."""
    beat = beats.create_beat(db, current_user, **payload.model_dump())
    return BeatResponse.model_validate(beat)


@router.put("/{beat_id}", response_model=BeatResponse)
def update_beat(
    beat_id: int,
    payload: BeatUpdate,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> BeatResponse:
    """Edit a beat; only its owner or an admin may do so."""
    beat = beats.update_beat(db, current_user, beat_id, payload.model_dump(exclude_unset=True))
    return BeatResponse.model_validate(beat)


@router.delete("/{beat_id}")
def delete_beat(beat_id: int, current_user: CurrentUserDep, db: SessionDep) -> dict[str, str]:
    """Delete an unsold beat together with its ratings and comments."""
    beats.delete_beat(db, current_user, beat_id)
    return {"status": "deleted"}


@router.post("/{beat_id}/rating", response_model=RatingResponse)
def rate_beat(
    beat_id: int,
    payload: RatingCreate,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> RatingResponse:
    """Rate a beat from 1 to 5; rating again replaces the previous score."""
    rating = RatingService(db).submit_rating(beat_id, current_user.id, payload.value)
    return RatingResponse.model_validate(rating)


@router.get("/{beat_id}/rating", response_model=RatingSummaryResponse)
def rating_summary(beat_id: int, current_user: OptionalUserDep, db: SessionDep) -> RatingSummaryResponse:
    """Average rating and count, plus the caller's own score if signed in."""
    summary = RatingService(db).get_rating_summary(
        beat_id, current_user.id if current_user else None
    )
    return RatingSummaryResponse.model_validate(summary)


@router.post("/{beat_id}/purchase", response_model=PurchaseResponse)
def purchase_beat(beat_id: int, current_user: CurrentUserDep, db: SessionDep) -> PurchaseResponse:
    """Buy a beat with the caller's balance."""
    result = PurchaseService(db).purchase(beat_id, current_user.id)
    return PurchaseResponse(
        transaction=TransactionResponse.model_validate(result.transaction),
        new_balance=result.buyer_new_balance,
    )
