"""Public user profile endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Query

from beat_market.schemas.beat import BeatResponse
from beat_market.schemas.user import PublicProfileResponse, UserPublic
from beat_market.services import accounts

from ..dependencies import SessionDep

router = APIRouter(prefix="/users", tags=["users"])


@router.get("/by-username/{username}", response_model=PublicProfileResponse)
def get_public_profile(
    username: str,
    db: SessionDep,
    page: int = Query(1, ge=1),
) -> PublicProfileResponse:
    """Return a user's public profile with a page of their beats."""
    profile = accounts.get_public_profile(db, username, page=page)
    return PublicProfileResponse(
        user=UserPublic.model_validate(profile.user),
        beats=[BeatResponse.model_validate(beat) for beat in profile.beats],
        total=profile.total_beats,
        page=profile.page,
        total_pages=profile.total_pages,
    )
