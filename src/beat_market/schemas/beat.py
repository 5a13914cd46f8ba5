"""Beat-related Pydantic schemas."""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field

from .common import Money, PageInfo


class BeatCreate(BaseModel):
    """Schema for listing a new beat."""

    title: str = Field(..., min_length=1, max_length=200)
    author_display_name: str | None = Field(None, max_length=200)
    price: Decimal = Field(..., description="Price with at most two decimals")
    description: str = ""
    tags: list[str] = Field(default_factory=list)
    image_ref: str = ""
    audio_ref: str = ""


class BeatUpdate(BaseModel):
    """Partial update of a beat; omitted fields stay unchanged."""

    title: str | None = Field(None, min_length=1, max_length=200)
    author_display_name: str | None = Field(None, max_length=200)
    price: Decimal | None = None
    description: str | None = None
    tags: list[str] | None = None
    image_ref: str | None = None
    audio_ref: str | None = None


class BeatResponse(BaseModel):
    """Schema for beat information returned by the API."""

    id: int
    title: str
    author_display_name: str
    price: Money
    description: str
    tags: list[str]
    image_ref: str
    audio_ref: str
    owner_user_id: int
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class BeatListResponse(PageInfo):
    beats: list[BeatResponse]


class PopularBeatResponse(BaseModel):
    beat: BeatResponse
    average_rating: float
    ratings_count: int


class RatedBeatResponse(BaseModel):
    beat: BeatResponse
    user_rating: int
    average_rating: float
    ratings_count: int


class RatedBeatsResponse(PageInfo):
    beats: list[RatedBeatResponse]
