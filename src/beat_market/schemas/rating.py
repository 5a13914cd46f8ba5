"""Rating-related Pydantic schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class RatingCreate(BaseModel):
    """Score submitted for a beat.

    The 1..5 range is enforced by the rating service so out-of-range values
    surface as a validation error rather than a schema error.
    """

    value: int = Field(..., description="Integer score from 1 to 5")


class RatingResponse(BaseModel):
    id: int
    beat_id: int
    user_id: int
    value: int
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class RatingSummaryResponse(BaseModel):
    user_rating: int
    average_rating: float
    ratings_count: int

    model_config = ConfigDict(from_attributes=True)
