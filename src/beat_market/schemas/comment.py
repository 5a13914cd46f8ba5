"""Comment-related Pydantic schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from .common import PageInfo


class CommentCreate(BaseModel):
    beat_id: int
    text: str = Field(..., min_length=1, max_length=2000)


class CommentUpdate(BaseModel):
    text: str = Field(..., min_length=1, max_length=2000)


class CommentResponse(BaseModel):
    id: int
    beat_id: int
    user_id: int
    author_username: str
    text: str
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class CommentListResponse(PageInfo):
    comments: list[CommentResponse]
