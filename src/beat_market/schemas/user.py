"""User-related Pydantic schemas."""

from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field

from .beat import BeatResponse
from .common import Money, PageInfo


class RegisterRequest(BaseModel):
    """Schema for account registration."""

    username: str = Field(..., min_length=1, max_length=64)
    password: str = Field(..., min_length=1, max_length=72)


class LoginRequest(BaseModel):
    username: str
    password: str


class UserPublic(BaseModel):
    """Fields of an account that anyone may see."""

    id: int
    username: str
    photo_ref: str
    bio: str

    model_config = ConfigDict(from_attributes=True)


class UserResponse(UserPublic):
    """The caller's own account, including balance."""

    balance: Money
    is_admin: bool


class LoginResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: UserResponse


class BioUpdate(BaseModel):
    bio: str = Field(..., max_length=2000)


class PhotoUpdate(BaseModel):
    photo_ref: str = Field(..., max_length=500, description="Blob-store reference of the photo")


class TopUpRequest(BaseModel):
    """Amount to credit to the caller's balance."""

    amount: Decimal = Field(..., description="Positive amount with at most two decimals")


class BalanceResponse(BaseModel):
    balance: Money


class PublicProfileResponse(PageInfo):
    user: UserPublic
    beats: list[BeatResponse]
