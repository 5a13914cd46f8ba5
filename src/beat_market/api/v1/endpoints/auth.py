"""Authentication endpoints for the Beat Market API."""

from __future__ import annotations

from fastapi import APIRouter, status

from beat_market.core.security import create_access_token
from beat_market.schemas.user import LoginRequest, LoginResponse, RegisterRequest, UserResponse
from beat_market.services import accounts

from ..dependencies import SessionDep

router = APIRouter(prefix="/auth", tags=["authentication"])


@router.post("/register", status_code=status.HTTP_201_CREATED, response_model=UserResponse)
def register(payload: RegisterRequest, db: SessionDep) -> UserResponse:
    """Create an account with a username and password."""
    user = accounts.register_user(db, payload.username, payload.password)
    return UserResponse.model_validate(user)


@router.post("/login", response_model=LoginResponse)
def login(payload: LoginRequest, db: SessionDep) -> LoginResponse:
    """Exchange credentials for a bearer token."""
    user = accounts.authenticate(db, payload.username, payload.password)
    return LoginResponse(
        access_token=create_access_token(user.id),
        user=UserResponse.model_validate(user),
    )
