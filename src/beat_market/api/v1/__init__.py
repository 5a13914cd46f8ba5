"""Version 1 API endpoints."""

from .endpoints import (
    auth_router,
    beats_router,
    comments_router,
    profile_router,
    users_router,
)

__all__ = [
    "auth_router",
    "beats_router",
    "comments_router",
    "profile_router",
    "users_router",
]
