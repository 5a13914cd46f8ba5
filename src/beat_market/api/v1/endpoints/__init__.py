"""API endpoint modules for version 1."""

from .auth import router as auth_router
from .beats import router as beats_router
from .comments import router as comments_router
from .profile import router as profile_router
from .users import router as users_router

__all__ = [
    "auth_router",
    "beats_router",
    "comments_router",
    "profile_router",
    "users_router",
]
