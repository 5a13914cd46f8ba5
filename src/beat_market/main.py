# src/beat_market/main.py
"""Main entry point for the Beat Market application."""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware

from beat_market.api.v1 import (
    auth_router,
    beats_router,
    comments_router,
    profile_router,
    users_router,
)
from beat_market.api.v1.errors import register_error_handlers
from beat_market.core.settings import settings
from beat_market.db.session import SessionLocal
from beat_market.services.accounts import ensure_platform_account

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    if settings.bootstrap_platform_account:
        db = SessionLocal()
        try:
            ensure_platform_account(db)
        finally:
            db.close()
    logger.info("%s %s started", settings.app_name, settings.app_version)
    yield


# Initialize FastAPI app
app = FastAPI(
    title="Beat Market API",
    description="Marketplace for buying and selling beats",
    version=settings.app_version,
    lifespan=lifespan,
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=settings.cors_allow_credentials,
    allow_methods=settings.cors_allow_methods,
    allow_headers=settings.cors_allow_headers,
)

# Add GZip middleware for compression
app.add_middleware(GZipMiddleware)

register_error_handlers(app)

# Include API routers
app.include_router(auth_router, prefix="/api/v1")
app.include_router(beats_router, prefix="/api/v1")
app.include_router(comments_router, prefix="/api/v1")
app.include_router(profile_router, prefix="/api/v1")
app.include_router(users_router, prefix="/api/v1")


@app.get("/health")
async def health_check() -> dict[str, str]:
    """Health check endpoint to verify the service is running."""
    return {"status": "ok"}


@app.get("/")
async def root() -> dict[str, str]:
    """Root endpoint with basic information about the API."""
    return {
        "name": "Beat Market API",
        "version": settings.app_version,
        "docs": "/docs",
        "redoc": "/redoc",
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("beat_market.main:app", host="0.0.0.0", port=8000, reload=settings.debug)
