"""Translate core errors into HTTP responses."""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from beat_market.core.errors import (
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    InsufficientFundsError,
    MarketError,
    NotFoundError,
    StorageError,
    ValidationError,
)

logger = logging.getLogger(__name__)

STATUS_BY_ERROR: dict[type[MarketError], int] = {
    NotFoundError: status.HTTP_404_NOT_FOUND,
    ValidationError: status.HTTP_400_BAD_REQUEST,
    ConflictError: status.HTTP_409_CONFLICT,
    InsufficientFundsError: status.HTTP_402_PAYMENT_REQUIRED,
    AuthorizationError: status.HTTP_403_FORBIDDEN,
    AuthenticationError: status.HTTP_401_UNAUTHORIZED,
    StorageError: status.HTTP_503_SERVICE_UNAVAILABLE,
}


def status_for(error: MarketError) -> int:
    """Return the HTTP status code for a core error."""
    for error_type in type(error).__mro__:
        if error_type in STATUS_BY_ERROR:
            return STATUS_BY_ERROR[error_type]
    return status.HTTP_500_INTERNAL_SERVER_ERROR


async def market_error_handler(request: Request, exc: MarketError) -> JSONResponse:
    code = status_for(exc)
    if code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.detail)
    return JSONResponse(status_code=code, content={"detail": exc.detail, "code": exc.code})


def register_error_handlers(app: FastAPI) -> None:
    """Install the core error handler on an application."""
    app.add_exception_handler(MarketError, market_error_handler)
