"""Typed failures raised by the marketplace core.

Every business-rule violation maps to exactly one subclass of
:class:`MarketError`. The HTTP layer turns them into status codes; the
services never return error values.
"""

from __future__ import annotations


class MarketError(Exception):
    """Base class for all marketplace failures.

    Attributes:
        code: Stable machine-readable identifier of the failure kind.
        detail: Human-readable message safe to show to API clients.
    """

    code = "market_error"

    def __init__(self, detail: str | None = None) -> None:
        self.detail = detail or self.code.replace("_", " ")
        super().__init__(self.detail)


class NotFoundError(MarketError):
    """Raised when a referenced entity does not exist."""

    code = "not_found"

    def __init__(self, entity: str) -> None:
        self.entity = entity
        super().__init__(f"{entity} not found")


class ValidationError(MarketError):
    """Raised for malformed input such as an out-of-range rating."""

    code = "validation_error"


class ConflictError(MarketError):
    """Raised when an operation collides with existing state."""

    code = "conflict"


class InsufficientFundsError(MarketError):
    """Raised when the buyer balance does not cover the beat price."""

    code = "insufficient_funds"

    def __init__(self, detail: str = "insufficient funds") -> None:
        super().__init__(detail)


class AuthorizationError(MarketError):
    """Raised when the principal lacks rights over a resource."""

    code = "forbidden"


class AuthenticationError(MarketError):
    """Raised when credentials are missing or invalid."""

    code = "unauthenticated"


class StorageError(MarketError):
    """Raised when the store keeps failing after retries."""

    code = "storage_unavailable"
