"""Shared Pydantic types for common API elements."""
from __future__ import annotations

from decimal import Decimal
from typing import Annotated

from pydantic import BaseModel, Field, PlainSerializer

# Money travels as a JSON number but stays a Decimal inside the application.
Money = Annotated[Decimal, PlainSerializer(float, return_type=float, when_used="json")]


class PageInfo(BaseModel):
    """Paging totals returned alongside list payloads."""

    total: int = Field(..., description="Number of matching items across all pages")
    page: int = Field(..., description="1-based page number")
    total_pages: int
