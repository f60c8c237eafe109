"""
Pydantic Schemas Package

This package contains Pydantic models for request/response validation.

Schema Naming Convention:
- XxxBase: Shared fields between create/update
- XxxCreate: Fields required when creating a new record
- XxxUpdate: Fields allowed when updating
- XxxResponse: Fields returned in API responses
"""

from app.schemas.book import BookResponse
from app.schemas.review import (
    BookRatingStats,
    ReviewBase,
    ReviewCreate,
    ReviewListResponse,
    ReviewResponse,
    ReviewUpdate,
)

__all__ = [
    "BookResponse",
    "BookRatingStats",
    "ReviewBase",
    "ReviewCreate",
    "ReviewListResponse",
    "ReviewResponse",
    "ReviewUpdate",
]
