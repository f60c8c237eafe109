"""
Review Pydantic Schemas

Schemas:
- ReviewBase: Shared fields (rating, comment)
- ReviewCreate: Create a new review
- ReviewUpdate: Replace the rating/comment of an existing review
- ReviewResponse: Review data for API responses
- ReviewListResponse: List of reviews
- BookRatingStats: Rating aggregate and distribution for a book

Business Rules:
- Rating must be 1-5 (validated here and again by the service)
- Comment is at most 2000 characters
- The user_id in the body identifies the acting user
"""

import uuid
from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.models.review import COMMENT_MAX_LENGTH, RATING_MAX, RATING_MIN


class ReviewBase(BaseModel):
    """
    Base schema with shared review fields.

    Contains validation for:
    - Rating (must be 1-5)
    - Comment length
    """

    rating: int = Field(
        ...,
        ge=RATING_MIN,
        le=RATING_MAX,
        description="Rating from 1 to 5 stars",
        examples=[4, 5],
    )

    comment: str | None = Field(
        default=None,
        max_length=COMMENT_MAX_LENGTH,
        description="Optional review text",
        examples=["This book changed my perspective on..."],
    )

    @field_validator("comment")
    @classmethod
    def comment_must_not_be_blank(cls, v: str | None) -> str | None:
        """Store whitespace-only comments as no comment."""
        if v is not None and not v.strip():
            return None
        return v


class ReviewCreate(ReviewBase):
    """
    Schema for creating a new review.

    Example request body:
    {
        "user_id": "0b7c6c1e-4f0a-4a8e-9a55-6a5d3f1f2c11",
        "rating": 5,
        "comment": "One of the best books I've ever read..."
    }
    """

    user_id: uuid.UUID = Field(..., description="ID of the user writing the review")


class ReviewUpdate(ReviewBase):
    """
    Schema for updating a review.

    Rating and comment are replaced as a whole; an omitted comment clears
    it. user_id must be the review's owner.
    """

    user_id: uuid.UUID = Field(..., description="ID of the user requesting the update")


class ReviewResponse(ReviewBase):
    """Schema for review responses."""

    id: uuid.UUID = Field(..., description="Unique review identifier")
    book_id: uuid.UUID = Field(..., description="ID of the reviewed book")
    book_title: str = Field(..., description="Title of the reviewed book")
    user_id: uuid.UUID = Field(..., description="ID of the user who wrote the review")
    user_name: str = Field(..., description="Username of the review author")

    created_at: datetime = Field(..., description="When the review was created")
    updated_at: datetime | None = Field(
        default=None,
        description="When the review was last updated",
    )

    model_config = ConfigDict(
        from_attributes=True,
        json_schema_extra={
            "example": {
                "id": "5f0e7a2e-2a7b-4d6e-9b5c-1f3d2c4b5a69",
                "book_id": "9d1c2b3a-4e5f-4a6b-8c7d-0e1f2a3b4c5d",
                "book_title": "1984",
                "user_id": "0b7c6c1e-4f0a-4a8e-9a55-6a5d3f1f2c11",
                "user_name": "booklover",
                "rating": 5,
                "comment": "A must-read classic!",
                "created_at": "2024-01-15T10:30:00Z",
                "updated_at": None,
            }
        },
    )


class ReviewListResponse(BaseModel):
    """List of reviews with a total count."""

    items: list[ReviewResponse] = Field(..., description="Reviews, newest first")
    total: int = Field(..., ge=0, description="Number of reviews returned")


# =============================================================================
# Aggregation Schemas
# =============================================================================


class BookRatingStats(BaseModel):
    """
    Rating aggregate of a book.

    average_rating and review_count are the values stored on the book.
    """

    book_id: uuid.UUID = Field(..., description="Book ID")
    average_rating: Decimal = Field(
        ...,
        ge=0,
        le=RATING_MAX,
        description="Average rating (0 means no reviews)"
    )
    review_count: int = Field(
        ...,
        ge=0,
        description="Total number of reviews"
    )
    rating_distribution: dict[int, int] = Field(
        default_factory=lambda: {1: 0, 2: 0, 3: 0, 4: 0, 5: 0},
        description="Count of each rating (1-5)"
    )
