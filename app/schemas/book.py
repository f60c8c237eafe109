"""
Book Pydantic Schemas

Books are managed by the catalog layer; the review API only reads them,
mainly to expose the rating aggregate.
"""

import uuid
from datetime import date, datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field


class BookResponse(BaseModel):
    """
    Schema for book responses.

    average_rating and review_count are derived from the book's reviews
    and are never set directly by clients.
    """

    id: uuid.UUID = Field(..., description="Unique identifier")
    title: str = Field(..., description="Book title")
    author: str = Field(..., description="Author name")
    description: str | None = Field(default=None, description="Book description")
    cover_image_url: str | None = Field(default=None, description="Cover image URL")
    published_date: date | None = Field(default=None, description="Date of publication")
    category: str | None = Field(default=None, description="Category name")

    average_rating: Decimal = Field(
        default=Decimal("0"),
        description="Average review rating (0.00-5.00), 0 if no reviews",
    )
    review_count: int = Field(
        default=0,
        description="Number of reviews for this book",
    )

    created_at: datetime = Field(..., description="When the book was created")
    updated_at: datetime | None = Field(
        default=None,
        description="When the book was last updated",
    )

    model_config = ConfigDict(
        from_attributes=True,
        json_schema_extra={
            "example": {
                "id": "9d1c2b3a-4e5f-4a6b-8c7d-0e1f2a3b4c5d",
                "title": "1984",
                "author": "George Orwell",
                "description": "A dystopian novel about totalitarianism",
                "cover_image_url": None,
                "published_date": "1949-06-08",
                "category": "Dystopian",
                "average_rating": "4.25",
                "review_count": 42,
                "created_at": "2024-01-15T10:30:00Z",
                "updated_at": "2024-01-15T10:30:00Z",
            }
        },
    )
