"""
Book Model

Books carry a denormalized rating aggregate:
- average_rating: mean of all review ratings (0 when the book has none)
- review_count: number of reviews

Both columns are derived from the reviews table and are only ever written
by BookStore.recompute_rating, inside the transaction that changed a review.
"""

import uuid
from datetime import date, datetime
from decimal import Decimal
from typing import TYPE_CHECKING

from sqlalchemy import (
    Date,
    DateTime,
    Integer,
    Numeric,
    String,
    Text,
    Uuid,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.database import Base

if TYPE_CHECKING:
    from app.models.review import Review


class Book(Base):
    """
    Book model representing books in the catalog.

    Table: books

    Fields:
    - title / author: required
    - description, cover_image_url, published_date, category: optional
    - average_rating / review_count: derived rating aggregate

    Relationships:
    - reviews: One-to-Many (a book has many reviews)

    Example:
        book = Book(
            title="1984",
            author="George Orwell",
            published_date=date(1949, 6, 8),
            category="Dystopian",
        )
    """

    __tablename__ = "books"

    # -------------------------------------------------------------------------
    # Primary Key
    # -------------------------------------------------------------------------
    # Generated application-side and never changed afterwards
    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )

    # -------------------------------------------------------------------------
    # Basic Fields
    # -------------------------------------------------------------------------
    title: Mapped[str] = mapped_column(
        String(500),
        index=True,
        nullable=False,
        comment="Book title"
    )

    author: Mapped[str] = mapped_column(
        String(255),
        index=True,
        nullable=False,
        comment="Author name"
    )

    description: Mapped[str | None] = mapped_column(
        Text,
        nullable=True,
        comment="Book description or summary"
    )

    cover_image_url: Mapped[str | None] = mapped_column(
        Text,
        nullable=True,
        comment="URL of the cover image"
    )

    published_date: Mapped[date | None] = mapped_column(
        Date,
        nullable=True,
        comment="Date of publication"
    )

    category: Mapped[str | None] = mapped_column(
        String(100),
        index=True,
        nullable=True,
        comment="Category name"
    )

    # -------------------------------------------------------------------------
    # Rating Aggregate
    # -------------------------------------------------------------------------
    # Numeric(3, 2) holds 0.00 - 5.00
    average_rating: Mapped[Decimal] = mapped_column(
        Numeric(3, 2),
        default=Decimal("0"),
        server_default="0",
        nullable=False,
        comment="Mean review rating, 0 when there are no reviews"
    )

    review_count: Mapped[int] = mapped_column(
        Integer,
        default=0,
        server_default="0",
        nullable=False,
        comment="Number of reviews"
    )

    # -------------------------------------------------------------------------
    # Timestamps
    # -------------------------------------------------------------------------
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )

    updated_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )

    # -------------------------------------------------------------------------
    # Relationships
    # -------------------------------------------------------------------------
    reviews: Mapped[list["Review"]] = relationship(
        "Review",
        back_populates="book",
        cascade="all, delete-orphan",
    )

    def __repr__(self) -> str:
        return f"Book(id={self.id}, title='{self.title}', author='{self.author}')"
