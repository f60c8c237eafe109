"""
Books Router

Read-only book endpoints. Books carry the denormalized rating aggregate
(average_rating, review_count) maintained by the review service.
"""

import uuid

from fastapi import APIRouter, HTTPException, status

from app.dependencies import DbSession
from app.models import Book
from app.schemas import BookResponse
from app.services.books import BookStore

# =============================================================================
# Router Configuration
# =============================================================================

router = APIRouter(
    prefix="/books",
    tags=["Books"],
    responses={
        404: {"description": "Book not found"},
    },
)


# =============================================================================
# Helper Functions
# =============================================================================
def get_book_or_404(db: DbSession, book_id: uuid.UUID) -> Book:
    """
    Get a book by ID or raise 404.

    Raises:
        HTTPException: 404 if book doesn't exist
    """
    book = BookStore(db).get(book_id)
    if book is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Book with id {book_id} not found",
        )
    return book


# =============================================================================
# Endpoints
# =============================================================================


@router.get(
    "/{book_id}",
    response_model=BookResponse,
    summary="Get a book by ID",
    description="Retrieve a book including its average rating and review count.",
)
def get_book(book_id: uuid.UUID, db: DbSession) -> BookResponse:
    """
    Get a single book by its ID.

    Args:
        book_id: The ID of the book to retrieve
        db: Database session (injected)

    Returns:
        Book details with rating aggregate

    Raises:
        HTTPException: 404 if book not found
    """
    book = get_book_or_404(db, book_id)
    return BookResponse.model_validate(book)
