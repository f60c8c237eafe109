"""
Reviews Router

Endpoints for book reviews. Every write goes through the
ReviewAggregationService, so a book's average_rating and review_count
always match its reviews.

Endpoints:
- GET /books/{book_id}/reviews - List reviews for a book
- POST /books/{book_id}/reviews - Create a review
- GET /books/{book_id}/rating - Get book rating statistics
- GET /reviews/{review_id} - Get a specific review
- PUT /reviews/{review_id} - Update a review (owner only)
- DELETE /reviews/{review_id} - Delete a review
- GET /users/{user_id}/reviews - Get reviews by a user

Business Rules:
- One review per user per book (409 on duplicates)
- Only the review author can update their review (403 otherwise)
- Ratings are 1-5, comments at most 2000 characters (400 otherwise)
"""

import logging
import uuid

from fastapi import APIRouter, status

from app.dependencies import Reviews
from app.schemas.review import (
    BookRatingStats,
    ReviewCreate,
    ReviewListResponse,
    ReviewResponse,
    ReviewUpdate,
)
from app.utils.http import unwrap_result

logger = logging.getLogger(__name__)

# =============================================================================
# Router Configuration
# =============================================================================

router = APIRouter(
    tags=["Reviews"],
    responses={
        404: {"description": "Review, book or user not found"},
    },
)


def _review_list(reviews) -> ReviewListResponse:
    return ReviewListResponse(
        items=[ReviewResponse.model_validate(r) for r in reviews],
        total=len(reviews),
    )


# =============================================================================
# Book Review Endpoints
# =============================================================================


@router.get(
    "/books/{book_id}/reviews",
    response_model=ReviewListResponse,
    summary="List reviews for a book",
    description="Get all reviews for a specific book, newest first.",
)
def list_book_reviews(book_id: uuid.UUID, service: Reviews) -> ReviewListResponse:
    """
    List all reviews for a specific book.

    Raises:
        HTTPException: 404 if book not found
    """
    reviews = unwrap_result(service.get_reviews_for_book(book_id))
    return _review_list(reviews)


@router.post(
    "/books/{book_id}/reviews",
    response_model=ReviewResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a review",
    description="Create a new review for a book. One review per book per user.",
)
def create_review(
    book_id: uuid.UUID,
    review_data: ReviewCreate,
    service: Reviews,
) -> ReviewResponse:
    """
    Create a new review for a book.

    Args:
        book_id: ID of the book to review
        review_data: Reviewer, rating and optional comment

    Returns:
        Created review with book title and user name

    Raises:
        HTTPException: 404 if book or user not found
        HTTPException: 409 if user already reviewed this book
    """
    review = unwrap_result(
        service.create_review(
            book_id,
            review_data.user_id,
            review_data.rating,
            review_data.comment,
        )
    )
    return ReviewResponse.model_validate(review)


@router.get(
    "/books/{book_id}/rating",
    response_model=BookRatingStats,
    summary="Get book rating statistics",
    description="Get the stored rating aggregate and distribution for a book.",
)
def get_book_rating_stats(book_id: uuid.UUID, service: Reviews) -> BookRatingStats:
    """
    Get rating statistics for a book.

    Returns:
        - Average rating (0 when the book has no reviews)
        - Review count
        - Rating distribution (count of each rating 1-5)
    """
    summary = unwrap_result(service.get_book_rating(book_id))
    return BookRatingStats(
        book_id=summary.book_id,
        average_rating=summary.average_rating,
        review_count=summary.review_count,
        rating_distribution=summary.distribution,
    )


# =============================================================================
# Individual Review Endpoints
# =============================================================================


@router.get(
    "/reviews/{review_id}",
    response_model=ReviewResponse,
    summary="Get a review by ID",
    description="Retrieve a specific review with book title and user name.",
)
def get_review(review_id: uuid.UUID, service: Reviews) -> ReviewResponse:
    review = unwrap_result(service.get_review(review_id))
    return ReviewResponse.model_validate(review)


@router.put(
    "/reviews/{review_id}",
    response_model=ReviewResponse,
    summary="Update a review",
    description="Replace the rating and comment of your own review.",
)
def update_review(
    review_id: uuid.UUID,
    review_data: ReviewUpdate,
    service: Reviews,
) -> ReviewResponse:
    """
    Update an existing review.

    Only the review author can update their review.

    Raises:
        HTTPException: 404 if review not found
        HTTPException: 403 if user_id is not the review author
    """
    review = unwrap_result(
        service.update_review(
            review_id,
            review_data.rating,
            review_data.comment,
            requesting_user_id=review_data.user_id,
        )
    )
    return ReviewResponse.model_validate(review)


@router.delete(
    "/reviews/{review_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a review",
    description="Delete a review and update the book's rating.",
)
def delete_review(review_id: uuid.UUID, service: Reviews) -> None:
    """
    Delete a review.

    Raises:
        HTTPException: 404 if review not found
    """
    unwrap_result(service.delete_review(review_id))


# =============================================================================
# User Review Endpoints
# =============================================================================


@router.get(
    "/users/{user_id}/reviews",
    response_model=ReviewListResponse,
    summary="List reviews by a user",
    description="Get all reviews written by a specific user, newest first.",
)
def list_user_reviews(user_id: uuid.UUID, service: Reviews) -> ReviewListResponse:
    reviews = unwrap_result(service.get_reviews_for_user(user_id))
    return _review_list(reviews)
