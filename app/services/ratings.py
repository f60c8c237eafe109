"""
Review Aggregation Service

The only entry point allowed to create, update or delete reviews.

It validates input and business rules, then hands the write to the
ReviewStore, which changes the review row and recomputes the book's
average_rating/review_count in the same transaction.

Checks run in a fixed order:
1. rating and comment are valid (before any database access)
2. the book exists
3. the user exists
4. the user has not already reviewed the book

Every operation returns a ServiceResult; see app.services.results.

Usage:
    service = ReviewAggregationService(db)
    result = service.create_review(book_id, user_id, rating=5, comment="Loved it")
    if result.ok:
        review = result.value
"""

import logging
import uuid
from dataclasses import dataclass
from decimal import Decimal
from typing import Any

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.models.review import COMMENT_MAX_LENGTH, RATING_MAX, RATING_MIN, Review
from app.services.books import BookStore
from app.services.results import ServiceResult
from app.services.reviews import ReviewStore
from app.services.users import UserStore

logger = logging.getLogger(__name__)

DUPLICATE_REVIEW = "User has already reviewed this book"
NOT_REVIEW_OWNER = "You can only update your own reviews"


@dataclass(frozen=True)
class RatingSummary:
    """Stored rating aggregate of a book plus its per-star distribution."""

    book_id: uuid.UUID
    average_rating: Decimal
    review_count: int
    distribution: dict[int, int]


def validate_review_input(rating: Any, comment: str | None) -> str | None:
    """
    Check rating range and comment length.

    Returns:
        An error message, or None if the input is valid
    """
    # bool is an int subclass, but True is not a star rating
    if isinstance(rating, bool) or not isinstance(rating, int):
        return "Rating must be an integer"
    if not RATING_MIN <= rating <= RATING_MAX:
        return f"Rating must be between {RATING_MIN} and {RATING_MAX}"
    if comment is not None and len(comment) > COMMENT_MAX_LENGTH:
        return f"Comment must not exceed {COMMENT_MAX_LENGTH} characters"
    return None


class ReviewAggregationService:
    """
    Orchestrates review mutations for one request-scoped session.

    Attributes:
        books: Book existence checks and rating recompute
        users: User existence checks
        reviews: Review persistence and the recompute protocol
    """

    def __init__(self, db: Session) -> None:
        self.db = db
        self.books = BookStore(db)
        self.users = UserStore(db)
        self.reviews = ReviewStore(db, self.books)

    # =========================================================================
    # Mutations
    # =========================================================================

    def create_review(
        self,
        book_id: uuid.UUID,
        user_id: uuid.UUID,
        rating: int,
        comment: str | None = None,
    ) -> ServiceResult[Review]:
        """
        Create a review and update the book's rating aggregate.

        Args:
            book_id: Book being reviewed
            user_id: Author of the review
            rating: 1-5 stars
            comment: Optional text, at most 2000 characters

        Returns:
            OK with the created review, or INVALID / NOT_FOUND (book or user)
            / CONFLICT (the user already reviewed this book)
        """
        error = validate_review_input(rating, comment)
        if error:
            logger.warning(f"Rejected review for book {book_id}: {error}")
            return ServiceResult.invalid(error)

        if not self.books.exists(book_id):
            return ServiceResult.not_found("book", book_id)

        if not self.users.exists(user_id):
            return ServiceResult.not_found("user", user_id)

        if self.reviews.has_user_reviewed_book(user_id, book_id):
            return ServiceResult.conflict(DUPLICATE_REVIEW)

        try:
            review = self.reviews.create(book_id, user_id, rating, comment)
        except IntegrityError:
            # Lost the race against a concurrent insert of the same pair
            if self.reviews.has_user_reviewed_book(user_id, book_id):
                return ServiceResult.conflict(DUPLICATE_REVIEW)
            raise

        logger.info(f"Review {review.id} created for book {book_id} by user {user_id}")
        return ServiceResult.success(review)

    def update_review(
        self,
        review_id: uuid.UUID,
        rating: int,
        comment: str | None,
        requesting_user_id: uuid.UUID,
    ) -> ServiceResult[Review]:
        """
        Replace the rating and comment of a review owned by the requester.

        Returns:
            OK with the updated review, or INVALID / NOT_FOUND / FORBIDDEN
        """
        error = validate_review_input(rating, comment)
        if error:
            logger.warning(f"Rejected update of review {review_id}: {error}")
            return ServiceResult.invalid(error)

        review = self.reviews.get(review_id)
        if review is None:
            return ServiceResult.not_found("review", review_id)

        if review.user_id != requesting_user_id:
            logger.warning(
                f"User {requesting_user_id} tried to update review {review_id} "
                f"owned by {review.user_id}"
            )
            return ServiceResult.forbidden(NOT_REVIEW_OWNER)

        updated = self.reviews.update(review_id, rating, comment)
        if updated is None:
            return ServiceResult.not_found("review", review_id)

        logger.info(f"Review {review_id} updated")
        return ServiceResult.success(updated)

    def delete_review(self, review_id: uuid.UUID) -> ServiceResult[None]:
        """
        Delete a review and update the book's rating aggregate.

        Returns:
            OK, or NOT_FOUND if the review does not exist
        """
        if not self.reviews.delete(review_id):
            return ServiceResult.not_found("review", review_id)

        logger.info(f"Review {review_id} deleted")
        return ServiceResult.success()

    # =========================================================================
    # Queries
    # =========================================================================

    def review_exists(self, review_id: uuid.UUID) -> bool:
        return self.reviews.exists(review_id)

    def get_review(self, review_id: uuid.UUID) -> ServiceResult[Review]:
        review = self.reviews.get(review_id)
        if review is None:
            return ServiceResult.not_found("review", review_id)
        return ServiceResult.success(review)

    def get_reviews_for_book(self, book_id: uuid.UUID) -> ServiceResult[list[Review]]:
        """All reviews of a book, newest first."""
        if not self.books.exists(book_id):
            return ServiceResult.not_found("book", book_id)
        return ServiceResult.success(self.reviews.list_for_book(book_id))

    def get_reviews_for_user(self, user_id: uuid.UUID) -> ServiceResult[list[Review]]:
        """All reviews written by a user, newest first."""
        if not self.users.exists(user_id):
            return ServiceResult.not_found("user", user_id)
        return ServiceResult.success(self.reviews.list_for_user(user_id))

    def get_book_rating(self, book_id: uuid.UUID) -> ServiceResult[RatingSummary]:
        """
        Rating summary of a book.

        average_rating and review_count come from the stored aggregate; the
        distribution is counted from the reviews table.
        """
        book = self.books.get(book_id)
        if book is None:
            return ServiceResult.not_found("book", book_id)

        return ServiceResult.success(
            RatingSummary(
                book_id=book.id,
                average_rating=book.average_rating,
                review_count=book.review_count,
                distribution=self.reviews.rating_distribution(book_id),
            )
        )
