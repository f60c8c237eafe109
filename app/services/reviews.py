"""
Review Store

Persistence for reviews and the transactional recompute protocol.

Every mutation (create, update, delete) runs as one unit:

    STARTED -> ROW_MUTATED -> AGGREGATE_RECOMPUTED -> COMMITTED
       \\____________________________________________-> ROLLED_BACK

1. The review row is inserted/updated/deleted and flushed
2. BookStore.recompute_rating() re-aggregates the book from the reviews
   table, which now reflects the flushed change
3. The session commits both writes together

Any exception in steps 1-3 rolls the session back and is re-raised
unchanged, so a review change is never committed without its aggregate.
"""

import logging
import uuid
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import UTC, datetime
from enum import StrEnum

from sqlalchemy import func, select
from sqlalchemy.orm import Session, selectinload

from app.models.review import RATING_MAX, RATING_MIN, Review
from app.services.books import BookStore

logger = logging.getLogger(__name__)


class MutationState(StrEnum):
    """Progress of a single review mutation."""

    STARTED = "started"
    ROW_MUTATED = "row_mutated"
    AGGREGATE_RECOMPUTED = "aggregate_recomputed"
    COMMITTED = "committed"
    ROLLED_BACK = "rolled_back"


@dataclass
class ReviewMutation:
    """
    Tracks one review mutation through its states.

    Attributes:
        operation: "create", "update" or "delete"
        book_id: Book whose aggregate the mutation affects
        state: Current state
    """

    operation: str
    book_id: uuid.UUID
    state: MutationState = MutationState.STARTED

    def advance(self, state: MutationState) -> None:
        logger.debug(
            f"Review {self.operation} (book {self.book_id}): {self.state} -> {state}"
        )
        self.state = state


class ReviewStore:
    """
    CRUD for reviews.

    Mutations take the BookStore used for the recompute so both writes go
    through the same session and therefore the same transaction.
    """

    def __init__(self, db: Session, books: BookStore | None = None) -> None:
        self.db = db
        self.books = books or BookStore(db)
        self.last_mutation: ReviewMutation | None = None

    # =========================================================================
    # Reads
    # =========================================================================

    def _select_reviews(self):
        return select(Review).options(
            selectinload(Review.user),
            selectinload(Review.book),
        )

    def get(self, review_id: uuid.UUID) -> Review | None:
        stmt = self._select_reviews().where(Review.id == review_id)
        return self.db.execute(stmt).scalar_one_or_none()

    def exists(self, review_id: uuid.UUID) -> bool:
        stmt = select(Review.id).where(Review.id == review_id)
        return self.db.execute(stmt).scalar_one_or_none() is not None

    def list_for_book(self, book_id: uuid.UUID) -> list[Review]:
        stmt = (
            self._select_reviews()
            .where(Review.book_id == book_id)
            .order_by(Review.created_at.desc())
        )
        return list(self.db.execute(stmt).scalars().all())

    def list_for_user(self, user_id: uuid.UUID) -> list[Review]:
        stmt = (
            self._select_reviews()
            .where(Review.user_id == user_id)
            .order_by(Review.created_at.desc())
        )
        return list(self.db.execute(stmt).scalars().all())

    def has_user_reviewed_book(self, user_id: uuid.UUID, book_id: uuid.UUID) -> bool:
        stmt = select(func.count(Review.id)).where(
            Review.user_id == user_id,
            Review.book_id == book_id,
        )
        return (self.db.execute(stmt).scalar() or 0) > 0

    def rating_distribution(self, book_id: uuid.UUID) -> dict[int, int]:
        """Count of reviews per star value, with every value present."""
        distribution = {rating: 0 for rating in range(RATING_MIN, RATING_MAX + 1)}
        stmt = (
            select(Review.rating, func.count(Review.id))
            .where(Review.book_id == book_id)
            .group_by(Review.rating)
        )
        for rating, count in self.db.execute(stmt).all():
            distribution[rating] = count
        return distribution

    # =========================================================================
    # Mutations
    # =========================================================================

    @contextmanager
    def _transaction(
        self, operation: str, book_id: uuid.UUID
    ) -> Iterator[ReviewMutation]:
        """
        Commit the session if the block succeeds, roll it back otherwise.

        Reads done earlier in the same session (existence and duplicate
        checks) belong to the same transaction.
        """
        mutation = ReviewMutation(operation=operation, book_id=book_id)
        self.last_mutation = mutation

        try:
            yield mutation
            self.db.commit()
        except Exception as exc:
            self.db.rollback()
            mutation.advance(MutationState.ROLLED_BACK)
            logger.error(f"Review {operation} for book {book_id} rolled back: {exc}")
            raise

        mutation.advance(MutationState.COMMITTED)

    def create(
        self,
        book_id: uuid.UUID,
        user_id: uuid.UUID,
        rating: int,
        comment: str | None,
    ) -> Review:
        """
        Insert a review and recompute its book's aggregate.

        Raises:
            sqlalchemy.exc.IntegrityError: If the (book, user) pair already
                has a review
        """
        review = Review(
            book_id=book_id,
            user_id=user_id,
            rating=rating,
            comment=comment,
        )

        with self._transaction("create", book_id) as mutation:
            self.db.add(review)
            self.db.flush()
            mutation.advance(MutationState.ROW_MUTATED)

            self.books.recompute_rating(book_id)
            mutation.advance(MutationState.AGGREGATE_RECOMPUTED)

        self.db.refresh(review)
        return review

    def update(
        self,
        review_id: uuid.UUID,
        rating: int,
        comment: str | None,
    ) -> Review | None:
        """
        Replace a review's rating and comment and recompute its book.

        Returns:
            The updated review, or None if it does not exist
        """
        review = self.db.get(Review, review_id)
        if review is None:
            return None

        with self._transaction("update", review.book_id) as mutation:
            review.rating = rating
            review.comment = comment
            review.updated_at = datetime.now(UTC)
            self.db.flush()
            mutation.advance(MutationState.ROW_MUTATED)

            self.books.recompute_rating(review.book_id)
            mutation.advance(MutationState.AGGREGATE_RECOMPUTED)

        self.db.refresh(review)
        return review

    def delete(self, review_id: uuid.UUID) -> bool:
        """
        Delete a review and recompute its book.

        Returns:
            True if a review was deleted, False if it did not exist
        """
        review = self.db.get(Review, review_id)
        if review is None:
            return False

        book_id = review.book_id
        with self._transaction("delete", book_id) as mutation:
            self.db.delete(review)
            self.db.flush()
            mutation.advance(MutationState.ROW_MUTATED)

            self.books.recompute_rating(book_id)
            mutation.advance(MutationState.AGGREGATE_RECOMPUTED)

        return True
