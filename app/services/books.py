"""
Book Store

Read access to books plus the rating recompute.

average_rating and review_count are denormalized onto the books table so
listings don't need COUNT/AVG subqueries. They are re-derived from scratch
(never incremented) whenever a review changes:

    average_rating = COALESCE(ROUND(AVG(rating), 2), 0)
    review_count   = COUNT(*)

recompute_rating() must run inside the transaction that changed the review,
after the change has been flushed, so the aggregate commits or rolls back
together with the review row.
"""

import logging
import uuid
from datetime import UTC, datetime

from sqlalchemy import Select, func, select, update
from sqlalchemy.orm import Session

from app.models import Book
from app.models.review import Review

logger = logging.getLogger(__name__)


def lock_book_row(book_id: uuid.UUID) -> Select:
    """
    SELECT ... FOR NO KEY UPDATE on one book (PostgreSQL).

    Inserting or deleting a review already holds FOR KEY SHARE on the book
    through the foreign key check. FOR NO KEY UPDATE does not conflict with
    that, so same-book writers queue here instead of deadlocking, while still
    conflicting with each other.
    """
    return select(Book.id).where(Book.id == book_id).with_for_update(key_share=True)


class BookStore:
    """Book lookups and the transaction-scoped rating recompute."""

    def __init__(self, db: Session) -> None:
        self.db = db

    def exists(self, book_id: uuid.UUID) -> bool:
        stmt = select(Book.id).where(Book.id == book_id)
        return self.db.execute(stmt).scalar_one_or_none() is not None

    def get(self, book_id: uuid.UUID) -> Book | None:
        return self.db.get(Book, book_id)

    def recompute_rating(self, book_id: uuid.UUID) -> None:
        """
        Re-derive a book's rating aggregate from its current reviews.

        Only the review store calls this, from inside its mutation
        transaction. The book row is locked first (see lock_book_row), so two
        transactions touching the same book serialize here and the second one
        aggregates over a snapshot that includes the first one's committed
        review. Books are not locked against each other.

        Args:
            book_id: ID of the book whose reviews changed

        Raises:
            RuntimeError: If called outside an open transaction
        """
        if not self.db.in_transaction():
            raise RuntimeError(
                "Rating recompute must run inside the review mutation transaction"
            )

        self.db.execute(lock_book_row(book_id))

        average = (
            select(func.coalesce(func.round(func.avg(Review.rating), 2), 0))
            .where(Review.book_id == book_id)
            .scalar_subquery()
        )
        count = (
            select(func.count(Review.id))
            .where(Review.book_id == book_id)
            .scalar_subquery()
        )

        stmt = (
            update(Book)
            .where(Book.id == book_id)
            .values(
                average_rating=average,
                review_count=count,
                updated_at=datetime.now(UTC),
            )
            .execution_options(synchronize_session="fetch")
        )
        self.db.execute(stmt)
        logger.debug(f"Recomputed rating aggregate for book {book_id}")

    def recompute_all_ratings(self) -> int:
        """
        Recompute rating aggregations for all books in one transaction.

        Useful for data repair after manual edits to the reviews table.

        Returns:
            Number of books updated
        """
        book_ids = self.db.execute(select(Book.id)).scalars().all()

        try:
            for book_id in book_ids:
                self.recompute_rating(book_id)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        logger.info(f"Recomputed rating aggregates for {len(book_ids)} books")
        return len(book_ids)
