"""
Tests for ReviewAggregationService

Business rules and the ServiceResult outcome of every operation:
- Validation happens before any database access
- Book, then user, then duplicate checks on create
- Only the author can update a review
- The book aggregate is correct after each committed change
"""

import uuid
from decimal import Decimal

import pytest
from sqlalchemy import event, func, select
from sqlalchemy.orm import Session, sessionmaker

from app.models import Book, Review, User
from app.services.ratings import (
    DUPLICATE_REVIEW,
    NOT_REVIEW_OWNER,
    ReviewAggregationService,
    validate_review_input,
)
from app.services.results import Outcome
from app.services.reviews import ReviewStore


@pytest.fixture
def executed_statements(engine) -> list[str]:
    """Record every SQL statement sent to the database."""
    statements = []

    def record(conn, cursor, statement, parameters, context, executemany):
        statements.append(statement)

    event.listen(engine, "before_cursor_execute", record)
    yield statements
    event.remove(engine, "before_cursor_execute", record)


def count_reviews(db_session: Session, book_id) -> int:
    stmt = select(func.count(Review.id)).where(Review.book_id == book_id)
    return db_session.execute(stmt).scalar()


# =============================================================================
# Input Validation
# =============================================================================


class TestValidateReviewInput:
    """Tests for validate_review_input()"""

    @pytest.mark.parametrize("rating", [1, 3, 5])
    def test_valid_ratings(self, rating):
        assert validate_review_input(rating, None) is None

    @pytest.mark.parametrize("rating", [0, 6, -1])
    def test_out_of_range_ratings(self, rating):
        assert validate_review_input(rating, None) == "Rating must be between 1 and 5"

    @pytest.mark.parametrize("rating", [True, 4.5, "4", None])
    def test_non_integer_ratings(self, rating):
        assert validate_review_input(rating, None) == "Rating must be an integer"

    def test_comment_length_limit(self):
        assert validate_review_input(4, "x" * 2000) is None
        assert validate_review_input(4, "x" * 2001) == (
            "Comment must not exceed 2000 characters"
        )


# =============================================================================
# Create Review
# =============================================================================


class TestCreateReview:
    """Tests for create_review()"""

    def test_create_review(
        self,
        service: ReviewAggregationService,
        db_session: Session,
        sample_book: Book,
        sample_user: User,
    ):
        result = service.create_review(
            sample_book.id, sample_user.id, rating=5, comment="Loved it"
        )

        assert result.outcome is Outcome.OK
        review = result.value
        assert review.rating == 5
        assert review.comment == "Loved it"
        assert review.book_title == "1984"
        assert review.user_name == "testuser"

        db_session.refresh(sample_book)
        assert sample_book.average_rating == Decimal("5")
        assert sample_book.review_count == 1

    def test_scenario_add_then_delete(
        self,
        service: ReviewAggregationService,
        db_session: Session,
        reviewed_book: Book,
        third_user: User,
    ):
        """Ratings 3 and 5, add a 4, then delete it again."""
        created = service.create_review(reviewed_book.id, third_user.id, rating=4)
        assert created.ok

        db_session.refresh(reviewed_book)
        assert reviewed_book.average_rating == Decimal("4")
        assert reviewed_book.review_count == 3

        deleted = service.delete_review(created.value.id)
        assert deleted.ok

        db_session.refresh(reviewed_book)
        assert reviewed_book.average_rating == Decimal("4")
        assert reviewed_book.review_count == 2

    def test_create_book_not_found(
        self,
        service: ReviewAggregationService,
        db_session: Session,
        sample_user: User,
    ):
        missing_book_id = uuid.uuid4()

        result = service.create_review(missing_book_id, sample_user.id, rating=4)

        assert result.outcome is Outcome.NOT_FOUND
        assert result.resource == "book"
        assert str(missing_book_id) in result.detail
        assert db_session.execute(select(func.count(Review.id))).scalar() == 0

    def test_create_user_not_found(
        self,
        service: ReviewAggregationService,
        db_session: Session,
        sample_book: Book,
    ):
        result = service.create_review(sample_book.id, uuid.uuid4(), rating=4)

        assert result.outcome is Outcome.NOT_FOUND
        assert result.resource == "user"
        assert count_reviews(db_session, sample_book.id) == 0

    def test_book_checked_before_user(self, service: ReviewAggregationService):
        result = service.create_review(uuid.uuid4(), uuid.uuid4(), rating=4)

        assert result.outcome is Outcome.NOT_FOUND
        assert result.resource == "book"

    def test_create_duplicate_conflict(
        self,
        service: ReviewAggregationService,
        db_session: Session,
        sample_review: Review,
    ):
        book_id = sample_review.book_id

        result = service.create_review(book_id, sample_review.user_id, rating=1)

        assert result.outcome is Outcome.CONFLICT
        assert result.detail == DUPLICATE_REVIEW
        assert count_reviews(db_session, book_id) == 1
        book = db_session.get(Book, book_id)
        assert book.average_rating == Decimal("4")
        assert book.review_count == 1

    def test_duplicate_race_reported_as_conflict(
        self,
        service: ReviewAggregationService,
        db_session: Session,
        sample_review: Review,
        monkeypatch,
    ):
        """A duplicate that slips past the check is caught by the constraint."""
        original = ReviewStore.has_user_reviewed_book
        calls = []

        def first_check_misses(self, user_id, book_id):
            calls.append((user_id, book_id))
            if len(calls) == 1:
                return False
            return original(self, user_id, book_id)

        monkeypatch.setattr(ReviewStore, "has_user_reviewed_book", first_check_misses)
        book_id = sample_review.book_id

        result = service.create_review(book_id, sample_review.user_id, rating=2)

        assert result.outcome is Outcome.CONFLICT
        assert len(calls) == 2
        assert count_reviews(db_session, book_id) == 1

    @pytest.mark.parametrize(
        "rating,comment",
        [
            (6, None),
            (0, None),
            (True, None),
            (4, "x" * 2001),
        ],
    )
    def test_invalid_input_rejected_before_storage(
        self,
        service: ReviewAggregationService,
        executed_statements: list[str],
        rating,
        comment,
    ):
        result = service.create_review(uuid.uuid4(), uuid.uuid4(), rating, comment)

        assert result.outcome is Outcome.INVALID
        assert executed_statements == []


# =============================================================================
# Update Review
# =============================================================================


class TestUpdateReview:
    """Tests for update_review()"""

    def test_update_own_review(
        self,
        service: ReviewAggregationService,
        db_session: Session,
        sample_review: Review,
    ):
        book_id = sample_review.book_id

        result = service.update_review(
            sample_review.id,
            rating=2,
            comment="Second reading was worse",
            requesting_user_id=sample_review.user_id,
        )

        assert result.ok
        assert result.value.rating == 2
        assert result.value.comment == "Second reading was worse"
        book = db_session.get(Book, book_id)
        db_session.refresh(book)
        assert book.average_rating == Decimal("2")
        assert book.review_count == 1

    def test_update_clears_comment(
        self, service: ReviewAggregationService, sample_review: Review
    ):
        result = service.update_review(
            sample_review.id, 4, None, requesting_user_id=sample_review.user_id
        )

        assert result.ok
        assert result.value.comment is None

    def test_update_other_users_review_forbidden(
        self,
        service: ReviewAggregationService,
        db_session: Session,
        sample_review: Review,
        second_user: User,
    ):
        review_id = sample_review.id

        result = service.update_review(
            review_id, 1, "Hijacked", requesting_user_id=second_user.id
        )

        assert result.outcome is Outcome.FORBIDDEN
        assert result.detail == NOT_REVIEW_OWNER
        review = db_session.get(Review, review_id)
        db_session.refresh(review)
        assert review.rating == 4

    def test_update_not_found(self, service: ReviewAggregationService):
        result = service.update_review(uuid.uuid4(), 3, None, uuid.uuid4())

        assert result.outcome is Outcome.NOT_FOUND
        assert result.resource == "review"

    def test_update_validates_before_lookup(self, service: ReviewAggregationService):
        """An invalid rating wins over a missing review."""
        result = service.update_review(uuid.uuid4(), 6, None, uuid.uuid4())

        assert result.outcome is Outcome.INVALID

    def test_update_invalid_rating_leaves_review(
        self,
        service: ReviewAggregationService,
        db_session: Session,
        sample_review: Review,
    ):
        review_id = sample_review.id

        result = service.update_review(
            review_id, 0, None, requesting_user_id=sample_review.user_id
        )

        assert result.outcome is Outcome.INVALID
        review = db_session.get(Review, review_id)
        db_session.refresh(review)
        assert review.rating == 4


# =============================================================================
# Delete Review
# =============================================================================


class TestDeleteReview:
    """Tests for delete_review()"""

    def test_delete_review(
        self,
        service: ReviewAggregationService,
        db_session: Session,
        sample_review: Review,
    ):
        review_id = sample_review.id
        book_id = sample_review.book_id

        result = service.delete_review(review_id)

        assert result.ok
        assert result.value is None
        assert service.review_exists(review_id) is False
        book = db_session.get(Book, book_id)
        db_session.refresh(book)
        assert book.average_rating == Decimal("0")
        assert book.review_count == 0

    def test_delete_not_found(self, service: ReviewAggregationService):
        result = service.delete_review(uuid.uuid4())

        assert result.outcome is Outcome.NOT_FOUND
        assert result.resource == "review"


# =============================================================================
# Queries
# =============================================================================


class TestQueries:
    """Tests for review and rating lookups"""

    def test_read_after_write(
        self,
        service: ReviewAggregationService,
        engine,
        sample_book: Book,
        sample_user: User,
    ):
        """A created review is visible to a fresh session, together with the aggregate."""
        book_id = sample_book.id
        created = service.create_review(book_id, sample_user.id, rating=3)
        assert created.ok

        with sessionmaker(bind=engine)() as other_session:
            other = ReviewAggregationService(other_session)
            reviews = other.get_reviews_for_book(book_id)
            assert reviews.ok
            assert [r.id for r in reviews.value] == [created.value.id]

            book = other_session.get(Book, book_id)
            assert book.average_rating == Decimal("3")
            assert book.review_count == 1

    def test_get_reviews_for_missing_book(self, service: ReviewAggregationService):
        result = service.get_reviews_for_book(uuid.uuid4())

        assert result.outcome is Outcome.NOT_FOUND
        assert result.resource == "book"

    def test_get_reviews_for_user(
        self, service: ReviewAggregationService, sample_review: Review
    ):
        result = service.get_reviews_for_user(sample_review.user_id)

        assert result.ok
        assert [r.id for r in result.value] == [sample_review.id]

    def test_get_reviews_for_missing_user(self, service: ReviewAggregationService):
        result = service.get_reviews_for_user(uuid.uuid4())

        assert result.outcome is Outcome.NOT_FOUND
        assert result.resource == "user"

    def test_get_review(self, service: ReviewAggregationService, sample_review: Review):
        assert service.get_review(sample_review.id).value.id == sample_review.id
        assert service.get_review(uuid.uuid4()).outcome is Outcome.NOT_FOUND

    def test_review_exists(self, service: ReviewAggregationService, sample_review: Review):
        assert service.review_exists(sample_review.id) is True
        assert service.review_exists(uuid.uuid4()) is False

    def test_get_book_rating(self, service: ReviewAggregationService, reviewed_book: Book):
        result = service.get_book_rating(reviewed_book.id)

        assert result.ok
        summary = result.value
        assert summary.average_rating == Decimal("4")
        assert summary.review_count == 2
        assert summary.distribution == {1: 0, 2: 0, 3: 1, 4: 0, 5: 1}

    def test_get_book_rating_without_reviews(
        self, service: ReviewAggregationService, sample_book: Book
    ):
        summary = service.get_book_rating(sample_book.id).value

        assert summary.average_rating == Decimal("0")
        assert summary.review_count == 0

    def test_get_book_rating_missing_book(self, service: ReviewAggregationService):
        assert service.get_book_rating(uuid.uuid4()).outcome is Outcome.NOT_FOUND
