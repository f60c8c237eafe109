#!/usr/bin/env python3
"""
Database Seed Script

Populates the database with sample books, users and reviews for development.

USAGE:
    # Make sure you're in the project root with venv activated
    python scripts/seed_data.py

This script:
1. Connects to the database using app settings
2. Clears existing data (optional)
3. Creates sample books and users
4. Creates reviews through the review service, so every book's
   average_rating and review_count are filled in
"""

import sys
from datetime import date
from pathlib import Path

# Add project root to Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from sqlalchemy import delete
from sqlalchemy.orm import Session

from app.config import get_settings
from app.database import SessionLocal, create_tables
from app.models import Book, Review, User
from app.services.ratings import ReviewAggregationService


def clear_data(db: Session) -> None:
    """Clear all existing data from the database."""
    print("Clearing existing data...")
    db.execute(delete(Review))
    db.execute(delete(Book))
    db.execute(delete(User))
    db.commit()
    print("Data cleared.")


def create_books(db: Session) -> list[Book]:
    """Create sample books."""
    print("Creating books...")
    books = [
        Book(
            title="1984",
            author="George Orwell",
            description="A dystopian novel set in a totalitarian society.",
            published_date=date(1949, 6, 8),
            category="Dystopian",
        ),
        Book(
            title="Pride and Prejudice",
            author="Jane Austen",
            description="A romantic novel of manners.",
            published_date=date(1813, 1, 28),
            category="Romance",
        ),
        Book(
            title="Dune",
            author="Frank Herbert",
            description="A science fiction epic set on the desert planet Arrakis.",
            published_date=date(1965, 8, 1),
            category="Science Fiction",
        ),
        Book(
            title="The Hobbit",
            author="J.R.R. Tolkien",
            published_date=date(1937, 9, 21),
            category="Fantasy",
        ),
    ]
    db.add_all(books)
    db.commit()
    print(f"Created {len(books)} books.")
    return books


def create_users(db: Session) -> list[User]:
    """Create sample users. Passwords are managed by the auth layer."""
    print("Creating users...")
    users = [
        User(
            email=f"{username}@example.com",
            username=username,
            password_hash="!seeded-account-no-login",
            first_name=first_name,
        )
        for username, first_name in (
            ("booklover", "Ana"),
            ("nightreader", "Ben"),
            ("critic", "Chloe"),
        )
    ]
    db.add_all(users)
    db.commit()
    print(f"Created {len(users)} users.")
    return users


def create_reviews(db: Session, books: list[Book], users: list[User]) -> int:
    """Create reviews through the service so the aggregates stay correct."""
    print("Creating reviews...")
    service = ReviewAggregationService(db)
    ratings = [
        (0, 0, 5, "A chilling classic."),
        (0, 1, 4, None),
        (0, 2, 3, "Important, but heavy going."),
        (1, 0, 4, "Witty and sharp."),
        (1, 2, 5, None),
        (2, 1, 5, "The best world-building I've read."),
        (2, 2, 4, None),
    ]

    created = 0
    for book_index, user_index, rating, comment in ratings:
        result = service.create_review(
            books[book_index].id,
            users[user_index].id,
            rating,
            comment,
        )
        if not result.ok:
            raise RuntimeError(f"Could not create review: {result.detail}")
        created += 1

    print(f"Created {created} reviews.")
    return created


def seed_database(clear_existing: bool = True) -> None:
    """
    Main function to seed the database.

    Args:
        clear_existing: If True, clears existing data before seeding.
    """
    settings = get_settings()

    print("=" * 60)
    print("Starting database seed...")
    print("=" * 60)

    # Create tables if they don't exist
    create_tables()

    db = SessionLocal()

    try:
        if clear_existing:
            clear_data(db)

        books = create_books(db)
        users = create_users(db)
        reviews = create_reviews(db, books, users)

        print("=" * 60)
        print("Database seeding completed successfully!")
        print("=" * 60)
        print("\nSummary:")
        print(f"  - Books: {len(books)}")
        print(f"  - Users: {len(users)}")
        print(f"  - Reviews: {reviews}")
        for book in books:
            db.refresh(book)
            print(f"    {book.title}: {book.average_rating} ({book.review_count} reviews)")
        print(f"\nYou can now access the API at http://localhost:{settings.port}")
        print(f"API documentation at http://localhost:{settings.port}/docs")

    except Exception as e:
        print(f"Error seeding database: {e}")
        db.rollback()
        raise
    finally:
        db.close()


if __name__ == "__main__":
    seed_database()
