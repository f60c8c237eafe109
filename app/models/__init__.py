"""
SQLAlchemy Models Package

Model Relationships:
- Book <-> Review: One-to-Many (a book has many reviews)
- User <-> Review: One-to-Many (a user writes many reviews)

Import all models here so they are registered on Base.metadata and can be
imported as: from app.models import Book, Review, User
"""

from app.models.book import Book
from app.models.user import User
from app.models.review import Review

__all__ = [
    "Book",
    "User",
    "Review",
]
