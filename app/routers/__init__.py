"""
API Routers Package

This package contains FastAPI routers that handle API endpoints.

Router Structure:
- books.py: /api/v1/books/{book_id} (book with rating aggregate)
- reviews.py: /api/v1/books/{book_id}/reviews, /api/v1/reviews/*,
  /api/v1/users/{user_id}/reviews

Each router is imported and registered in main.py.
"""

from app.routers.books import router as books_router
from app.routers.reviews import router as reviews_router

__all__ = [
    "books_router",
    "reviews_router",
]
