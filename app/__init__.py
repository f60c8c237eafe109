"""
Books Reviews API Application Package

Reviews and rating aggregation for a book catalog.

Package Structure:
- config.py: Application configuration using Pydantic Settings
- database.py: SQLAlchemy database connection and session management
- main.py: FastAPI application factory and configuration
- dependencies.py: Dependency injection functions
- models/: SQLAlchemy ORM models
- schemas/: Pydantic request/response schemas
- routers/: API route handlers
- services/: Review business rules and the rating recompute
- utils/: Helper functions
"""

__version__ = "0.1.0"
