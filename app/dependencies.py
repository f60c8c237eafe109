"""
FastAPI Dependencies Module

Dependencies are reusable components injected into route handlers.
FastAPI's Depends() function manages their lifecycle.

- DbSession: one SQLAlchemy session per request, closed when the request ends
- Reviews: the review aggregation service bound to that session
"""

from typing import Annotated

from fastapi import Depends
from sqlalchemy.orm import Session

from app.database import get_db
from app.services.ratings import ReviewAggregationService

# =============================================================================
# Type Aliases with Annotated
# =============================================================================
# Instead of writing:
#   def get_review(db: Session = Depends(get_db)):
#
# You can write:
#   def get_review(db: DbSession):

DbSession = Annotated[Session, Depends(get_db)]


def get_review_service(db: DbSession) -> ReviewAggregationService:
    """
    Build the review service for the current request.

    The service and its stores share the request's session, so every
    operation they perform runs on the same pooled connection and is
    released with it.
    """
    return ReviewAggregationService(db)


Reviews = Annotated[ReviewAggregationService, Depends(get_review_service)]
