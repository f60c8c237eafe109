"""
HTTP helpers for service results.

Routers call unwrap_result() on every ServiceResult: OK results yield their
value, anything else becomes an HTTPException with the matching status.
"""

from typing import TypeVar

from fastapi import HTTPException, status

from app.services.results import Outcome, ServiceResult

T = TypeVar("T")

OUTCOME_STATUS_CODES = {
    Outcome.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    Outcome.CONFLICT: status.HTTP_409_CONFLICT,
    Outcome.FORBIDDEN: status.HTTP_403_FORBIDDEN,
    Outcome.INVALID: status.HTTP_400_BAD_REQUEST,
}


def unwrap_result(result: ServiceResult[T]) -> T:
    """
    Return the value of an OK result or raise the matching HTTPException.

    Raises:
        HTTPException: 404 / 409 / 403 / 400 for non-OK outcomes
    """
    if not result.ok:
        raise HTTPException(
            status_code=OUTCOME_STATUS_CODES[result.outcome],
            detail=result.detail,
        )
    return result.value
