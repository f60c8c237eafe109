"""
Service Results

Every review operation reports its outcome through one discriminated result
type instead of mixing exceptions, booleans and None:

    result = service.delete_review(review_id)
    if result.outcome is Outcome.NOT_FOUND:
        ...

Expected business failures (missing book, duplicate review, wrong owner,
bad input) are outcomes. Storage failures are still raised, after the
transaction has been rolled back.
"""

from dataclasses import dataclass
from enum import StrEnum
from typing import Any, Generic, TypeVar

T = TypeVar("T")


class Outcome(StrEnum):
    """How a service operation ended."""

    OK = "ok"
    NOT_FOUND = "not_found"
    CONFLICT = "conflict"
    FORBIDDEN = "forbidden"
    INVALID = "invalid"


@dataclass(frozen=True)
class ServiceResult(Generic[T]):
    """
    Result of a service operation.

    Attributes:
        outcome: The discriminator
        value: Payload for OK results (the review, a list, a summary...)
        detail: Human-readable reason for non-OK results
        resource: Which entity was missing, for NOT_FOUND results
    """

    outcome: Outcome
    value: T | None = None
    detail: str | None = None
    resource: str | None = None

    @property
    def ok(self) -> bool:
        return self.outcome is Outcome.OK

    @classmethod
    def success(cls, value: T | None = None) -> "ServiceResult[T]":
        return cls(Outcome.OK, value=value)

    @classmethod
    def not_found(cls, resource: str, resource_id: Any) -> "ServiceResult[T]":
        return cls(
            Outcome.NOT_FOUND,
            detail=f"{resource.capitalize()} with id {resource_id} not found",
            resource=resource,
        )

    @classmethod
    def conflict(cls, detail: str) -> "ServiceResult[T]":
        return cls(Outcome.CONFLICT, detail=detail)

    @classmethod
    def forbidden(cls, detail: str) -> "ServiceResult[T]":
        return cls(Outcome.FORBIDDEN, detail=detail)

    @classmethod
    def invalid(cls, detail: str) -> "ServiceResult[T]":
        return cls(Outcome.INVALID, detail=detail)
