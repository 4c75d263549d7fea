"""Typed failures raised by aggregate use cases.

Every error carries the HTTP-style ``status_code`` a transport layer is expected to
map it to. Errors are raised before commit; the surrounding unit of work rolls back.
"""

from __future__ import annotations

from typing import ClassVar, Literal

type RangeConflictReason = Literal["invalid_range", "duplicate", "overlap"]


class DomainError(Exception):
    """Base class for failures the aggregate engine reports to callers."""

    status_code: ClassVar[int] = 500


class NotFoundError(DomainError):
    """A root, an owned child, or a referenced entity does not exist."""

    status_code: ClassVar[int] = 404

    def __init__(self, entity: str, entity_id: object, message: str | None = None) -> None:
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(message or f"{entity} {entity_id!r} not found")


class ConflictError(DomainError):
    """A uniqueness, assignment, ordering or storage integrity constraint was violated."""

    status_code: ClassVar[int] = 409

    def __init__(
        self,
        message: str,
        *,
        field: str | None = None,
        value: object = None,
    ) -> None:
        self.field = field
        self.value = value
        super().__init__(message)


class RangeConflictError(ConflictError):
    """A set of quantity ranges is invalid, duplicated or overlapping."""

    def __init__(self, reason: RangeConflictReason, *, entity: str) -> None:
        self.reason: RangeConflictReason = reason
        self.entity = entity
        super().__init__(f"{entity} ranges conflict: {reason}", field="range", value=reason)


class InternalError(DomainError):
    """A write affected nothing or an unexpected failure occurred."""

    status_code: ClassVar[int] = 500
