"""Application exceptions.

Validation failures are expected and carry field-scoped messages so callers
can render every error at once. Integrity failures (``InconsistentEntryState``,
``ConstraintViolation``) are never caused by caller input and are surfaced as
internal errors.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any
from uuid import UUID

if TYPE_CHECKING:
    from employee_api.domain.validation import FieldError


class EmployeeApiError(Exception):
    """Base class for all application errors."""

    code = "INTERNAL_ERROR"


class ValidationError(EmployeeApiError):
    """One or more field-scoped validation errors."""

    code = "VALIDATION_ERROR"

    def __init__(self, errors: list[FieldError], message: str | None = None):
        self.errors = list(errors)
        if message is None:
            if len(self.errors) == 1:
                message = self.errors[0].message
            else:
                message = f"{len(self.errors)} validation errors occurred"
        super().__init__(message)

    def as_dict(self) -> dict[str, list[str]]:
        """Group messages by field path."""
        grouped: dict[str, list[str]] = {}
        for error in self.errors:
            grouped.setdefault(error.field, []).append(error.message)
        return grouped


class NotFoundError(EmployeeApiError):
    """Requested entity does not exist."""

    code = "NOT_FOUND"

    def __init__(self, entity: str, entity_id: Any):
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(f"{entity} with ID '{entity_id}' was not found.")


class EmployeeNotFoundError(NotFoundError):
    """Employee lookup failed."""

    code = "EMPLOYEE_NOT_FOUND"

    def __init__(self, employee_id: str):
        super().__init__("Employee", employee_id)


class AlreadyExistsError(EmployeeApiError):
    """Entity collides with an existing unique value."""

    code = "ALREADY_EXISTS"

    def __init__(self, entity: str, field: str, value: Any):
        self.entity = entity
        self.field = field
        self.value = value
        super().__init__(f"{entity} with {field} '{value}' already exists.")


class InconsistentEntryState(EmployeeApiError):
    """A pay entry's discriminator and parent reference disagree.

    Raised on read when the expected parent is missing. This means the owner
    invariant was broken upstream (partial load, bypassed constraint) and is
    treated as a fatal data-integrity error.
    """

    def __init__(
        self,
        entry_id: UUID | None,
        discriminator: Any,
        missing_reference: str,
    ):
        self.entry_id = entry_id
        self.discriminator = discriminator
        self.missing_reference = missing_reference
        super().__init__(
            f"Pay entry {entry_id} has discriminator {discriminator!s} "
            f"but {missing_reference} is not set"
        )


class ConstraintViolation(EmployeeApiError):
    """The storage layer rejected a write."""

    code = "SAVE_FAILED"

    def __init__(self, entity: str, entity_id: Any, detail: str | None = None):
        self.entity = entity
        self.entity_id = entity_id
        self.detail = detail
        super().__init__(f"Failed to save {entity} {entity_id}")
