"""Shared domain error messages and error types."""

from dataclasses import dataclass
from typing import Iterable, Sequence


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling.
    """


class ValidationError(DomainError):
    """Invalid input or failed validation in domain logic."""


class NotFoundError(DomainError):
    """Requested domain entity does not exist."""


class ConflictError(DomainError):
    """Domain conflict, such as uniqueness violations."""


class DependencyError(DomainError):
    """Operation blocked due to dependent domain data."""


class SchemaMismatch(ValidationError):
    """Spreadsheet header does not match the expected column sequence."""


class EmptyDataset(ValidationError):
    """Spreadsheet has no data rows."""


class NoValidRows(ValidationError):
    """Every spreadsheet row was rejected."""


class NotAnArray(ValidationError):
    """Backup content is not a JSON array."""


@dataclass(frozen=True)
class RecordProblem:
    """A single offending field of a backup record."""

    index: int
    field: str
    message: str

    def __str__(self) -> str:
        return f"record {self.index}: {self.field}: {self.message}"


class InvalidRecord(ValidationError):
    """One or more backup records failed validation."""

    def __init__(self, problems: Sequence[RecordProblem]):
        self.problems = list(problems)
        super().__init__(invalid_backup_records(self.problems))


class ExportFailure(DomainError):
    """Rendering or writing an export failed."""


class PermissionDenied(Exception):
    """The acting user lacks a permission flag.

    This is a refusal rather than a failure, so it does not derive from
    DomainError.
    """

    def __init__(self, permission: str):
        self.permission = permission
        super().__init__(permission_denied(permission))


_PERMISSION_ACTIONS = {
    "add": "add payments",
    "edit": "edit payments",
    "delete": "delete payments",
    "change_status": "change payment status",
    "manage_categories": "manage categories",
    "manage_users": "manage users",
}


def permission_denied(permission: str) -> str:
    """Return notice for a missing permission flag."""
    action = _PERMISSION_ACTIONS.get(permission, permission)
    return f"You do not have permission to {action}"


def payment_not_found(payment_id: str) -> str:
    """Return message for missing payment."""
    return f"Payment {payment_id} not found"


def user_not_found(user: str) -> str:
    """Return message for missing user."""
    return f"User '{user}' not found"


def duplicate_payment_id(payment_id: str) -> str:
    """Return message for a payment ID already in the store."""
    return f"Payment with id '{payment_id}' already exists"


def category_item_in_use(item: str, usage: int) -> str:
    """Return message when a category item is still referenced."""
    return (
        f"Cannot remove '{item}': it is used by {usage} "
        f"payment{'s' if usage != 1 else ''}."
    )


def schema_mismatch(expected: Iterable[str]) -> str:
    """Return message for a spreadsheet header mismatch."""
    return f"Spreadsheet must have the columns in this order: {', '.join(expected)}"


def invalid_backup_records(problems: Sequence[RecordProblem]) -> str:
    """Return message summarising every invalid backup field."""
    lines = [f"Backup file contains {len(problems)} invalid field(s):"]
    lines.extend(f"  {problem}" for problem in problems)
    return "\n".join(lines)
