"""Shared domain error messages and error types."""


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling.
    """


class ValidationError(DomainError):
    """Invalid input or failed validation in domain logic."""


class NotFoundError(DomainError):
    """Requested record does not exist."""


class RemoteServiceError(DomainError):
    """The record backend could not complete a request."""


def student_not_found(student_id: str) -> str:
    """Return message for missing student."""
    return f"Student {student_id} not found"


def required_field_missing(label: str) -> str:
    """Return message for a blank required form field."""
    return f"{label} is required"


def unknown_field(key: str) -> str:
    """Return message for a field that is not part of the record schema."""
    return f"Unknown field '{key}'"


NO_VALID_RECORDS = "No valid records found"
INVALID_UPLOAD = "Please upload a valid CSV file"
INVALID_CREDENTIALS = "Invalid credentials"
MISSING_CREDENTIALS = "Please fill in all fields"
