"""Custom exceptions for Messuopas service operations."""

from typing import Any


class MessuopasError(Exception):
    """Base exception for Messuopas errors."""

    pass


class ValidationError(MessuopasError):
    """Raised when input validation fails."""

    def __init__(self, message: str, field: str | None = None):
        super().__init__(message)
        self.field = field


class NotFoundError(MessuopasError):
    """Raised when a document is not found in its collection."""

    def __init__(self, resource_type: str, resource_id: str):
        message = f"{resource_type} with ID '{resource_id}' not found"
        super().__init__(message)
        self.resource_type = resource_type
        self.resource_id = resource_id


class DuplicateError(MessuopasError):
    """Raised when attempting to create a duplicate resource."""

    def __init__(self, resource_type: str, field: str, value: str):
        message = f"{resource_type} with {field} '{value}' already exists"
        super().__init__(message)
        self.resource_type = resource_type
        self.field = field
        self.value = value


class PermissionDeniedError(MessuopasError):
    """Raised when the acting user may not perform an operation."""

    pass


class InvitationError(MessuopasError):
    """Raised when an invitation token is unknown, used or expired."""

    pass


class DatabaseError(MessuopasError):
    """Raised when a document store operation fails."""

    def __init__(self, message: str, original_error: Exception | None = None):
        super().__init__(message)
        self.original_error = original_error


class PreferenceWriteError(DatabaseError):
    """Raised when a preference mutation could not be persisted.

    ``resolved`` holds the section view re-resolved from the store after the
    failed write, i.e. the unchanged prior state.
    """

    def __init__(
        self,
        message: str,
        resolved: list[Any],
        original_error: Exception | None = None,
    ):
        super().__init__(message, original_error)
        self.resolved = resolved
