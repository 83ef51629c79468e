"""Domain errors raised by the service layer.

Every error carries the HTTP status it maps to so the API layer can render
it without knowing which service raised it.
"""

from __future__ import annotations

from fastapi import status


class CityscopeError(Exception):
    """Base exception for all Cityscope domain failures."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message: str = "Internal server error"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_payload(self) -> dict[str, object]:
        """Return the JSON body presented to the caller."""
        return {"message": self.message}


class ValidationError(CityscopeError):
    """Raised when input has the wrong shape, length, or enum value.

    ``errors`` holds one human readable message per offending field and
    ``fields`` the names of those fields, in the order they were checked.
    """

    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Validation Error"

    def __init__(self, errors: dict[str, str]) -> None:
        super().__init__()
        self.field_errors = dict(errors)

    @property
    def fields(self) -> list[str]:
        return list(self.field_errors)

    @property
    def errors(self) -> list[str]:
        return list(self.field_errors.values())

    def to_payload(self) -> dict[str, object]:
        return {"message": self.message, "errors": self.errors}


class Unauthenticated(CityscopeError):
    """Raised for a missing, malformed, or expired credential."""

    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Could not validate credentials"


class Forbidden(CityscopeError):
    """Raised when an authenticated caller may not perform the action."""

    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Not allowed"


class NotFound(CityscopeError):
    """Raised when a referenced post or user does not exist."""

    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Not found"


class Conflict(CityscopeError):
    """Raised when a unique field collides with an existing record."""

    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, field: str) -> None:
        self.field = field
        super().__init__(f"{field[:1].upper()}{field[1:]} already exists")


class StorageError(CityscopeError):
    """Raised when the database or image store fails.

    The message given here is only logged; callers always see the generic
    default message.
    """

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, detail: str | None = None) -> None:
        super().__init__()
        self.detail = detail

    def __str__(self) -> str:
        return self.detail or self.message
