"""
Domain exceptions raised by the service layer.

Services never build HTTP responses themselves; they raise one of the
exceptions below and the handlers registered in ``main`` translate it
into the JSON envelope ``{success, message, errors}`` with the status
code carried by the exception.
"""

from typing import Dict, List, Optional

from fastapi import status


class ServiceError(Exception):
    """Base class for errors that map to a client-visible response."""

    status_code: int = status.HTTP_400_BAD_REQUEST
    default_message: str = "Request failed"

    def __init__(self, message: Optional[str] = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationFailed(ServiceError):
    """Malformed or missing input; carries per-field messages."""

    default_message = "Validation failed"

    def __init__(self, errors: List[Dict[str, str]], message: Optional[str] = None) -> None:
        super().__init__(message)
        self.errors = errors

    @classmethod
    def for_field(cls, field: str, message: str) -> "ValidationFailed":
        return cls([{"field": field, "message": message}])


class BadRequest(ServiceError):
    """A domain rule was violated (self-follow, duplicate follow, blank query)."""

    default_message = "Bad request"


# Uniqueness clashes are reported with the same 400 status.
Conflict = BadRequest


class Unauthenticated(ServiceError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Not authenticated"


class InvalidCredentials(Unauthenticated):
    default_message = "Invalid credentials"


class Forbidden(ServiceError):
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Not authorized"


class NotFound(ServiceError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Not found"


class UpstreamFailure(ServiceError):
    """The external image store failed."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Failed to upload images"


class StorageNotConfigured(UpstreamFailure):
    """Image storage credentials are missing; callers may degrade."""

    default_message = "Image storage is not configured"
