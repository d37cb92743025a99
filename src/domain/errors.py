"""
Error taxonomy shared by every use case.

Each error carries a stable, machine-readable ``ErrorKind``; the API layer
maps kinds to HTTP status codes and never inspects messages.
"""

from __future__ import annotations

import enum


class ErrorKind(str, enum.Enum):
    VALIDATION = "validation"
    UNAUTHENTICATED = "unauthenticated"
    FORBIDDEN = "forbidden"
    NOT_FOUND = "not_found"
    CONFLICT = "conflict"
    UNAVAILABLE = "unavailable"
    INTERNAL = "internal"


HTTP_STATUS: dict[ErrorKind, int] = {
    ErrorKind.VALIDATION: 400,
    ErrorKind.UNAUTHENTICATED: 401,
    ErrorKind.FORBIDDEN: 403,
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.CONFLICT: 409,
    ErrorKind.UNAVAILABLE: 503,
    ErrorKind.INTERNAL: 500,
}


class DomainError(Exception):
    """Base class for expected, client-visible failures."""

    kind: ErrorKind = ErrorKind.INTERNAL

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    @property
    def status_code(self) -> int:
        return HTTP_STATUS[self.kind]


class ValidationError(DomainError):
    """Missing or invalid input."""

    kind = ErrorKind.VALIDATION


class InvalidStateTransition(ValidationError):
    """Raised when a ride status change violates the state machine."""


class AuthenticationError(DomainError):
    """Missing, malformed or expired credentials."""

    kind = ErrorKind.UNAUTHENTICATED


class PermissionDenied(DomainError):
    """Wrong role, or a non-admin acting on someone else's resource."""

    kind = ErrorKind.FORBIDDEN


class NotFoundError(DomainError):
    kind = ErrorKind.NOT_FOUND


class ConflictError(DomainError):
    """Duplicate value for a unique field."""

    kind = ErrorKind.CONFLICT


class UnavailableError(DomainError):
    """No capacity to serve the request right now (no driver, closed branch)."""

    kind = ErrorKind.UNAVAILABLE
