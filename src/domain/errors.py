"""
Domain error taxonomy.

Every error carries a stable machine code and a human readable message.
The HTTP layer maps each class to a status code; nothing in the domain
catches or downgrades these errors.
"""

from __future__ import annotations


class DomainError(Exception):
    """Base class for all errors raised by the publishing core."""

    code = "DOMAIN_ERROR"
    status_code = 400

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class ValidationError(DomainError):
    """Invariant violation at construction or update time."""

    code = "VALIDATION_ERROR"
    status_code = 400


class IllegalTransitionError(DomainError):
    """Lifecycle operation called from a status that disallows it."""

    code = "ILLEGAL_TRANSITION"
    status_code = 400


class NotFoundError(DomainError):
    """Required entity does not exist (or is soft-deleted)."""

    code = "NOT_FOUND"
    status_code = 404

    def __init__(self, resource: str, key: str | None = None) -> None:
        self.resource = resource
        self.key = key
        if key:
            message = f"{resource} with identifier '{key}' not found"
        else:
            message = f"{resource} not found"
        super().__init__(message)


class ConflictError(DomainError):
    """Uniqueness or concurrent-modification conflict."""

    code = "CONFLICT"
    status_code = 409


class StorageError(DomainError):
    """Opaque infrastructure failure, propagated unmodified."""

    code = "STORAGE_ERROR"
    status_code = 500


class AuthenticationError(DomainError):
    code = "UNAUTHORIZED"
    status_code = 401


class PermissionDeniedError(DomainError):
    code = "FORBIDDEN"
    status_code = 403
