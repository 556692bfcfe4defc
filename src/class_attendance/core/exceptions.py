from __future__ import annotations

from typing import Optional


class DomainError(Exception):
    """Base exception for business rule violations."""

    status_code = 400

    def __init__(self, message: str = ""):
        super().__init__(message)
        self.message = message


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""

    def __init__(self, message: str, *, field: Optional[str] = None, errors: Optional[dict] = None):
        super().__init__(message)
        self.field = field
        self.errors = errors or ({field: message} if field else {})


class AuthenticationError(DomainError):
    """Raised when login credentials are invalid or the request is not authenticated."""

    status_code = 401


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""

    status_code = 403


class NotFoundError(DomainError):
    status_code = 404


class DuplicateMembershipError(DomainError):
    """Raised when a student is already a member of the subject or section."""


class DuplicateUsernameError(DomainError):
    pass


class StoreUnavailableError(DomainError):
    """Raised when the database cannot complete an operation. Never retried here."""

    status_code = 500
