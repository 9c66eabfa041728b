from __future__ import annotations

from typing import Optional


class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class NotFoundError(DomainError):
    """Raised when a referenced record does not exist."""


class AuthenticationError(DomainError):
    """Raised when login credentials or a session token are invalid."""


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""


class DuplicateActionError(DomainError):
    """Raised when the same action is already in flight."""


class RemoteError(DomainError):
    """Error returned by a backend function call."""

    def __init__(self, message: str, *, status: int = 500, ip: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.status = int(status)
        self.ip = ip


class UnauthorizedLocationError(RemoteError):
    """Caller address is not on the attendance allow-list."""

    def __init__(self, ip: str, message: str = "You must be on the office network to check in/out"):
        super().__init__(message, status=403, ip=ip)


class StorageError(Exception):
    """Persistent store read/write failure.

    Not a DomainError: store failures are not turned into user-facing messages.
    """
