"""Authentication exceptions and the error taxonomy.

Every failure raised by the authgate packages is an ``AuthError`` tagged
with one ``ErrorKind``. The kind is decoded once, at the transport
boundary, into a user-visible status; ``details`` is structured context
for server-side logs and is never exposed to clients.
"""

from enum import Enum
from typing import Any


class ErrorKind(str, Enum):
    """Closed set of failure classes."""

    CONFLICT = "conflict"
    NOT_FOUND = "not_found"
    BAD_INPUT = "bad_input"
    BAD_CREDENTIALS = "bad_credentials"
    INTERNAL_FAILURE = "internal_failure"


class ErrorCode(str, Enum):
    """Stable error codes for API clients.

    These codes are part of the public API contract. Should not be changed.
    """

    # Conflict
    USERNAME_TAKEN = "USERNAME_TAKEN"
    EMAIL_TAKEN = "EMAIL_TAKEN"

    # Not found
    IDENTITY_NOT_FOUND = "IDENTITY_NOT_FOUND"
    INVALID_TOKEN = "INVALID_TOKEN"
    INVALID_RESET_PAIR = "INVALID_RESET_PAIR"

    # Bad input
    MISSING_FIELD = "MISSING_FIELD"
    MISSING_TOKEN = "MISSING_TOKEN"
    INVALID_EMAIL = "INVALID_EMAIL"

    # Bad credentials
    INVALID_CREDENTIALS = "INVALID_CREDENTIALS"

    # Internal failures
    HASHING_FAILED = "HASHING_FAILED"
    SIGNING_FAILED = "SIGNING_FAILED"
    STORAGE_FAILED = "STORAGE_FAILED"
    NOTIFICATION_FAILED = "NOTIFICATION_FAILED"
    CREATED_BUT_NOT_NOTIFIED = "CREATED_BUT_NOT_NOTIFIED"
    INTERNAL_ERROR = "INTERNAL_ERROR"


class AuthError(Exception):
    """Base exception for all authentication errors."""

    kind: ErrorKind = ErrorKind.INTERNAL_FAILURE
    code: ErrorCode = ErrorCode.INTERNAL_ERROR

    def __init__(
        self,
        message: str = "Authentication error",
        details: dict[str, Any] | None = None,
    ):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"message={self.message!r}, "
            f"code={self.code.value!r}, "
            f"details={self.details!r})"
        )


class InvalidTokenError(AuthError):
    """Raised when a token is invalid, expired, or malformed."""

    kind = ErrorKind.NOT_FOUND
    code = ErrorCode.INVALID_TOKEN

    def __init__(
        self,
        message: str = "Invalid or expired token",
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message, details)


class InvalidCredentialsError(AuthError):
    """Raised when the password does not match during signin."""

    kind = ErrorKind.BAD_CREDENTIALS
    code = ErrorCode.INVALID_CREDENTIALS

    def __init__(self, message: str = "Incorrect password"):
        super().__init__(message)


class HashingError(AuthError):
    """Raised when the password hashing primitive fails."""

    code = ErrorCode.HASHING_FAILED

    def __init__(
        self,
        message: str = "Error hashing password",
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message, details)


class SigningError(AuthError):
    """Raised when a session claim set cannot be signed."""

    code = ErrorCode.SIGNING_FAILED

    def __init__(
        self,
        message: str = "Error signing session token",
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message, details)


class TokenCollisionError(AuthError):
    """Raised when no collision-free one-time token could be generated."""

    def __init__(
        self,
        message: str = "Could not generate a unique token",
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message, details)
