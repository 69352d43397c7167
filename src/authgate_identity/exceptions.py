"""Identity lifecycle exceptions.

These exceptions are raised by the authgate_identity package and are
decoded by the transport layer according to their ``ErrorKind``.
"""

from typing import Any
from uuid import UUID

from authgate_auth.exceptions import AuthError, ErrorCode, ErrorKind
from authgate_auth.schemas import SessionPair


class UsernameTakenError(AuthError):
    """Username already registered."""

    kind = ErrorKind.CONFLICT
    code = ErrorCode.USERNAME_TAKEN

    def __init__(self, username: str) -> None:
        self.username = username
        super().__init__("This username is taken", details={"username": username})


class EmailTakenError(AuthError):
    """Email already registered."""

    kind = ErrorKind.CONFLICT
    code = ErrorCode.EMAIL_TAKEN

    def __init__(self, email: str) -> None:
        self.email = email
        super().__init__("This email is taken", details={"email": email})


class IdentityNotFoundError(AuthError):
    """No identity is associated with the given email."""

    kind = ErrorKind.NOT_FOUND
    code = ErrorCode.IDENTITY_NOT_FOUND

    def __init__(self, email: str) -> None:
        self.email = email
        super().__init__(
            "This email is not associated with an account",
            details={"email": email},
        )


class InvalidResetPairError(AuthError):
    """The (username, reset token) pair does not match the store."""

    kind = ErrorKind.NOT_FOUND
    code = ErrorCode.INVALID_RESET_PAIR

    def __init__(self, username: str) -> None:
        self.username = username
        super().__init__(
            "Username and token pair does not exist",
            details={"username": username},
        )


class MissingFieldError(AuthError):
    """A required input field is missing or empty."""

    kind = ErrorKind.BAD_INPUT
    code = ErrorCode.MISSING_FIELD

    def __init__(self, field: str) -> None:
        self.field = field
        super().__init__(f"Invalid {field}", details={"field": field})


class MissingTokenError(AuthError):
    """The request did not carry a token."""

    kind = ErrorKind.BAD_INPUT
    code = ErrorCode.MISSING_TOKEN

    def __init__(self) -> None:
        super().__init__("Parameter 'token' is missing")


class InvalidEmailError(AuthError):
    """Raised when email is missing or its format is invalid."""

    kind = ErrorKind.BAD_INPUT
    code = ErrorCode.INVALID_EMAIL

    def __init__(self, message: str = "Invalid email address") -> None:
        super().__init__(message)


class StorageError(AuthError):
    """The identity store failed or timed out."""

    code = ErrorCode.STORAGE_FAILED

    def __init__(
        self,
        message: str = "Identity store failure",
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, details)


class NotificationError(AuthError):
    """The notifier failed or timed out."""

    code = ErrorCode.NOTIFICATION_FAILED

    def __init__(
        self,
        message: str = "Error sending notification",
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, details)


class NotificationConfigError(NotificationError):
    """The notifier cannot deliver this message no matter how often it
    is retried (unknown template, missing variable, no SMTP host).
    """


class CreatedButNotNotifiedError(NotificationError):
    """Signup stored the identity and issued sessions, but the
    verification notification could not be delivered.

    The insert is not rolled back; the identity and its sessions are
    carried so the caller can still hand them to the client.
    """

    code = ErrorCode.CREATED_BUT_NOT_NOTIFIED

    def __init__(self, identity_id: UUID, sessions: SessionPair) -> None:
        self.identity_id = identity_id
        self.sessions = sessions
        super().__init__(
            "Account created but the verification email could not be sent",
            details={"identity_id": str(identity_id)},
        )
