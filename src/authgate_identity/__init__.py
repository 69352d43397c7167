"""authgate identity - Account lifecycle.

Architecture:
    authgate_identity/
    ├── domain/identity/       # Identity aggregate, Email, IdentityStore contract
    ├── application/           # AccountLifecycleService, policy, outcomes, retry
    ├── infrastructure/        # SQLAlchemy store, SMTP notifier
    └── exceptions.py          # Identity lifecycle exceptions

Usage:
    from authgate_identity import AccountLifecycleService, LifecyclePolicy
"""

from authgate_identity.application.outcomes import (
    Authenticated,
    Created,
    LoggedOut,
    PasswordChanged,
    ResetRequested,
    Verified,
)
from authgate_identity.application.policy import LifecyclePolicy
from authgate_identity.application.retry import RetryPolicy
from authgate_identity.application.services import AccountLifecycleService
from authgate_identity.domain.identity import Email, Identity, IdentityStore
from authgate_identity.exceptions import (
    CreatedButNotNotifiedError,
    EmailTakenError,
    IdentityNotFoundError,
    InvalidEmailError,
    InvalidResetPairError,
    MissingFieldError,
    MissingTokenError,
    NotificationConfigError,
    NotificationError,
    StorageError,
    UsernameTakenError,
)
from authgate_identity.infrastructure.email import EmailService, Notifier

__all__ = [
    # Application
    "AccountLifecycleService",
    "LifecyclePolicy",
    "RetryPolicy",
    # Outcomes
    "Authenticated",
    "Created",
    "LoggedOut",
    "PasswordChanged",
    "ResetRequested",
    "Verified",
    # Domain
    "Email",
    "Identity",
    "IdentityStore",
    # Notifier
    "EmailService",
    "Notifier",
    # Exceptions
    "CreatedButNotNotifiedError",
    "EmailTakenError",
    "IdentityNotFoundError",
    "InvalidEmailError",
    "InvalidResetPairError",
    "MissingFieldError",
    "MissingTokenError",
    "NotificationConfigError",
    "NotificationError",
    "StorageError",
    "UsernameTakenError",
]
