"""Results of successful lifecycle operations."""

from dataclasses import dataclass
from uuid import UUID

from authgate_auth.schemas import SessionPair


@dataclass(frozen=True)
class Created:
    identity_id: UUID
    sessions: SessionPair


@dataclass(frozen=True)
class Authenticated:
    identity_id: UUID
    sessions: SessionPair


@dataclass(frozen=True)
class LoggedOut:
    """Replacement sessions whose expiry already lies in the past."""

    sessions: SessionPair


@dataclass(frozen=True)
class Verified:
    identity_id: UUID


@dataclass(frozen=True)
class ResetRequested:
    """Returned whether or not the email belongs to an account."""

    email: str


@dataclass(frozen=True)
class PasswordChanged:
    username: str
