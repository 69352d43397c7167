"""Session schemas and data structures.

These are simple data classes used for transferring session
data between components.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from uuid import UUID


class SessionPurpose(str, Enum):
    """What a session token may be used for."""

    ACCESS = "access"
    REFRESH = "refresh"


@dataclass(frozen=True)
class SessionClaims:
    """Claim set carried by a signed session token.

    Attributes
    ----------
    purpose
        Either access or refresh (the ``sub`` claim)
    user_id
        Identity the session belongs to; ``None`` for the expired
        replacement tokens issued at logout
    issuer
        Fixed issuer identifier (the ``iss`` claim)
    issued_at
        Token creation time
    expires_at
        Token expiry time
    """

    purpose: SessionPurpose
    user_id: UUID | None
    issuer: str
    issued_at: datetime
    expires_at: datetime


@dataclass(frozen=True)
class IssuedSession:
    """A signed session token together with its expiry."""

    purpose: SessionPurpose
    token: str
    expires_at: datetime


@dataclass(frozen=True)
class SessionPair:
    """The access and refresh sessions handed out together."""

    access: IssuedSession
    refresh: IssuedSession
