"""Identity aggregate: one registered account."""

from datetime import datetime
from typing import Union
from uuid import UUID, uuid4

from authgate_auth.time import ensure_tz_aware, utc_now
from authgate_identity.domain.identity.value_objects.email import Email


class Identity:
    """
    Identity aggregate root.

    One-time tokens are held only as SHA-256 digests. The raw token
    exists in the notification sent to the user and nowhere else.
    """

    def __init__(
        self,
        username: str,
        email: Union[str, Email],
        password_hash: str,
        id: UUID | None = None,
        verified: bool = False,
        verification_token: str | None = None,
        reset_token: str | None = None,
        reset_token_expires_at: datetime | None = None,
        created_at: datetime | None = None,
        updated_at: datetime | None = None,
    ):
        if not username:
            msg = "Identity requires a username"
            raise ValueError(msg)
        if not password_hash:
            msg = "Identity requires a password hash"
            raise ValueError(msg)

        self._id = id or uuid4()
        self._username = username
        self._email = email if isinstance(email, Email) else Email(email)
        self._password_hash = password_hash
        self._verified = verified
        self._verification_token = verification_token
        self._reset_token = reset_token
        self._reset_token_expires_at = (
            ensure_tz_aware(reset_token_expires_at) if reset_token_expires_at else None
        )
        self._created_at = ensure_tz_aware(created_at) if created_at else utc_now()
        self._updated_at = ensure_tz_aware(updated_at) if updated_at else utc_now()

    @property
    def id(self) -> UUID:
        return self._id

    @property
    def username(self) -> str:
        return self._username

    @property
    def email(self) -> str:
        return self._email.value

    @property
    def password_hash(self) -> str:
        return self._password_hash

    @property
    def verified(self) -> bool:
        return self._verified

    @property
    def verification_token(self) -> str | None:
        """Digest of the pending email verification token."""
        return self._verification_token

    @property
    def reset_token(self) -> str | None:
        """Digest of the pending password reset token."""
        return self._reset_token

    @property
    def reset_token_expires_at(self) -> datetime | None:
        return self._reset_token_expires_at

    @property
    def created_at(self) -> datetime:
        return self._created_at

    @property
    def updated_at(self) -> datetime:
        return self._updated_at

    @classmethod
    def create(
        cls,
        username: str,
        email: Union[str, Email],
        password_hash: str,
        verification_token: str,
    ) -> "Identity":
        return cls(
            username=username,
            email=email,
            password_hash=password_hash,
            verification_token=verification_token,
        )

    @classmethod
    def reconstitute(
        cls,
        id: UUID,
        username: str,
        email: Union[str, Email],
        password_hash: str,
        verified: bool,
        verification_token: str | None,
        reset_token: str | None,
        reset_token_expires_at: datetime | None,
        created_at: datetime,
        updated_at: datetime,
    ) -> "Identity":
        return cls(
            id=id,
            username=username,
            email=email,
            password_hash=password_hash,
            verified=verified,
            verification_token=verification_token,
            reset_token=reset_token,
            reset_token_expires_at=reset_token_expires_at,
            created_at=created_at,
            updated_at=updated_at,
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Identity):
            return NotImplemented
        return self._id == other._id

    def __hash__(self) -> int:
        return hash(self._id)

    def __repr__(self) -> str:
        return f"Identity(id={self._id}, username={self._username})"
