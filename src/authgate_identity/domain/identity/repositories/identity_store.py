"""Abstract identity store.

Every mutating method is a single conditional write whose return value
tells whether a record matched, so callers never need a separate
read-then-write step.
"""

from abc import ABC, abstractmethod
from datetime import datetime

from authgate_identity.domain.identity.aggregates import Identity


class IdentityStore(ABC):
    """Persistence contract for identities.

    Implementations translate their own failures into ``StorageError``
    and unique-key violations on insert into ``UsernameTakenError`` or
    ``EmailTakenError``.
    """

    @abstractmethod
    async def exists_by_username(self, username: str) -> bool:
        """Check whether an identity holds ``username``."""

    @abstractmethod
    async def exists_by_email(self, email: str) -> bool:
        """Check whether an identity holds ``email`` (normalized)."""

    @abstractmethod
    async def exists_by_verification_token(self, token_digest: str) -> bool:
        """Check whether a pending verification token has this digest."""

    @abstractmethod
    async def insert(self, identity: Identity) -> None:
        """Insert a new identity.

        Raises
        ------
        UsernameTakenError
            If another identity already holds the username
        EmailTakenError
            If another identity already holds the email
        """

    @abstractmethod
    async def find_by_email(self, email: str) -> Identity | None:
        """Find an identity by its normalized email."""

    @abstractmethod
    async def find_by_verification_token(self, token_digest: str) -> Identity | None:
        """Find the identity whose pending verification token has this digest."""

    @abstractmethod
    async def set_verified(self, token_digest: str) -> bool:
        """Mark verified the identity holding this verification token.

        The token is cleared in the same write, so it works once.

        Returns
        -------
        True if an identity matched, False otherwise
        """

    @abstractmethod
    async def set_reset_token(
        self,
        email: str,
        token_digest: str,
        expires_at: datetime,
    ) -> bool:
        """Store a reset token on the identity with ``email``.

        Any earlier reset token of that identity is replaced.

        Returns
        -------
        True if an identity matched, False otherwise
        """

    @abstractmethod
    async def exists_by_username_and_reset_token(
        self,
        username: str,
        token_digest: str,
        now: datetime,
    ) -> bool:
        """Check that ``username`` holds this unexpired reset token."""

    @abstractmethod
    async def update_password(
        self,
        email: str,
        password_hash: str,
        *,
        username: str,
        reset_token_digest: str,
        now: datetime,
    ) -> bool:
        """Replace the password and consume the reset token.

        The write only applies to the identity matching ``email``,
        ``username`` and the unexpired reset token together.

        Returns
        -------
        True if an identity matched, False otherwise
        """

    @abstractmethod
    async def clear_reset_token(self, username: str, token_digest: str) -> None:
        """Drop the reset token of ``username`` if it still has this digest."""
