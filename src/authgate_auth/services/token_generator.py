"""Opaque one-time token generation.

Tokens are drawn uniformly from the 62 base62 symbols using the
``secrets`` CSPRNG. They are never derived from user data, and every
call produces an independent token, so the email verification and
password reset flows never share one.
"""

import hashlib
import logging
import secrets
import string
from collections.abc import Awaitable, Callable

from authgate_auth.exceptions import TokenCollisionError

logger = logging.getLogger(__name__)

BASE62_ALPHABET = string.digits + string.ascii_uppercase + string.ascii_lowercase


class TokenGenerator:
    """Generator for single-use verification and reset tokens.

    Examples
    --------
    >>> generator = TokenGenerator()
    >>> token = generator.generate(6)
    >>> len(token)
    6
    """

    def generate(self, length: int) -> str:
        """Return a random token of ``length`` base62 symbols."""
        if length < 1:
            msg = "Token length must be positive"
            raise ValueError(msg)
        return "".join(secrets.choice(BASE62_ALPHABET) for _ in range(length))

    async def generate_unique(
        self,
        length: int,
        is_taken: Callable[[str], Awaitable[bool]],
        max_attempts: int = 5,
    ) -> str:
        """Generate a token whose digest ``is_taken`` reports as free.

        The generator alone does not guarantee global uniqueness, so the
        caller supplies a lookup against the store.

        Raises
        ------
        TokenCollisionError
            If every attempt collided
        """
        for attempt in range(1, max_attempts + 1):
            token = self.generate(length)
            if not await is_taken(token_digest(token)):
                return token
            logger.warning(
                "Generated token collided with an existing one (attempt %d/%d)",
                attempt,
                max_attempts,
            )

        raise TokenCollisionError(
            details={"attempts": max_attempts, "length": length},
        )


def token_digest(token: str) -> str:
    """SHA-256 hex digest under which a one-time token is stored."""
    return hashlib.sha256(token.encode()).hexdigest()
