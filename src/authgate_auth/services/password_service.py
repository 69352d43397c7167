"""Password hashing service using bcrypt.

Provides salted password hashing and verification. Passwords are
pre-hashed with SHA-256 so that bcrypt's 72-byte input limit never
depends on what the user typed.
"""

import base64
import hashlib

import bcrypt

from authgate_auth.exceptions import HashingError


class PasswordHashingService:
    """Service for secure password hashing and verification.

    Uses bcrypt for password hashing with configurable work factor.

    Examples
    --------
    >>> service = PasswordHashingService()
    >>> hash = service.hash("my_secure_password")
    >>> service.verify("my_secure_password", hash)
    True
    >>> service.verify("wrong_password", hash)
    False
    """

    def __init__(self, rounds: int = 12):
        """Initialize the password hashing service.

        Parameters
        ----------
        rounds
            The bcrypt work factor (log2 of iterations). Default is 12,
            which is a good balance of security and performance.
            Higher values are more secure but slower.
        """
        self._rounds = rounds

    def hash(self, password: str) -> str:
        """Hash a plaintext password.

        Parameters
        ----------
        password
            The plaintext password to hash

        Returns
        -------
        The bcrypt hash as a string

        Raises
        ------
        HashingError
            If the bcrypt primitive fails
        """
        prehashed = self._prehash(password)
        try:
            salt = bcrypt.gensalt(rounds=self._rounds)
            hashed = bcrypt.hashpw(prehashed, salt)
        except (ValueError, TypeError) as e:
            raise HashingError(details={"reason": str(e)}) from e
        return hashed.decode("utf-8")

    def verify(self, password: str, password_hash: str) -> bool:
        """Verify a password against a hash.

        The comparison is done by bcrypt in constant time.

        Parameters
        ----------
        password
            The plaintext password to check
        password_hash
            The bcrypt hash to verify against

        Returns
        -------
        True if password matches, False otherwise

        Raises
        ------
        HashingError
            If ``password_hash`` is not a valid bcrypt hash
        """
        prehashed = self._prehash(password)
        try:
            return bcrypt.checkpw(prehashed, password_hash.encode("utf-8"))
        except (ValueError, TypeError) as e:
            msg = "Stored password hash is malformed"
            raise HashingError(msg) from e

    @staticmethod
    def _prehash(password: str) -> bytes:
        # surrogatepass keeps lone surrogates distinct instead of failing
        digest = hashlib.sha256(password.encode("utf-8", "surrogatepass")).digest()
        return base64.b64encode(digest)
