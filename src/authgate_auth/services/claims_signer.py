"""Claims signer backed by JWT.

Serializes session claim sets into signed tokens and verifies them.
"""

from datetime import datetime, timezone
from typing import Any, Protocol
from uuid import UUID

import jwt

from authgate_auth.exceptions import InvalidTokenError, SigningError
from authgate_auth.schemas import SessionClaims, SessionPurpose


class ClaimsSigner(Protocol):
    def sign(self, claims: SessionClaims) -> str: ...

    def verify(self, token: str) -> SessionClaims: ...


class JWTClaimsSigner:
    """HS256 JWT implementation of the claims signer.

    Wire claims: ``sub`` (purpose), ``user_id``, ``iss``, ``iat``, ``exp``.

    Examples
    --------
    >>> signer = JWTClaimsSigner(secret_key="your-secret-key", issuer="authgate")
    >>> token = signer.sign(claims)
    >>> signer.verify(token).purpose
    <SessionPurpose.ACCESS: 'access'>
    """

    ALGORITHM = "HS256"

    def __init__(self, secret_key: str, issuer: str):
        """Initialize the signer.

        Parameters
        ----------
        secret_key
            Secret key for signing tokens. Must be kept secure.
        issuer
            Issuer identifier written into and required on every token
        """
        if not secret_key:
            msg = "JWT secret key cannot be empty"
            raise ValueError(msg)

        self._secret_key = secret_key
        self._issuer = issuer

    def sign(self, claims: SessionClaims) -> str:
        """Encode and sign a claim set.

        Raises
        ------
        SigningError
            If the claims cannot be encoded or signed
        """
        payload: dict[str, Any] = {
            "sub": claims.purpose.value,
            "iss": claims.issuer,
            "iat": claims.issued_at,
            "exp": claims.expires_at,
        }
        if claims.user_id is not None:
            payload["user_id"] = str(claims.user_id)

        try:
            return jwt.encode(payload, self._secret_key, algorithm=self.ALGORITHM)
        except (jwt.PyJWTError, TypeError, ValueError) as e:
            raise SigningError(details={"purpose": claims.purpose.value}) from e

    def verify(self, token: str) -> SessionClaims:
        """Verify a token and decode its claim set.

        Raises
        ------
        InvalidTokenError
            If token is invalid, expired, from another issuer or malformed
        """
        try:
            payload = jwt.decode(
                token,
                self._secret_key,
                algorithms=[self.ALGORITHM],
                issuer=self._issuer,
                options={"require": ["sub", "iss", "iat", "exp"]},
            )

            raw_user_id = payload.get("user_id")
            return SessionClaims(
                purpose=SessionPurpose(payload["sub"]),
                user_id=UUID(raw_user_id) if raw_user_id else None,
                issuer=payload["iss"],
                issued_at=datetime.fromtimestamp(payload["iat"], tz=timezone.utc),
                expires_at=datetime.fromtimestamp(payload["exp"], tz=timezone.utc),
            )

        except jwt.ExpiredSignatureError as e:
            raise InvalidTokenError("Token has expired") from e
        except jwt.InvalidTokenError as e:
            raise InvalidTokenError(f"Invalid token: {e}") from e
        except (KeyError, ValueError) as e:
            raise InvalidTokenError(f"Malformed token payload: {e}") from e
