"""Session issuing and invalidation.

Mints access (short-lived) and refresh (long-lived) session tokens.
There is no server-side revocation list: logging out hands the client
replacement tokens whose expiry already lies in the past, so a token
copied elsewhere stays valid until its own expiry.
"""

import logging
from collections.abc import Callable
from datetime import datetime, timedelta
from uuid import UUID

from authgate_auth.exceptions import InvalidTokenError
from authgate_auth.schemas import (
    IssuedSession,
    SessionClaims,
    SessionPair,
    SessionPurpose,
)
from authgate_auth.services.claims_signer import ClaimsSigner
from authgate_auth.time import utc_now

logger = logging.getLogger(__name__)


class SessionIssuer:
    """Builds, signs and verifies session claim sets.

    Examples
    --------
    >>> issuer = SessionIssuer(signer, issuer="authgate")
    >>> pair = issuer.issue_pair(user_id)
    >>> pair.access.expires_at - pair.refresh.expires_at < timedelta(0)
    True
    """

    DEFAULT_ACCESS_TTL = timedelta(minutes=15)
    DEFAULT_REFRESH_TTL = timedelta(days=7)

    def __init__(
        self,
        signer: ClaimsSigner,
        issuer: str,
        access_ttl: timedelta = DEFAULT_ACCESS_TTL,
        refresh_ttl: timedelta = DEFAULT_REFRESH_TTL,
        clock: Callable[[], datetime] = utc_now,
    ):
        """Initialize the session issuer.

        Parameters
        ----------
        signer
            Capability that signs and verifies claim sets
        issuer
            Fixed issuer identifier written into every token
        access_ttl
            Lifetime of access sessions
        refresh_ttl
            Lifetime of refresh sessions
        clock
            Source of the current time (UTC, timezone-aware)
        """
        self._signer = signer
        self._issuer = issuer
        self._ttls = {
            SessionPurpose.ACCESS: access_ttl,
            SessionPurpose.REFRESH: refresh_ttl,
        }
        self._clock = clock

    def ttl_for(self, purpose: SessionPurpose) -> timedelta:
        return self._ttls[purpose]

    def issue_session(self, user_id: UUID, purpose: SessionPurpose) -> IssuedSession:
        """Sign a fresh session for ``user_id``.

        Raises
        ------
        SigningError
            If the claims signer fails
        """
        now = self._now()
        expires_at = now + self.ttl_for(purpose)
        return self._sign(user_id, purpose, now, expires_at)

    def issue_pair(self, user_id: UUID) -> SessionPair:
        """Issue the access session first, then the refresh session."""
        access = self.issue_session(user_id, SessionPurpose.ACCESS)
        refresh = self.issue_session(user_id, SessionPurpose.REFRESH)
        return SessionPair(access=access, refresh=refresh)

    def invalidate(self, purpose: SessionPurpose) -> IssuedSession:
        """Produce a replacement token that is already expired.

        The expiry is set to now minus the purpose's TTL, so any holder
        presenting it is rejected by expiry checking alone.
        """
        now = self._now()
        expires_at = now - self.ttl_for(purpose)
        return self._sign(None, purpose, now, expires_at)

    def invalidate_pair(self) -> SessionPair:
        return SessionPair(
            access=self.invalidate(SessionPurpose.ACCESS),
            refresh=self.invalidate(SessionPurpose.REFRESH),
        )

    def verify_session(self, token: str, purpose: SessionPurpose) -> SessionClaims:
        """Verify a session token presented for ``purpose``.

        Raises
        ------
        InvalidTokenError
            If the token is invalid, expired, or issued for another purpose
        """
        claims = self._signer.verify(token)
        if claims.purpose is not purpose:
            msg = f"Wrong token purpose: expected {purpose.value}"
            raise InvalidTokenError(msg)
        if claims.user_id is None:
            msg = "Token is not bound to an identity"
            raise InvalidTokenError(msg)
        return claims

    def _sign(
        self,
        user_id: UUID | None,
        purpose: SessionPurpose,
        issued_at: datetime,
        expires_at: datetime,
    ) -> IssuedSession:
        claims = SessionClaims(
            purpose=purpose,
            user_id=user_id,
            issuer=self._issuer,
            issued_at=issued_at,
            expires_at=expires_at,
        )
        token = self._signer.sign(claims)
        logger.debug(
            "Issued %s session (user: %s, expires: %s)",
            purpose.value,
            user_id,
            expires_at.isoformat(),
        )
        return IssuedSession(purpose=purpose, token=token, expires_at=expires_at)

    def _now(self) -> datetime:
        # Signed tokens carry whole seconds
        return self._clock().replace(microsecond=0)
