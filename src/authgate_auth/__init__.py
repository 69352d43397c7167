"""authgate auth - Generic credential infrastructure.

This package provides authentication infrastructure that is independent
of the identity domain. It handles:
- Password hashing (bcrypt)
- Opaque one-time token generation (base62)
- Session token issuing and verification (JWT)

Architecture:
    authgate_auth/
    ├── services/           # Pure logic (hashing, tokens, sessions)
    ├── schemas.py          # Data classes
    ├── time.py             # UTC helpers
    └── exceptions.py       # Error taxonomy and auth exceptions

Usage:
    from authgate_auth import PasswordHashingService, SessionIssuer
"""

from authgate_auth.exceptions import (
    AuthError,
    ErrorCode,
    ErrorKind,
    HashingError,
    InvalidCredentialsError,
    InvalidTokenError,
    SigningError,
    TokenCollisionError,
)
from authgate_auth.schemas import (
    IssuedSession,
    SessionClaims,
    SessionPair,
    SessionPurpose,
)
from authgate_auth.services import (
    ClaimsSigner,
    JWTClaimsSigner,
    PasswordHashingService,
    SessionIssuer,
    TokenGenerator,
    token_digest,
)

__all__ = [
    # Services
    "ClaimsSigner",
    "JWTClaimsSigner",
    "PasswordHashingService",
    "SessionIssuer",
    "TokenGenerator",
    "token_digest",
    # Schemas
    "IssuedSession",
    "SessionClaims",
    "SessionPair",
    "SessionPurpose",
    # Exceptions
    "AuthError",
    "ErrorCode",
    "ErrorKind",
    "HashingError",
    "InvalidCredentialsError",
    "InvalidTokenError",
    "SigningError",
    "TokenCollisionError",
]
