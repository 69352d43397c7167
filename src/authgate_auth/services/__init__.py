"""Authentication services.

Provides password hashing, one-time token generation and session
token management.
"""

from authgate_auth.services.claims_signer import ClaimsSigner, JWTClaimsSigner
from authgate_auth.services.password_service import PasswordHashingService
from authgate_auth.services.session_issuer import SessionIssuer
from authgate_auth.services.token_generator import (
    BASE62_ALPHABET,
    TokenGenerator,
    token_digest,
)

__all__ = [
    "BASE62_ALPHABET",
    "ClaimsSigner",
    "JWTClaimsSigner",
    "PasswordHashingService",
    "SessionIssuer",
    "TokenGenerator",
    "token_digest",
]
