"""Identity domain: the account aggregate and its persistence contract."""

from authgate_identity.domain.identity.aggregates import Identity
from authgate_identity.domain.identity.repositories import IdentityStore
from authgate_identity.domain.identity.value_objects import Email, normalize_email

__all__ = [
    "Email",
    "Identity",
    "IdentityStore",
    "normalize_email",
]
