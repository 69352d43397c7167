"""Value objects for the identity domain."""

from authgate_identity.domain.identity.value_objects.email import (
    Email,
    normalize_email,
)

__all__ = [
    "Email",
    "normalize_email",
]
