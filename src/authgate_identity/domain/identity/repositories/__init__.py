from authgate_identity.domain.identity.repositories.identity_store import (
    IdentityStore,
)

__all__ = ["IdentityStore"]
