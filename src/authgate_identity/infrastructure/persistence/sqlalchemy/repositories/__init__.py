"""SQLAlchemy repository implementations for identity management."""

from authgate_identity.infrastructure.persistence.sqlalchemy.repositories.identity_store_repository import (  # noqa: E501
    IdentityStoreSQLAlchemy,
)

__all__ = ["IdentityStoreSQLAlchemy"]
