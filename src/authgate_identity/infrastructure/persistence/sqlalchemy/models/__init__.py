"""SQLAlchemy models for identity management."""

from authgate_identity.infrastructure.persistence.sqlalchemy.models.identity_model import (  # noqa: E501
    IdentityModel,
)

__all__ = ["IdentityModel"]
