"""SQLAlchemy implementation for authgate_identity persistence.

Provides:
- IdentityBase: Declarative base for identity models
- IdentityModel: SQLAlchemy model for identities
- IdentityStoreSQLAlchemy: IdentityStore implementation
"""

from authgate_identity.infrastructure.persistence.sqlalchemy.base import IdentityBase
from authgate_identity.infrastructure.persistence.sqlalchemy.models import (
    IdentityModel,
)
from authgate_identity.infrastructure.persistence.sqlalchemy.repositories import (
    IdentityStoreSQLAlchemy,
)

__all__ = [
    "IdentityBase",
    "IdentityModel",
    "IdentityStoreSQLAlchemy",
]
