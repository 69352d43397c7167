"""SQLAlchemy model for identities."""

from datetime import datetime

from sqlalchemy import Boolean, DateTime, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from authgate_identity.infrastructure.persistence.sqlalchemy.base import (
    IdentityBase,
    TimestampMixin,
)


class IdentityModel(IdentityBase, TimestampMixin):
    """SQLAlchemy model for a registered identity.

    Username and email are each unique, which is what turns a signup
    race into a clean conflict instead of a duplicate account.
    """

    __tablename__ = "identities"

    id: Mapped[str] = mapped_column(
        Uuid(as_uuid=False),
        primary_key=True,
    )
    username: Mapped[str] = mapped_column(
        String(150),
        unique=True,
        nullable=False,
        index=True,
    )
    email: Mapped[str] = mapped_column(
        String(255),
        unique=True,
        nullable=False,
        index=True,
    )
    password_hash: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
    )
    verified: Mapped[bool] = mapped_column(
        Boolean,
        default=False,
        nullable=False,
    )
    # SHA-256 hex digests, never the raw tokens
    verification_token: Mapped[str | None] = mapped_column(
        String(64),
        nullable=True,
        index=True,
    )
    reset_token: Mapped[str | None] = mapped_column(
        String(64),
        nullable=True,
    )
    reset_token_expires_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )

    def __repr__(self) -> str:
        return f"<IdentityModel(id={self.id}, username={self.username})>"
