"""SQLAlchemy implementation of IdentityStore.

Each write commits on its own: lifecycle operations are sequences of
independent steps, and a later step failing must not undo an earlier
one (an identity created before a failed notification stays created).
"""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import datetime
from uuid import UUID

from sqlalchemy import exists, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from authgate_auth.exceptions import AuthError
from authgate_identity.domain.identity import Identity, IdentityStore, normalize_email
from authgate_identity.exceptions import (
    EmailTakenError,
    StorageError,
    UsernameTakenError,
)
from authgate_identity.infrastructure.persistence.sqlalchemy.models import (
    IdentityModel,
)

logger = logging.getLogger(__name__)


class IdentityStoreSQLAlchemy(IdentityStore):
    """SQLAlchemy implementation of IdentityStore."""

    def __init__(self, session: AsyncSession):
        self._session = session

    @asynccontextmanager
    async def _translate_errors(self, operation: str) -> AsyncIterator[None]:
        try:
            yield
        except SQLAlchemyError as e:
            await self._session.rollback()
            logger.error("Identity store %s failed: %s", operation, e)
            raise StorageError(details={"operation": operation}) from e

    def _to_domain(self, model: IdentityModel) -> Identity:
        return Identity.reconstitute(
            id=UUID(model.id),
            username=model.username,
            email=model.email,
            password_hash=model.password_hash,
            verified=model.verified,
            verification_token=model.verification_token,
            reset_token=model.reset_token,
            reset_token_expires_at=model.reset_token_expires_at,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )

    def _to_model(self, identity: Identity) -> IdentityModel:
        return IdentityModel(
            id=str(identity.id),
            username=identity.username,
            email=identity.email,
            password_hash=identity.password_hash,
            verified=identity.verified,
            verification_token=identity.verification_token,
            reset_token=identity.reset_token,
            reset_token_expires_at=identity.reset_token_expires_at,
            created_at=identity.created_at,
            updated_at=identity.updated_at,
        )

    async def _exists(self, *criteria) -> bool:
        stmt = select(exists().where(*criteria))
        result = await self._session.execute(stmt)
        return bool(result.scalar())

    async def _find_one(self, *criteria) -> Identity | None:
        stmt = (
            select(IdentityModel)
            .where(*criteria)
            .execution_options(populate_existing=True)
        )
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return self._to_domain(model) if model else None

    async def _update(self, values: dict, *criteria) -> bool:
        stmt = (
            update(IdentityModel)
            .where(*criteria)
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        result = await self._session.execute(stmt)
        await self._session.commit()
        return result.rowcount > 0  # type: ignore[attr-defined]

    async def exists_by_username(self, username: str) -> bool:
        async with self._translate_errors("exists_by_username"):
            return await self._exists(IdentityModel.username == username)

    async def exists_by_email(self, email: str) -> bool:
        async with self._translate_errors("exists_by_email"):
            return await self._exists(IdentityModel.email == normalize_email(email))

    async def exists_by_verification_token(self, token_digest: str) -> bool:
        async with self._translate_errors("exists_by_verification_token"):
            return await self._exists(
                IdentityModel.verification_token == token_digest,
            )

    async def insert(self, identity: Identity) -> None:
        async with self._translate_errors("insert"):
            self._session.add(self._to_model(identity))
            try:
                await self._session.commit()
            except IntegrityError as e:
                await self._session.rollback()
                raise self._unique_violation(e, identity) from e
        logger.info("Created identity: %s", identity.id)

    def _unique_violation(self, error: IntegrityError, identity: Identity) -> AuthError:
        message = str(error.orig).lower()
        if "username" in message:
            return UsernameTakenError(identity.username)
        if "email" in message:
            return EmailTakenError(identity.email)
        logger.error("Unexpected integrity error on insert: %s", error)
        return StorageError(details={"operation": "insert"})

    async def find_by_email(self, email: str) -> Identity | None:
        async with self._translate_errors("find_by_email"):
            return await self._find_one(IdentityModel.email == normalize_email(email))

    async def find_by_verification_token(self, token_digest: str) -> Identity | None:
        async with self._translate_errors("find_by_verification_token"):
            return await self._find_one(
                IdentityModel.verification_token == token_digest,
            )

    async def set_verified(self, token_digest: str) -> bool:
        async with self._translate_errors("set_verified"):
            return await self._update(
                {"verified": True, "verification_token": None},
                IdentityModel.verification_token == token_digest,
            )

    async def set_reset_token(
        self,
        email: str,
        token_digest: str,
        expires_at: datetime,
    ) -> bool:
        async with self._translate_errors("set_reset_token"):
            return await self._update(
                {"reset_token": token_digest, "reset_token_expires_at": expires_at},
                IdentityModel.email == normalize_email(email),
            )

    async def exists_by_username_and_reset_token(
        self,
        username: str,
        token_digest: str,
        now: datetime,
    ) -> bool:
        async with self._translate_errors("exists_by_username_and_reset_token"):
            return await self._exists(
                IdentityModel.username == username,
                IdentityModel.reset_token == token_digest,
                IdentityModel.reset_token_expires_at > now,
            )

    async def update_password(
        self,
        email: str,
        password_hash: str,
        *,
        username: str,
        reset_token_digest: str,
        now: datetime,
    ) -> bool:
        async with self._translate_errors("update_password"):
            return await self._update(
                {
                    "password_hash": password_hash,
                    "reset_token": None,
                    "reset_token_expires_at": None,
                },
                IdentityModel.email == normalize_email(email),
                IdentityModel.username == username,
                IdentityModel.reset_token == reset_token_digest,
                IdentityModel.reset_token_expires_at > now,
            )

    async def clear_reset_token(self, username: str, token_digest: str) -> None:
        async with self._translate_errors("clear_reset_token"):
            await self._update(
                {"reset_token": None, "reset_token_expires_at": None},
                IdentityModel.username == username,
                IdentityModel.reset_token == token_digest,
            )
