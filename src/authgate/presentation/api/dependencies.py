"""FastAPI dependencies.

Builds the lifecycle controller per request from the shared engine and
the collaborators configured in settings.
"""

import logging
from datetime import timedelta
from functools import lru_cache
from pathlib import Path
from typing import Annotated, AsyncGenerator

from fastapi import Depends
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from authgate.presentation.api.config import get_api_settings
from authgate_auth.services import (
    JWTClaimsSigner,
    PasswordHashingService,
    SessionIssuer,
    TokenGenerator,
)
from authgate_config.settings import Settings
from authgate_identity import AccountLifecycleService, LifecyclePolicy
from authgate_identity.infrastructure.email import EmailService, Notifier
from authgate_identity.infrastructure.persistence.sqlalchemy import (
    IdentityBase,
    IdentityStoreSQLAlchemy,
)

logger = logging.getLogger(__name__)

SettingsDep = Annotated[Settings, Depends(get_api_settings)]


@lru_cache(maxsize=1)
def get_engine() -> AsyncEngine:
    """
    Get the shared async database engine (singleton).

    The engine manages the connection pool and is reused across all requests.

    Returns
    -------
    AsyncEngine instance
    """
    return create_async_engine(
        get_api_settings().database_url,
        echo=False,
        pool_pre_ping=True,  # Verify connections before use
    )


@lru_cache(maxsize=1)
def get_session_maker() -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        get_engine(),
        class_=AsyncSession,
        expire_on_commit=False,
    )


async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """
    Database session dependency.

    The identity store commits each write itself, so the session is
    only closed here.

    Yields
    ------
    AsyncSession for database operations
    """
    async with get_session_maker()() as session:
        yield session


DBSession = Annotated[AsyncSession, Depends(get_db_session)]


def get_password_service(settings: SettingsDep) -> PasswordHashingService:
    return PasswordHashingService(rounds=settings.bcrypt_rounds)


def get_token_generator() -> TokenGenerator:
    return TokenGenerator()


def get_session_issuer(settings: SettingsDep) -> SessionIssuer:
    signer = JWTClaimsSigner(
        secret_key=settings.jwt_secret_key.get_secret_value(),
        issuer=settings.jwt_issuer,
    )
    return SessionIssuer(
        signer,
        issuer=settings.jwt_issuer,
        access_ttl=timedelta(minutes=settings.jwt_access_token_expire_minutes),
        refresh_ttl=timedelta(days=settings.jwt_refresh_token_expire_days),
    )


def get_notifier(settings: SettingsDep) -> Notifier:
    return EmailService(settings)


def get_lifecycle_service(  # noqa: PLR0913
    session: DBSession,
    settings: SettingsDep,
    password_service: Annotated[PasswordHashingService, Depends(get_password_service)],
    token_generator: Annotated[TokenGenerator, Depends(get_token_generator)],
    session_issuer: Annotated[SessionIssuer, Depends(get_session_issuer)],
    notifier: Annotated[Notifier, Depends(get_notifier)],
) -> AccountLifecycleService:
    return AccountLifecycleService(
        identity_store=IdentityStoreSQLAlchemy(session),
        password_service=password_service,
        token_generator=token_generator,
        session_issuer=session_issuer,
        notifier=notifier,
        policy=LifecyclePolicy.from_settings(settings),
    )


LifecycleService = Annotated[AccountLifecycleService, Depends(get_lifecycle_service)]


# -----------------------------------------------------------------------------
# Database Schema Management
# -----------------------------------------------------------------------------


async def create_tables(engine: AsyncEngine) -> None:
    """
    Create all database tables (idempotent).

    Uses SQLAlchemy's create_all() which only creates missing tables.
    Existing tables and their data are never modified or deleted.
    """
    url = engine.url
    if url.get_backend_name() == "sqlite" and url.database not in (None, "", ":memory:"):
        Path(url.database).parent.mkdir(parents=True, exist_ok=True)

    logger.info("Ensuring all database tables exist...")
    async with engine.begin() as conn:
        await conn.run_sync(IdentityBase.metadata.create_all)
