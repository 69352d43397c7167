"""Pytest fixtures for API integration tests."""

from collections.abc import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from pydantic import SecretStr
from sqlalchemy.ext.asyncio import AsyncSession

from authgate.presentation.api.app import create_app
from authgate.presentation.api.config import get_api_settings
from authgate.presentation.api.dependencies import get_db_session, get_notifier
from authgate_config.settings import Settings
from tests.shared.fixtures.database import db_engine, db_session_maker
from tests.shared.fixtures.notifier import RecordingNotifier

__all__ = ["db_engine", "db_session_maker"]


@pytest.fixture
def api_settings() -> Settings:
    """Test API settings."""
    return Settings(
        jwt_secret_key=SecretStr("test-jwt-secret-for-testing-only"),
        api_debug=True,
        api_cors_origins="http://localhost:3000",
        api_cookie_secure=False,  # Allow HTTP in tests
        bcrypt_rounds=4,
        notifier_retry_base_delay_ms=0,
        notifier_retry_max_delay_ms=0,
    )


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture
def app(api_settings, db_session_maker, notifier):
    """Application wired to the in-memory database and a recording notifier."""
    app = create_app(settings=api_settings)

    async def override_get_db_session() -> AsyncGenerator[AsyncSession, None]:
        async with db_session_maker() as session:
            yield session

    app.dependency_overrides[get_db_session] = override_get_db_session
    app.dependency_overrides[get_api_settings] = lambda: api_settings
    app.dependency_overrides[get_notifier] = lambda: notifier

    yield app

    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def client(app) -> AsyncGenerator[AsyncClient, None]:
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
def alice() -> dict:
    return {
        "username": "alice",
        "email": "alice@x.com",
        "password": "pw1",
    }
