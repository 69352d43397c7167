"""Root pytest configuration.

Test Structure:
    tests/
    ├── authgate_auth/         # Hashing, tokens, sessions
    │   └── unit/
    ├── authgate_identity/     # Account lifecycle
    │   ├── unit/              # Fast, isolated tests with mocks
    │   └── integration/       # SQLite-backed store and full flows
    ├── authgate/              # HTTP API and CLI
    ├── authgate_config/       # Settings
    └── shared/                # Shared fixtures and utilities
"""

import os

import pytest

from authgate_config import clear_settings_cache

# Settings require a JWT secret; tests never read a real one
os.environ.setdefault("JWT_SECRET_KEY", "test-jwt-secret-for-testing-only")


@pytest.fixture(autouse=True)
def _fresh_settings():
    """Drop cached settings so environment changes in a test stay local."""
    clear_settings_cache()
    yield
    clear_settings_cache()
