"""
Pytest configuration for authgate_identity integration tests.

Integration tests run against an in-memory SQLite database.
"""

from tests.shared.fixtures.database import db_engine, db_session, db_session_maker

__all__ = [
    "db_engine",
    "db_session",
    "db_session_maker",
]
