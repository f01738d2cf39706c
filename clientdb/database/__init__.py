"""Database package."""

from clientdb.database.session import (
    engine,
    SessionLocal,
    create_db_engine,
    create_session_factory,
    get_db_context,
)

__all__ = [
    "engine",
    "SessionLocal",
    "create_db_engine",
    "create_session_factory",
    "get_db_context",
]
