"""
Database Session Management
============================

Handles database connections and session lifecycle.
"""

import os
from contextlib import contextmanager
from typing import Generator, Optional
from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool

from clientdb.config import settings


def _is_sqlite_memory(url) -> bool:
    return url.database in (None, "", ":memory:") or url.query.get("mode") == "memory"


def create_db_engine(database_url: Optional[str] = None, echo: Optional[bool] = None) -> Engine:
    """
    Create and configure the database engine.

    Args:
        database_url: SQLAlchemy URL (defaults to settings.database_url)
        echo: Log every statement (defaults to settings.app_debug)
    """
    database_url = database_url or settings.database_url
    echo = settings.app_debug if echo is None else echo
    url = make_url(database_url)

    # SQLite-specific configuration
    if url.get_backend_name() == "sqlite":
        connect_args = {"check_same_thread": False, "timeout": settings.db_sqlite_timeout}

        if _is_sqlite_memory(url):
            # One shared connection, otherwise every session sees an empty database
            engine = create_engine(
                database_url,
                connect_args=connect_args,
                poolclass=StaticPool,
                echo=echo
            )
        else:
            # Ensure data directory exists (URI filenames are left to sqlite)
            if not url.query.get("uri"):
                db_dir = os.path.dirname(url.database)
                if db_dir and not os.path.exists(db_dir):
                    os.makedirs(db_dir, exist_ok=True)

            # Default pool: one connection per unit of work
            engine = create_engine(
                database_url,
                connect_args=connect_args,
                echo=echo
            )

        # SQLite ignores REFERENCES ... ON DELETE CASCADE unless this is on
        @event.listens_for(engine, "connect")
        def set_sqlite_pragma(dbapi_conn, connection_record):
            cursor = dbapi_conn.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

    else:
        engine = create_engine(
            database_url,
            pool_size=settings.db_pool_size,
            max_overflow=settings.db_max_overflow,
            pool_pre_ping=settings.db_pool_pre_ping,
            echo=echo
        )

    return engine


def create_session_factory(engine_instance: Engine) -> sessionmaker:
    """Build a session factory bound to the given engine."""
    return sessionmaker(autocommit=False, autoflush=False, expire_on_commit=False, bind=engine_instance)


# Create global engine and session factory
engine = create_db_engine()
SessionLocal = create_session_factory(engine)


@contextmanager
def get_db_context(session_factory: Optional[sessionmaker] = None) -> Generator[Session, None, None]:
    """
    Context manager for database sessions.

    Commits when the block exits cleanly, rolls back on any exception.

    Usage:
        with get_db_context() as db:
            db.add(client)
    """
    db = (session_factory or SessionLocal)()
    try:
        yield db
        db.commit()
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()

