"""
Base Model
==========

Declarative base and schema helpers shared by all models.
"""

from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models."""
    pass


def create_all_tables(bind) -> None:
    """Create all tables that do not exist yet."""
    Base.metadata.create_all(bind=bind, checkfirst=True)


def drop_all_tables(bind) -> None:
    """Drop all tables (phones before clients)."""
    Base.metadata.drop_all(bind=bind, checkfirst=True)
