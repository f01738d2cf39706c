"""
Database models package.

Contains all SQLAlchemy ORM models.
"""

from clientdb.models.base import Base, create_all_tables, drop_all_tables
from clientdb.models.client import Client
from clientdb.models.phone import Phone

__all__ = [
    "Base",
    "Client",
    "Phone",
    "create_all_tables",
    "drop_all_tables",
]
