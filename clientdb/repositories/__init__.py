"""
Data access layer (Repository pattern).

Repositories handle all database queries,
isolating callers from SQL.
"""

from clientdb.repositories.client_repository import (
    ClientRepository,
    ClientSearch,
    build_search_query,
    group_by_client,
)

__all__ = [
    "ClientRepository",
    "ClientSearch",
    "build_search_query",
    "group_by_client",
]
