"""
Error taxonomy for the client store.

Every failure leaving a repository method is one of these classes, so
callers can tell a bad argument from a constraint violation from an
unreachable database. A delete or update that matches no row is not an
error: those methods return ``0`` rows affected instead.
"""

from typing import Any, Dict, List, Optional

from sqlalchemy.exc import IntegrityError

from clientdb.core.constants import (
    SQLSTATE_FOREIGN_KEY_VIOLATION,
    SQLSTATE_UNIQUE_VIOLATION,
)


class ClientStoreError(Exception):
    """Base class for every error raised by the client store."""


class ValidationError(ClientStoreError, ValueError):
    """
    Caller-supplied value violates a local precondition.

    Raised before any statement reaches the database.

    Attributes:
        errors: Field-level details (pydantic error dicts, may be empty)
    """

    def __init__(self, message: str, errors: Optional[List[Dict[str, Any]]] = None):
        super().__init__(message)
        self.errors = errors or []


class UniqueConstraintViolation(ClientStoreError):
    """Email or phone number already exists."""


class ForeignKeyViolation(ClientStoreError):
    """Phone references a client that does not exist."""


class DatabaseConnectionError(ClientStoreError):
    """The database could not be reached or dropped the connection."""


def _sqlstate(exc: IntegrityError) -> Optional[str]:
    # psycopg 3 exposes ``sqlstate``, psycopg2 exposes ``pgcode``
    orig = exc.orig
    return getattr(orig, "sqlstate", None) or getattr(orig, "pgcode", None)


def translate_integrity_error(exc: IntegrityError, operation: str) -> ClientStoreError:
    """
    Map a driver integrity error onto the taxonomy.

    Args:
        exc: The SQLAlchemy ``IntegrityError``
        operation: Name of the repository operation, used in the message

    Returns:
        The matching ``ClientStoreError`` subclass instance (not raised)
    """
    code = _sqlstate(exc)
    message = str(exc.orig)
    lowered = message.lower()

    if code is not None:
        if code == SQLSTATE_UNIQUE_VIOLATION:
            return UniqueConstraintViolation(f"{operation}: {message}")
        if code == SQLSTATE_FOREIGN_KEY_VIOLATION:
            return ForeignKeyViolation(f"{operation}: {message}")
        return ClientStoreError(f"{operation}: {message}")

    # No SQLSTATE (sqlite): fall back to the driver message
    if "unique" in lowered:
        return UniqueConstraintViolation(f"{operation}: {message}")
    if "foreign key" in lowered:
        return ForeignKeyViolation(f"{operation}: {message}")
    return ClientStoreError(f"{operation}: {message}")
