import pytest
from sqlalchemy.exc import IntegrityError, OperationalError
from sqlalchemy.orm import sessionmaker

from clientdb.core.exceptions import (
    ClientStoreError,
    DatabaseConnectionError,
    ForeignKeyViolation,
    UniqueConstraintViolation,
    translate_integrity_error,
)
from clientdb.database import create_db_engine, create_session_factory
from clientdb.repositories import ClientRepository


class _PgError(Exception):
    def __init__(self, message, sqlstate):
        super().__init__(message)
        self.sqlstate = sqlstate


class _Psycopg2Error(Exception):
    def __init__(self, message, pgcode):
        super().__init__(message)
        self.pgcode = pgcode


def _integrity(orig):
    return IntegrityError("INSERT ...", {}, orig)


@pytest.mark.parametrize(
    "orig,expected",
    [
        (_PgError("duplicate key value", "23505"), UniqueConstraintViolation),
        (_PgError("insert or update on table", "23503"), ForeignKeyViolation),
        (_Psycopg2Error("duplicate key value", "23505"), UniqueConstraintViolation),
        (Exception("UNIQUE constraint failed: clients.email"), UniqueConstraintViolation),
        (Exception("FOREIGN KEY constraint failed"), ForeignKeyViolation),
        (_PgError("violates foreign key constraint \"phones_unique_client_fk\"", "23503"), ForeignKeyViolation),
        (_PgError("null value in column \"email\" of relation \"unique_clients\"", "23502"), ClientStoreError),
    ],
)
def test_translate_integrity_error(orig, expected):
    error = translate_integrity_error(_integrity(orig), "add_client")
    assert type(error) is expected
    assert str(error).startswith("add_client: ")


def test_translate_unknown_integrity_error_is_generic():
    error = translate_integrity_error(_integrity(Exception("NOT NULL constraint failed")), "add_phone")
    assert type(error) is ClientStoreError


def test_unreachable_database_raises_connection_error(tmp_path):
    # Parent "directory" is a regular file, so sqlite cannot open the database
    blocker = tmp_path / "not-a-dir"
    blocker.write_text("")
    engine = create_db_engine(f"sqlite:///{blocker}/clients.db", echo=False)
    repo = ClientRepository(create_session_factory(engine))

    with pytest.raises(DatabaseConnectionError) as exc_info:
        repo.add_client("Ivan", "Ivanov", "ivan@example.com")
    assert isinstance(exc_info.value.__cause__, OperationalError)


def test_other_driver_errors_are_wrapped(session_factory):
    # Schema was never created on this engine
    repo = ClientRepository(session_factory)
    with pytest.raises(ClientStoreError) as exc_info:
        repo.find_clients().all()
    assert not isinstance(exc_info.value, DatabaseConnectionError)
    assert isinstance(exc_info.value.__cause__, OperationalError)


def test_default_session_factory():
    from clientdb.database import SessionLocal

    assert ClientRepository().session_factory is SessionLocal
    assert isinstance(SessionLocal, sessionmaker)
