import os

# Point the global engine at an in-memory database before clientdb is imported
os.environ.setdefault("DATABASE_URL", "sqlite://")

import pytest

from clientdb.database import create_db_engine, create_session_factory
from clientdb.repositories import ClientRepository


@pytest.fixture
def engine():
    """Fresh in-memory SQLite engine per test (StaticPool keeps one connection)."""
    eng = create_db_engine("sqlite://", echo=False)
    yield eng
    eng.dispose()


@pytest.fixture
def session_factory(engine):
    return create_session_factory(engine)


@pytest.fixture
def repo(session_factory):
    repository = ClientRepository(session_factory)
    repository.ensure_schema()
    return repository


@pytest.fixture
def ivan(repo):
    client_id = repo.add_client("Ivan", "Ivanov", "ivan@example.com")
    repo.add_phone(client_id, "+79111234567")
    repo.add_phone(client_id, "+79117654321")
    return client_id
