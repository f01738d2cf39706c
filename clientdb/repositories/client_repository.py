"""
Client repository.

Translates client and phone operations into parameterized SQLAlchemy
statements. Every public method runs inside its own unit of work: it
commits when the method returns and rolls back before any error reaches
the caller. Driver exceptions are translated into the classes of
``clientdb.core.exceptions``; nothing is logged and swallowed.

Usage:
    repo = ClientRepository()
    repo.ensure_schema()
    client_id = repo.add_client("Ivan", "Ivanov", "ivan@example.com")
    repo.add_phone(client_id, "+79111234567")
    for row in repo.find_clients(first_name="Ivan"):
        print(row.phone_number)
"""

import logging
from contextlib import contextmanager
from typing import Dict, Generator, Iterable, Iterator, List, Optional

from sqlalchemy import delete, select, update
from sqlalchemy.exc import DBAPIError, IntegrityError, InterfaceError, OperationalError
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.sql import Select

from clientdb.core.constants import MatchMode
from clientdb.core.exceptions import (
    ClientStoreError,
    DatabaseConnectionError,
    translate_integrity_error,
)
from clientdb.database.session import get_db_context
from clientdb.models import Client, Phone, create_all_tables
from clientdb.schemas import (
    ClientCreate,
    ClientFilter,
    ClientKey,
    ClientRecord,
    ClientRow,
    ClientUpdate,
    PhoneCreate,
    PhoneKey,
    validate,
)

logger = logging.getLogger(__name__)


def _column_filter(column, value: str, match: MatchMode):
    if match is MatchMode.SUBSTRING:
        # autoescape binds the value with % and _ escaped
        return column.contains(value, autoescape=True)
    return column == value


def build_search_query(criteria: ClientFilter) -> Select:
    """
    Build the clients LEFT JOIN phones query for the given filters.

    Every supplied filter becomes a bound parameter; supplied filters
    combine with AND.
    """
    stmt = (
        select(
            Client.client_id,
            Client.first_name,
            Client.last_name,
            Client.email,
            Phone.phone_number,
        )
        .outerjoin(Phone, Phone.client_id == Client.client_id)
        .order_by(Client.client_id, Phone.phone_id)
    )

    if criteria.client_id is not None:
        stmt = stmt.where(Client.client_id == criteria.client_id)
    for column, value in (
        (Client.first_name, criteria.first_name),
        (Client.last_name, criteria.last_name),
        (Client.email, criteria.email),
        (Phone.phone_number, criteria.phone_number),
    ):
        if value is not None:
            stmt = stmt.where(_column_filter(column, value, criteria.match))
    return stmt


def group_by_client(rows: Iterable[ClientRow]) -> List[ClientRecord]:
    """
    Collapse joined rows into one record per client.

    Clients keep the order in which they were first seen. A client whose
    only row has no phone gets an empty phone set.
    """
    grouped: Dict[int, dict] = {}
    for row in rows:
        entry = grouped.get(row.client_id)
        if entry is None:
            entry = grouped[row.client_id] = {
                "client_id": row.client_id,
                "first_name": row.first_name,
                "last_name": row.last_name,
                "email": row.email,
                "phones": set(),
            }
        if row.phone_number is not None:
            entry["phones"].add(row.phone_number)
    return [ClientRecord(**entry) for entry in grouped.values()]


class ClientSearch:
    """
    Lazy, restartable search result.

    Nothing runs until the search is iterated. Each iteration executes the
    query again in a fresh unit of work, so results reflect the
    store at the time of iteration.
    """

    def __init__(self, repository: "ClientRepository", criteria: ClientFilter):
        self._repository = repository
        self.criteria = criteria

    def __iter__(self) -> Iterator[ClientRow]:
        stmt = build_search_query(self.criteria)
        with self._repository._unit_of_work("find_clients") as db:
            rows = db.execute(stmt).all()
        return iter([ClientRow.model_validate(row) for row in rows])

    def all(self) -> List[ClientRow]:
        return list(self)

    def first(self) -> Optional[ClientRow]:
        return next(iter(self), None)

    def group(self) -> List[ClientRecord]:
        """One record per client with all of its phone numbers."""
        return group_by_client(self)

    def __repr__(self) -> str:
        supplied = self.criteria.model_dump(exclude_none=True)
        return f"<ClientSearch({supplied})>"


class ClientRepository:
    """
    Data access for clients and their phones.

    Attributes:
        session_factory: Callable returning a new ``Session``; the engine
            behind it owns connection pooling
    """

    def __init__(self, session_factory: Optional[sessionmaker] = None):
        """
        Initialize the repository.

        Args:
            session_factory: Session factory to draw units of work from
                (defaults to ``clientdb.database.SessionLocal``)
        """
        if session_factory is None:
            from clientdb.database.session import SessionLocal
            session_factory = SessionLocal
        self.session_factory = session_factory

    # ========================================
    # Unit of work
    # ========================================

    @contextmanager
    def _unit_of_work(self, operation: str) -> Generator[Session, None, None]:
        try:
            with get_db_context(self.session_factory) as db:
                try:
                    db.connection()
                except (OperationalError, InterfaceError) as exc:
                    raise DatabaseConnectionError(f"{operation}: {exc.orig}") from exc
                yield db
        except IntegrityError as exc:
            error = translate_integrity_error(exc, operation)
            logger.warning("%s rolled back: %s", operation, error)
            raise error from exc
        except DBAPIError as exc:
            if exc.connection_invalidated or isinstance(exc, InterfaceError):
                error = DatabaseConnectionError(f"{operation}: {exc.orig}")
            else:
                error = ClientStoreError(f"{operation}: {exc.orig}")
            logger.warning("%s rolled back: %s", operation, error)
            raise error from exc
        except ClientStoreError as exc:
            logger.warning("%s rolled back: %s", operation, exc)
            raise

    # ========================================
    # Schema
    # ========================================

    def ensure_schema(self) -> None:
        """Create the clients and phones tables if they do not exist."""
        with self._unit_of_work("ensure_schema") as db:
            create_all_tables(db.connection())
        logger.info("Schema ready")

    # ========================================
    # Writes
    # ========================================

    def add_client(self, first_name: str, last_name: str, email: str) -> int:
        """
        Insert a client.

        Returns:
            The new client's id

        Raises:
            ValidationError: A field is empty or too long
            UniqueConstraintViolation: The email is already taken
        """
        data = validate(ClientCreate, first_name=first_name, last_name=last_name, email=email)
        with self._unit_of_work("add_client") as db:
            client = Client(**data.model_dump())
            db.add(client)
            db.flush()
            client_id = client.client_id
        logger.info("Client added with ID: %s", client_id)
        return client_id

    def add_phone(self, client_id: int, phone_number: str) -> int:
        """
        Attach a phone number to a client.

        Returns:
            The new phone's id

        Raises:
            ValidationError: The number is empty or the id is not an integer
            ForeignKeyViolation: No client has this id
            UniqueConstraintViolation: The number is already assigned
        """
        data = validate(PhoneCreate, client_id=client_id, phone_number=phone_number)
        with self._unit_of_work("add_phone") as db:
            phone = Phone(**data.model_dump())
            db.add(phone)
            db.flush()
            phone_id = phone.phone_id
        logger.info("Phone %s added to client %s", phone_id, data.client_id)
        return phone_id

    def update_client(
        self,
        client_id: int,
        first_name: Optional[str] = None,
        last_name: Optional[str] = None,
        email: Optional[str] = None,
    ) -> int:
        """
        Change the supplied fields of a client, leaving ``None`` fields alone.

        All supplied fields are written by one statement in one unit of
        work, so a constraint failure leaves the client unchanged.

        Returns:
            Rows affected: 1 on success, 0 if the client does not exist or
            no field was supplied
        """
        data = validate(
            ClientUpdate,
            client_id=client_id,
            first_name=first_name,
            last_name=last_name,
            email=email,
        )
        changes = data.changes()
        with self._unit_of_work("update_client") as db:
            if not changes:
                return 0
            result = db.execute(
                update(Client)
                .where(Client.client_id == data.client_id)
                .values(**changes)
                .execution_options(synchronize_session=False)
            )
            affected = result.rowcount
        logger.info("Client %s updated (%s): %d row(s)", data.client_id, ", ".join(changes), affected)
        return affected

    def delete_client(self, client_id: int) -> int:
        """
        Delete a client; the database cascade removes its phones.

        Returns:
            Rows affected (0 when the client was already gone)
        """
        data = validate(ClientKey, client_id=client_id)
        with self._unit_of_work("delete_client") as db:
            result = db.execute(
                delete(Client)
                .where(Client.client_id == data.client_id)
                .execution_options(synchronize_session=False)
            )
            affected = result.rowcount
        logger.info("Client %s deleted: %d row(s)", data.client_id, affected)
        return affected

    def delete_phone(self, phone_number: str) -> int:
        """
        Delete the phone with exactly this number.

        Returns:
            Rows affected (0 when no phone matched)
        """
        data = validate(PhoneKey, phone_number=phone_number)
        with self._unit_of_work("delete_phone") as db:
            result = db.execute(
                delete(Phone)
                .where(Phone.phone_number == data.phone_number)
                .execution_options(synchronize_session=False)
            )
            affected = result.rowcount
        logger.info("Phone %s deleted: %d row(s)", data.phone_number, affected)
        return affected

    # ========================================
    # Search
    # ========================================

    def find_clients(
        self,
        first_name: Optional[str] = None,
        last_name: Optional[str] = None,
        email: Optional[str] = None,
        phone_number: Optional[str] = None,
        *,
        client_id: Optional[int] = None,
        match: MatchMode = MatchMode.EXACT,
    ) -> ClientSearch:
        """
        Search clients joined to their phones.

        A client with several phones yields one row per phone; a client
        without phones yields one row with ``phone_number=None``. Use
        ``.group()`` on the result for one record per client.

        Args:
            first_name: Filter on first name
            last_name: Filter on last name
            email: Filter on email
            phone_number: Filter on phone number
            client_id: Filter on client id
            match: Exact or substring comparison for the text filters

        Returns:
            A lazy ``ClientSearch``; an empty iteration means no match

        Example:
            records = repo.find_clients(first_name="Ivan").group()
            print(records[0].phones)
        """
        criteria = validate(
            ClientFilter,
            client_id=client_id,
            first_name=first_name,
            last_name=last_name,
            email=email,
            phone_number=phone_number,
            match=match,
        )
        return ClientSearch(self, criteria)
