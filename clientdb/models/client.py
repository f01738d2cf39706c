"""
Client model.

A Client is a person with a first name, a last name and an email address
that is unique across the whole store. Deleting a client deletes its
phones through the ``ON DELETE CASCADE`` rule on ``phones.client_id``.
"""

from sqlalchemy import Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from clientdb.core.constants import (
    CLIENTS_TABLE,
    EMAIL_MAX_LENGTH,
    FIRST_NAME_MAX_LENGTH,
    LAST_NAME_MAX_LENGTH,
)
from clientdb.models.base import Base


class Client(Base):
    """
    Client record.

    Attributes:
        client_id: Server-assigned primary key
        first_name: Non-empty first name
        last_name: Non-empty last name
        email: Unique email address

    Example:
        client = Client(first_name="Ivan", last_name="Ivanov", email="ivan@example.com")
        db.add(client)
        db.flush()
        print(client.client_id)
    """

    __tablename__ = CLIENTS_TABLE

    client_id: Mapped[int] = mapped_column(
        Integer,
        primary_key=True,
        autoincrement=True,
    )

    first_name: Mapped[str] = mapped_column(
        String(FIRST_NAME_MAX_LENGTH),
        nullable=False,
    )

    last_name: Mapped[str] = mapped_column(
        String(LAST_NAME_MAX_LENGTH),
        nullable=False,
    )

    email: Mapped[str] = mapped_column(
        String(EMAIL_MAX_LENGTH),
        unique=True,
        nullable=False,
    )

    def __repr__(self) -> str:
        return (
            f"<Client(client_id={self.client_id}, first_name='{self.first_name}', "
            f"last_name='{self.last_name}', email='{self.email}')>"
        )
