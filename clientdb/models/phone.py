"""Phone model: a unique phone number owned by exactly one client."""

from sqlalchemy import ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from clientdb.core.constants import CLIENTS_TABLE, PHONES_TABLE, PHONE_NUMBER_MAX_LENGTH
from clientdb.models.base import Base


class Phone(Base):
    __tablename__ = PHONES_TABLE

    phone_id: Mapped[int] = mapped_column(
        Integer,
        primary_key=True,
        autoincrement=True,
    )

    client_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey(f"{CLIENTS_TABLE}.client_id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    phone_number: Mapped[str] = mapped_column(
        String(PHONE_NUMBER_MAX_LENGTH),
        unique=True,
        nullable=False,
    )

    def __repr__(self) -> str:
        return (
            f"<Phone(phone_id={self.phone_id}, client_id={self.client_id}, "
            f"phone_number='{self.phone_number}')>"
        )
