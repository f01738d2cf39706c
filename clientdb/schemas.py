"""
Input and output schemas for the client store.

Input models validate caller arguments before any SQL runs; output models
are the rows handed back by searches. ``None`` on an optional field always
means "not supplied", never "empty".
"""

from typing import Any, Dict, FrozenSet, Optional

from pydantic import BaseModel, ConfigDict, Field, StrictInt, StrictStr, field_validator
from pydantic import ValidationError as PydanticValidationError

from clientdb.core.constants import (
    EMAIL_MAX_LENGTH,
    FIRST_NAME_MAX_LENGTH,
    LAST_NAME_MAX_LENGTH,
    PHONE_NUMBER_MAX_LENGTH,
    MatchMode,
)
from clientdb.core.exceptions import ValidationError


def _not_blank(v: Optional[str]) -> Optional[str]:
    # Values are stored verbatim, so whitespace is only inspected, never stripped
    if v is not None and not v.strip():
        raise ValueError("must not be empty")
    return v


class _InputModel(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")


class ClientCreate(_InputModel):
    first_name: StrictStr = Field(max_length=FIRST_NAME_MAX_LENGTH)
    last_name: StrictStr = Field(max_length=LAST_NAME_MAX_LENGTH)
    email: StrictStr = Field(max_length=EMAIL_MAX_LENGTH)

    @field_validator("first_name", "last_name", "email")
    @classmethod
    def check_not_blank(cls, v: Optional[str]) -> Optional[str]:
        return _not_blank(v)


class PhoneCreate(_InputModel):
    client_id: StrictInt
    phone_number: StrictStr = Field(max_length=PHONE_NUMBER_MAX_LENGTH)

    @field_validator("phone_number")
    @classmethod
    def check_not_blank(cls, v: str) -> str:
        return _not_blank(v)


class ClientUpdate(_InputModel):
    """Fields left as ``None`` keep their stored value."""

    client_id: StrictInt
    first_name: Optional[StrictStr] = Field(default=None, max_length=FIRST_NAME_MAX_LENGTH)
    last_name: Optional[StrictStr] = Field(default=None, max_length=LAST_NAME_MAX_LENGTH)
    email: Optional[StrictStr] = Field(default=None, max_length=EMAIL_MAX_LENGTH)

    @field_validator("first_name", "last_name", "email")
    @classmethod
    def check_not_blank(cls, v: Optional[str]) -> Optional[str]:
        return _not_blank(v)

    def changes(self) -> Dict[str, str]:
        """Column values actually supplied by the caller."""
        return self.model_dump(exclude={"client_id"}, exclude_none=True)


class ClientKey(_InputModel):
    client_id: StrictInt


class PhoneKey(_InputModel):
    phone_number: StrictStr


class ClientFilter(_InputModel):
    client_id: Optional[StrictInt] = None
    first_name: Optional[StrictStr] = None
    last_name: Optional[StrictStr] = None
    email: Optional[StrictStr] = None
    phone_number: Optional[StrictStr] = None
    match: MatchMode = MatchMode.EXACT


class ClientRow(BaseModel):
    """One result row of a search: a client joined to at most one phone."""

    model_config = ConfigDict(frozen=True, from_attributes=True)

    client_id: int
    first_name: str
    last_name: str
    email: str
    phone_number: Optional[str] = None


class ClientRecord(BaseModel):
    """A client together with every phone number it owns."""

    model_config = ConfigDict(frozen=True)

    client_id: int
    first_name: str
    last_name: str
    email: str
    phones: FrozenSet[str] = frozenset()


def validate(model: type, **values: Any):
    """
    Build ``model`` from keyword arguments.

    Raises:
        ValidationError: With pydantic's error list attached
    """
    try:
        return model(**values)
    except PydanticValidationError as exc:
        fields = ", ".join(".".join(str(p) for p in err["loc"]) for err in exc.errors())
        raise ValidationError(
            f"Invalid {model.__name__}: {fields}",
            errors=exc.errors(include_url=False),
        ) from exc
