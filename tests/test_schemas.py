import pytest

from clientdb.core.constants import MatchMode
from clientdb.core.exceptions import ValidationError
from clientdb.repositories import build_search_query, group_by_client
from clientdb.schemas import ClientFilter, ClientRow, ClientUpdate, validate


def test_update_changes_skip_none_only():
    data = validate(ClientUpdate, client_id=1, first_name=None, last_name="Petrov", email=None)
    assert data.changes() == {"last_name": "Petrov"}


def test_update_keeps_values_verbatim():
    data = validate(ClientUpdate, client_id=1, first_name="  Ivan ")
    assert data.changes() == {"first_name": "  Ivan "}


def test_validate_reports_field_locations():
    with pytest.raises(ValidationError) as exc_info:
        validate(ClientUpdate, client_id="x", email="")
    locations = {err["loc"][0] for err in exc_info.value.errors}
    assert locations == {"client_id", "email"}
    assert "client_id" in str(exc_info.value)


def test_filter_rejects_unknown_match_mode():
    with pytest.raises(ValidationError):
        validate(ClientFilter, match="regex")


def test_search_query_binds_every_value():
    criteria = validate(
        ClientFilter,
        first_name="x'; DROP TABLE clients;--",
        phone_number="+7911",
        client_id=3,
    )
    compiled = build_search_query(criteria).compile()
    sql = str(compiled)

    assert "DROP TABLE" not in sql
    assert "LEFT OUTER JOIN phones" in sql
    assert set(compiled.params.values()) == {"x'; DROP TABLE clients;--", "+7911", 3}


def test_search_query_substring_uses_escaped_like():
    criteria = validate(ClientFilter, last_name="50%", match=MatchMode.SUBSTRING)
    compiled = build_search_query(criteria).compile()

    assert "LIKE" in str(compiled)
    assert "50/%" in compiled.params.values()


def test_search_query_without_filters_has_no_where():
    sql = str(build_search_query(ClientFilter()).compile())
    assert "WHERE" not in sql


def test_group_by_client_collects_phones():
    rows = [
        ClientRow(client_id=2, first_name="Petr", last_name="Petrov", email="p@example.com", phone_number="+3"),
        ClientRow(client_id=1, first_name="Ivan", last_name="Ivanov", email="i@example.com", phone_number="+1"),
        ClientRow(client_id=2, first_name="Petr", last_name="Petrov", email="p@example.com", phone_number="+4"),
        ClientRow(client_id=3, first_name="Anna", last_name="Sidorova", email="a@example.com"),
    ]
    records = group_by_client(rows)

    assert [r.client_id for r in records] == [2, 1, 3]
    assert records[0].phones == {"+3", "+4"}
    assert records[1].phones == {"+1"}
    assert records[2].phones == frozenset()


def test_group_by_client_empty():
    assert group_by_client([]) == []
