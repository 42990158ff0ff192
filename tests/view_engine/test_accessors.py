# This file tests the field accessor table used for search, sort, and export.
# It exists to pin how each field kind turns a record into comparable and searchable values.
# The tests cover unknown columns, nested sub-records, and timestamp parsing edge cases.

from __future__ import annotations

from datetime import UTC, date, datetime, timedelta, timezone

import pytest

from pesaflow.view_engine.accessors import (
    AccessorTable,
    currency_field,
    nested_field,
    number_field,
    parse_timestamp,
    text_field,
    timestamp_field,
)
from pesaflow.view_engine.errors import UnknownColumnError
from pesaflow.view_engine.pages import GROUP_TRANSACTIONS
from tests.view_engine.support import group_transactions


def test_unknown_column_raises_with_supported_list() -> None:
    table = AccessorTable([text_field("id", "ID"), number_field("amount", "Amount")])

    with pytest.raises(UnknownColumnError, match="Unknown column 'missing'") as exc_info:
        table["missing"]

    assert exc_info.value.column == "missing"
    assert "amount, id" in str(exc_info.value)
    assert "missing" not in table
    assert "id" in table


def test_duplicate_accessor_names_are_rejected() -> None:
    with pytest.raises(ValueError, match="defined twice"):
        AccessorTable([text_field("id", "ID"), text_field("id", "Other")])


def test_nested_search_text_excludes_undeclared_fields() -> None:
    record = group_transactions()[0]
    member = GROUP_TRANSACTIONS.accessor("memberName")

    assert member.search_text(record) == "Amina Said"
    assert "zeta" not in member.search_text(record)
    assert member.sort_value(record) == "Amina Said"


def test_dotted_path_reads_nested_values() -> None:
    accessor = text_field("memberId", "Member ID", path="member.id")

    assert accessor.raw_value({"member": {"id": "m-9"}}) == "m-9"
    assert accessor.raw_value({"member": None}) is None
    assert accessor.raw_value({}) is None


def test_numeric_sort_value_ignores_non_numbers() -> None:
    accessor = currency_field("amount", "Amount")

    assert accessor.sort_value({"amount": 12.5}) == 12.5
    assert accessor.sort_value({"amount": "12.5"}) is None
    assert accessor.sort_value({"amount": True}) is None
    assert accessor.sort_value({}) is None


def test_timestamp_sort_value_parses_iso_strings() -> None:
    accessor = timestamp_field("date", "Date")

    assert accessor.sort_value({"date": "2024-03-05T14:00:00Z"}) == datetime(
        2024, 3, 5, 14, 0, tzinfo=UTC
    )
    assert accessor.sort_value({"date": "yesterday"}) is None


def test_parse_timestamp_normalizes_to_utc() -> None:
    eat = timezone(timedelta(hours=3))

    assert parse_timestamp(datetime(2024, 1, 1, 12, 0, tzinfo=eat)) == datetime(
        2024, 1, 1, 9, 0, tzinfo=UTC
    )
    assert parse_timestamp(date(2024, 1, 2)) == datetime(2024, 1, 2, tzinfo=UTC)
    assert parse_timestamp("2024-01-02") == datetime(2024, 1, 2, tzinfo=UTC)
    assert parse_timestamp("") is None
    assert parse_timestamp(None) is None
    assert parse_timestamp(20240102) is None


def test_nested_field_requires_subfields() -> None:
    with pytest.raises(ValueError, match="at least one sub-field"):
        nested_field("member", "Member", source="member", fields=())
