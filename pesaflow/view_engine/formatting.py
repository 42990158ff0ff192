# This file collects the value formatting helpers used by exports and table captions.
# It exists so currency amounts and dates read the same in every report the dashboard produces.
# The functions return plain strings; unparseable inputs fall back to "-" rather than raising.

from __future__ import annotations

import numbers
from collections.abc import Mapping
from typing import Any

from pesaflow.view_engine.accessors import FieldAccessor, FieldKind, parse_timestamp
from pesaflow.view_engine.records import Record


def format_amount(value: float | int) -> str:
    text = f"{float(value):,.3f}".rstrip("0").rstrip(".")
    return "0" if text in {"-0", ""} else text


def format_currency(value: float | int | None, currency_code: str) -> str:
    if value is None or isinstance(value, bool) or not isinstance(value, numbers.Real):
        return "-"
    return f"{currency_code} {format_amount(value)}"


def format_long_date(value: Any, *, include_time: bool = False) -> str:
    parsed = parse_timestamp(value)
    if parsed is None:
        return "-"
    text = f"{parsed:%B} {parsed.day}, {parsed.year}"
    if include_time:
        text = f"{text}, {parsed:%I:%M %p}"
    return text


def format_count(value: int | float | None) -> str:
    if value is None:
        return "0"
    return f"{int(value):,}"


def format_plain(value: Any) -> str:
    if value is None:
        return ""
    return str(value)


def format_cell(
    accessor: FieldAccessor,
    record: Record,
    *,
    currency_code: str,
    include_time: bool = False,
) -> str:
    """Human-readable cell text for one column of one record."""

    value = accessor.raw_value(record)
    if accessor.kind is FieldKind.CURRENCY:
        code = currency_code
        if accessor.currency_field:
            code = str(record.get(accessor.currency_field) or currency_code)
        return format_currency(value, code)
    if accessor.kind is FieldKind.TIMESTAMP:
        return format_long_date(value, include_time=include_time)
    if accessor.kind is FieldKind.NESTED:
        if isinstance(value, Mapping):
            return format_plain(value.get(accessor.nested_fields[0]))
        return format_plain(value)
    return format_plain(value)
