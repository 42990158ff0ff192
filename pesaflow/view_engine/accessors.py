# This file defines field accessors: the explicit mapping from a logical column to record values.
# It exists so search, sort, and export all read a record the same way on every page.
# Each accessor declares a semantic kind that drives comparison and export formatting.
# Searchable text is built from declared fields only, so hidden fields such as avatars never match.

from __future__ import annotations

import numbers
from collections.abc import Callable, Iterable, Iterator, Mapping
from dataclasses import dataclass
from datetime import UTC, date, datetime, time
from enum import Enum
from typing import Any

from pesaflow.view_engine.errors import UnknownColumnError
from pesaflow.view_engine.records import Record


class FieldKind(str, Enum):
    TEXT = "text"
    NUMBER = "number"
    CURRENCY = "currency"
    TIMESTAMP = "timestamp"
    STATUS = "status"
    NESTED = "nested"


NUMERIC_KINDS = frozenset({FieldKind.NUMBER, FieldKind.CURRENCY})


def parse_timestamp(value: Any, *, to_utc: bool = True) -> datetime | None:
    """Convert an ISO-8601 string, date, or datetime to an aware datetime.

    Anything that cannot be interpreted returns None so callers can exclude it.
    Naive values are taken to be UTC.
    With `to_utc=False` an explicit offset is kept instead of converted.
    """

    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime.combine(value, time.min)
    elif isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        try:
            parsed = datetime.fromisoformat(text.replace("Z", "+00:00"))
        except ValueError:
            return None
    else:
        return None

    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=UTC)
    return parsed.astimezone(UTC) if to_utc else parsed


def _path_getter(path: tuple[str, ...]) -> Callable[[Record], Any]:
    def getter(record: Record) -> Any:
        value: Any = record
        for part in path:
            if not isinstance(value, Mapping):
                return None
            value = value.get(part)
        return value

    return getter


@dataclass(frozen=True)
class FieldAccessor:
    name: str
    label: str
    kind: FieldKind
    extract: Callable[[Record], Any]
    nested_fields: tuple[str, ...] = ()
    currency_field: str | None = None

    def raw_value(self, record: Record) -> Any:
        return self.extract(record)

    def sort_value(self, record: Record) -> Any:
        """Type-preserving value for ordering; None when the value is missing or unparseable."""

        value = self.extract(record)
        if self.kind is FieldKind.TIMESTAMP:
            return parse_timestamp(value)
        if self.kind in NUMERIC_KINDS:
            if isinstance(value, bool) or not isinstance(value, numbers.Real):
                return None
            return value
        if self.kind is FieldKind.NESTED:
            if isinstance(value, Mapping):
                value = value.get(self.nested_fields[0]) if self.nested_fields else None
        if value is None:
            return None
        return str(value)

    def search_text(self, record: Record) -> str:
        """String used for free-text matching; nested records contribute their declared fields."""

        value = self.extract(record)
        if value is None:
            return ""
        if self.kind is FieldKind.NESTED and isinstance(value, Mapping):
            parts = [value.get(name) for name in self.nested_fields]
            return " ".join(str(part) for part in parts if part is not None)
        return str(value)


def _column_getter(name: str, path: str | None) -> Callable[[Record], Any]:
    return _path_getter(tuple((path or name).split(".")))


def text_field(name: str, label: str, *, path: str | None = None) -> FieldAccessor:
    return FieldAccessor(name, label, FieldKind.TEXT, _column_getter(name, path))


def status_field(name: str, label: str, *, path: str | None = None) -> FieldAccessor:
    return FieldAccessor(name, label, FieldKind.STATUS, _column_getter(name, path))


def number_field(name: str, label: str, *, path: str | None = None) -> FieldAccessor:
    return FieldAccessor(name, label, FieldKind.NUMBER, _column_getter(name, path))


def currency_field(
    name: str, label: str, *, path: str | None = None, currency_field: str | None = None
) -> FieldAccessor:
    return FieldAccessor(
        name, label, FieldKind.CURRENCY, _column_getter(name, path), currency_field=currency_field
    )


def timestamp_field(name: str, label: str, *, path: str | None = None) -> FieldAccessor:
    return FieldAccessor(name, label, FieldKind.TIMESTAMP, _column_getter(name, path))


def computed_field(
    name: str, label: str, *, kind: FieldKind, compute: Callable[[Record], Any]
) -> FieldAccessor:
    """Accessor for a value derived from other fields, such as a goal's progress."""

    return FieldAccessor(name, label, kind, compute)


def nested_field(
    name: str, label: str, *, source: str, fields: Iterable[str] = ("name",)
) -> FieldAccessor:
    """Accessor for a sub-record; the first declared field is its display and sort value."""

    declared = tuple(fields)
    if not declared:
        raise ValueError(f"Nested field '{name}' must declare at least one sub-field")
    return FieldAccessor(
        name, label, FieldKind.NESTED, _path_getter((source,)), nested_fields=declared
    )


class AccessorTable(Mapping[str, FieldAccessor]):
    """Static column-name to accessor mapping for one record shape."""

    def __init__(self, accessors: Iterable[FieldAccessor]) -> None:
        self._accessors: dict[str, FieldAccessor] = {}
        for accessor in accessors:
            if accessor.name in self._accessors:
                raise ValueError(f"Accessor '{accessor.name}' is defined twice")
            self._accessors[accessor.name] = accessor

    def __getitem__(self, column: str) -> FieldAccessor:
        try:
            return self._accessors[column]
        except KeyError:
            raise UnknownColumnError(column, known_columns=tuple(self._accessors)) from None

    def __contains__(self, column: object) -> bool:
        return column in self._accessors

    def __iter__(self) -> Iterator[str]:
        return iter(self._accessors)

    def __len__(self) -> int:
        return len(self._accessors)

    def select(self, columns: Iterable[str]) -> tuple[FieldAccessor, ...]:
        return tuple(self[column] for column in columns)
