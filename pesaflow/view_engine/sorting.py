# This file implements the single-key sort stage for tabular pages.
# It exists so header clicks toggle direction the same way everywhere and ties keep their order.
# Comparison follows the accessor kind: timestamps as instants, numbers numerically, the rest ordinally.
# Missing or unparseable values order after every real value when ascending.

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum
from typing import Any

from pesaflow.view_engine.accessors import FieldAccessor
from pesaflow.view_engine.records import Record


class SortDirection(str, Enum):
    ASCENDING = "ascending"
    DESCENDING = "descending"

    def toggled(self) -> SortDirection:
        if self is SortDirection.ASCENDING:
            return SortDirection.DESCENDING
        return SortDirection.ASCENDING


@dataclass(frozen=True)
class SortSpec:
    key: str
    direction: SortDirection = SortDirection.ASCENDING

    @property
    def as_text(self) -> str:
        order = "asc" if self.direction is SortDirection.ASCENDING else "desc"
        return f"{self.key}:{order}"


def next_sort(current: SortSpec, key: str) -> SortSpec:
    """Header click: same key flips direction, a new key starts ascending."""

    if current.key == key:
        return SortSpec(key=key, direction=current.direction.toggled())
    return SortSpec(key=key, direction=SortDirection.ASCENDING)


def _sort_key(accessor: FieldAccessor, record: Record) -> tuple[bool, Any]:
    value = accessor.sort_value(record)
    return (value is None, value)


def sort_records(
    records: Iterable[Record], accessor: FieldAccessor, direction: SortDirection
) -> list[Record]:
    # sorted() is stable for reverse=True as well, so equal rows keep their input order.
    return sorted(
        records,
        key=lambda record: _sort_key(accessor, record),
        reverse=direction is SortDirection.DESCENDING,
    )
