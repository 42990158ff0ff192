# This file holds the record set model and the store that owns it for a dashboard page.
# It exists so key uniqueness and stable ordering are enforced in one place rather than per page.
# The store is the only mutation path and tells listeners which keys disappeared,
# which is how row selections stay consistent with the underlying data.

from __future__ import annotations

import logging
from collections.abc import Callable, Hashable, Iterable, Iterator, Mapping
from dataclasses import dataclass, field
from typing import Any

import pandas as pd

from pesaflow.view_engine.errors import DuplicateRecordKeyError, RecordNotFoundError

LOGGER = logging.getLogger("view_engine.records")

Record = Mapping[str, Any]
RemovalListener = Callable[[frozenset[Hashable]], None]


@dataclass(frozen=True)
class RecordSet:
    """Ordered, uniquely keyed records. Insertion order is the stable-sort tie-break."""

    records: tuple[Record, ...] = ()
    key_field: str = "id"
    _index: dict[Hashable, int] = field(default_factory=dict, init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        for position, record in enumerate(self.records):
            key = record[self.key_field]
            if key in self._index:
                raise DuplicateRecordKeyError(
                    f"Duplicate key {key!r} in field '{self.key_field}'"
                )
            self._index[key] = position

    def __iter__(self) -> Iterator[Record]:
        return iter(self.records)

    def __len__(self) -> int:
        return len(self.records)

    def __contains__(self, key: object) -> bool:
        return key in self._index

    def key_of(self, record: Record) -> Hashable:
        return record[self.key_field]

    def keys(self) -> frozenset[Hashable]:
        return frozenset(self._index)

    def get(self, key: Hashable) -> Record | None:
        position = self._index.get(key)
        return None if position is None else self.records[position]

    def with_added(self, record: Record) -> RecordSet:
        return RecordSet(records=(*self.records, record), key_field=self.key_field)

    def without(self, key: Hashable) -> RecordSet:
        if key not in self._index:
            raise RecordNotFoundError(key)
        return RecordSet(
            records=tuple(r for r in self.records if r[self.key_field] != key),
            key_field=self.key_field,
        )

    def with_updated(self, key: Hashable, changes: Mapping[str, Any]) -> RecordSet:
        position = self._index.get(key)
        if position is None:
            raise RecordNotFoundError(key)
        if self.key_field in changes and changes[self.key_field] != key:
            raise ValueError(f"Record key '{self.key_field}' cannot be changed by an update")
        updated = {**self.records[position], **changes}
        records = list(self.records)
        records[position] = updated
        return RecordSet(records=tuple(records), key_field=self.key_field)


def records_from_frame(frame: pd.DataFrame, *, key_field: str = "id") -> RecordSet:
    """Build a record set from a DataFrame, keeping row order and dropping NaN cells to None."""

    if key_field not in frame.columns:
        raise ValueError(f"Key column '{key_field}' is missing from the input frame")
    cleaned = frame.astype(object).where(pd.notna(frame), None)
    rows = cleaned.to_dict(orient="records")
    return RecordSet(records=tuple(rows), key_field=key_field)


class RecordStore:
    """Single owner of a page's record set; every mutation goes through here."""

    def __init__(
        self, records: RecordSet | Iterable[Record] = (), *, key_field: str = "id"
    ) -> None:
        if isinstance(records, RecordSet):
            self._records = records
        else:
            self._records = RecordSet(records=tuple(records), key_field=key_field)
        self._listeners: list[RemovalListener] = []

    @property
    def records(self) -> RecordSet:
        return self._records

    def subscribe(self, listener: RemovalListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def add(self, record: Record) -> None:
        self._records = self._records.with_added(record)
        LOGGER.info("Added record %r (total=%d)", self._records.key_of(record), len(self._records))

    def update(self, key: Hashable, changes: Mapping[str, Any]) -> None:
        self._records = self._records.with_updated(key, changes)
        LOGGER.debug("Updated record %r fields=%s", key, sorted(changes))

    def remove(self, key: Hashable) -> None:
        self._records = self._records.without(key)
        LOGGER.info("Removed record %r (total=%d)", key, len(self._records))
        self._notify(frozenset({key}))

    def replace(self, records: RecordSet | Iterable[Record]) -> None:
        """Swap in a fresh snapshot; keys missing from it count as removed."""

        if not isinstance(records, RecordSet):
            records = RecordSet(records=tuple(records), key_field=self._records.key_field)
        removed = self._records.keys() - records.keys()
        self._records = records
        LOGGER.info("Replaced record set (total=%d, removed=%d)", len(records), len(removed))
        if removed:
            self._notify(frozenset(removed))

    def _notify(self, removed: frozenset[Hashable]) -> None:
        for listener in list(self._listeners):
            listener(removed)
