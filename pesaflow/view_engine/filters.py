# This file implements the filter stage shared by every tabular dashboard page.
# It exists so tab, date-range, and free-text filtering behave identically across pages.
# Filters run in a fixed order: owner scope, tab, date range, then text search.
# Every filter is pure and idempotent; unparseable dates exclude rows instead of raising.

from __future__ import annotations

from collections.abc import Hashable, Iterable, Sequence
from dataclasses import dataclass
from datetime import UTC, date, datetime, time
from typing import Any

from pesaflow.view_engine.accessors import FieldAccessor, parse_timestamp
from pesaflow.view_engine.records import Record

ALL_TAB = "All"

END_OF_DAY = time(23, 59, 59, 999000)


@dataclass(frozen=True)
class DateRange:
    start: date | datetime | str
    end: date | datetime | str

    def bounds(self) -> tuple[datetime, datetime] | None:
        """Inclusive (start, end) UTC instants, with end pushed to 23:59:59.999 of its own day.

        The end day is taken in the offset the bound was written in, not in UTC.
        """

        start_ts = parse_timestamp(self.start)
        end_local = parse_timestamp(self.end, to_utc=False)
        if start_ts is None or end_local is None:
            return None
        end_of_day = datetime.combine(end_local.date(), END_OF_DAY, tzinfo=end_local.tzinfo)
        return start_ts, end_of_day.astimezone(UTC)


def by_scope(
    owner_key: Hashable | None, records: Iterable[Record], accessor: FieldAccessor | None
) -> list[Record]:
    if owner_key is None or accessor is None:
        return list(records)
    return [record for record in records if accessor.raw_value(record) == owner_key]


def by_tab(tab: str, records: Iterable[Record], accessor: FieldAccessor | None) -> list[Record]:
    if tab == ALL_TAB or accessor is None:
        return list(records)
    return [record for record in records if accessor.raw_value(record) == tab]


def by_date_range(
    date_range: DateRange | None, records: Iterable[Record], accessor: FieldAccessor | None
) -> list[Record]:
    if date_range is None or accessor is None:
        return list(records)
    bounds = date_range.bounds()
    if bounds is None:
        return []
    start_ts, end_ts = bounds

    matched: list[Record] = []
    for record in records:
        value = parse_timestamp(accessor.raw_value(record))
        if value is not None and start_ts <= value <= end_ts:
            matched.append(record)
    return matched


def by_text(
    query: str, records: Iterable[Record], accessors: Sequence[FieldAccessor]
) -> list[Record]:
    if not query or not query.strip():
        return list(records)
    needle = query.lower()
    return [
        record
        for record in records
        if any(needle in accessor.search_text(record).lower() for accessor in accessors)
    ]


def apply_filters(
    records: Iterable[Record],
    *,
    tab: str = ALL_TAB,
    tab_accessor: FieldAccessor | None = None,
    date_range: DateRange | None = None,
    date_accessor: FieldAccessor | None = None,
    query: str = "",
    search_accessors: Sequence[FieldAccessor] = (),
    owner_key: Any = None,
    scope_accessor: FieldAccessor | None = None,
) -> list[Record]:
    filtered = by_scope(owner_key, records, scope_accessor)
    filtered = by_tab(tab, filtered, tab_accessor)
    filtered = by_date_range(date_range, filtered, date_accessor)
    return by_text(query, filtered, search_accessors)
