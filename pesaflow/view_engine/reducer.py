# This file holds the pure view reducer and the derivation of what a table page shows.
# reduce(state, action) returns the next state; derive_view(records, state, profile) recomputes
# the visible page, pagination, and header checkbox from scratch after every transition.
# Filter, sort, and page-size changes return to page 1; paging and selection leave filters alone.

from __future__ import annotations

import logging
from collections.abc import Callable, Hashable, Iterable
from dataclasses import dataclass, replace
from typing import Any

from pesaflow.view_engine import selection
from pesaflow.view_engine.filters import ALL_TAB, apply_filters
from pesaflow.view_engine.pages import PageProfile
from pesaflow.view_engine.pagination import PaginationInfo, paginate
from pesaflow.view_engine.records import Record
from pesaflow.view_engine.selection import HeaderCheckboxState
from pesaflow.view_engine.sorting import SortSpec, next_sort, sort_records
from pesaflow.view_engine.state import (
    Action,
    ClearFilters,
    DeselectAllOnPage,
    PruneSelection,
    SelectAllOnPage,
    SetDateRange,
    SetPage,
    SetPageSize,
    SetSearch,
    SetSortKey,
    SetTab,
    ToggleRowSelection,
    ViewState,
)

LOGGER = logging.getLogger("view_engine.reducer")


@dataclass(frozen=True)
class SelectionInfo:
    checked: bool
    indeterminate: bool
    selected_keys: frozenset[Hashable]


@dataclass(frozen=True)
class DerivedView:
    page_records: list[Record]
    pagination: PaginationInfo
    selection: SelectionInfo
    sort: SortSpec
    page_keys: tuple[Hashable, ...]

    def to_dict(self) -> dict[str, Any]:
        return {
            "page_records": [dict(record) for record in self.page_records],
            "pagination": {
                "current_page": self.pagination.current_page,
                "total_pages": self.pagination.total_pages,
                "total_count": self.pagination.total_count,
            },
            "selection": {
                "checked": self.selection.checked,
                "indeterminate": self.selection.indeterminate,
                "selected_keys": sorted(self.selection.selected_keys, key=str),
            },
            "sort": {"key": self.sort.key, "direction": self.sort.direction.value},
        }


# ---------------------------------------------------------------------------
# Transitions
# ---------------------------------------------------------------------------


def _set_search(state: ViewState, action: SetSearch) -> ViewState:
    return replace(state, search_query=action.query, current_page=1)


def _set_tab(state: ViewState, action: SetTab) -> ViewState:
    return replace(state, active_tab=action.tab, current_page=1)


def _set_date_range(state: ViewState, action: SetDateRange) -> ViewState:
    return replace(state, date_range=action.date_range, current_page=1)


def _set_sort_key(state: ViewState, action: SetSortKey) -> ViewState:
    sort = next_sort(state.sort, action.key)
    return replace(state, sort_key=sort.key, sort_direction=sort.direction, current_page=1)


def _set_page(state: ViewState, action: SetPage) -> ViewState:
    return replace(state, current_page=max(1, int(action.page)))


def _set_page_size(state: ViewState, action: SetPageSize) -> ViewState:
    return replace(state, page_size=max(1, int(action.page_size)), current_page=1)


def _toggle_row(state: ViewState, action: ToggleRowSelection) -> ViewState:
    return replace(state, selected_keys=selection.toggle(state.selected_keys, action.key))


def _select_page(state: ViewState, action: SelectAllOnPage) -> ViewState:
    return replace(
        state, selected_keys=selection.select_all_on_page(state.selected_keys, action.page_keys)
    )


def _deselect_page(state: ViewState, action: DeselectAllOnPage) -> ViewState:
    return replace(
        state, selected_keys=selection.deselect_all_on_page(state.selected_keys, action.page_keys)
    )


def _clear_filters(state: ViewState, action: ClearFilters) -> ViewState:
    return replace(state, search_query="", active_tab=ALL_TAB, date_range=None, current_page=1)


def _prune(state: ViewState, action: PruneSelection) -> ViewState:
    return replace(state, selected_keys=selection.prune(state.selected_keys, action.existing_keys))


_HANDLERS: dict[type, Callable[[ViewState, Any], ViewState]] = {
    SetSearch: _set_search,
    SetTab: _set_tab,
    SetDateRange: _set_date_range,
    SetSortKey: _set_sort_key,
    SetPage: _set_page,
    SetPageSize: _set_page_size,
    ToggleRowSelection: _toggle_row,
    SelectAllOnPage: _select_page,
    DeselectAllOnPage: _deselect_page,
    ClearFilters: _clear_filters,
    PruneSelection: _prune,
}


def reduce(state: ViewState, action: Action) -> ViewState:
    handler = _HANDLERS.get(type(action))
    if handler is None:
        raise TypeError(f"Unsupported view action: {type(action).__name__}")
    next_state = handler(state, action)
    LOGGER.debug(
        "%s -> page=%d sort=%s selected=%d",
        type(action).__name__,
        next_state.current_page,
        next_state.sort.as_text,
        len(next_state.selected_keys),
    )
    return next_state


# ---------------------------------------------------------------------------
# Derivation
# ---------------------------------------------------------------------------


def process_records(
    records: Iterable[Record], state: ViewState, profile: PageProfile
) -> list[Record]:
    """Filtered and sorted records, ignoring pagination. Exports read from here."""

    filtered = apply_filters(
        records,
        tab=state.active_tab,
        tab_accessor=profile.optional_accessor(profile.tab_column),
        date_range=state.date_range,
        date_accessor=profile.optional_accessor(profile.date_column),
        query=state.search_query,
        search_accessors=profile.search_accessors,
        owner_key=state.owner_key,
        scope_accessor=profile.optional_accessor(profile.scope_column),
    )
    return sort_records(filtered, profile.accessor(state.sort_key), state.sort_direction)


def derive_view(records: Iterable[Record], state: ViewState, profile: PageProfile) -> DerivedView:
    processed = process_records(records, state, profile)
    page_records, pagination = paginate(
        processed, page=state.current_page, page_size=state.page_size
    )
    page_keys = tuple(record[profile.key_field] for record in page_records)
    header: HeaderCheckboxState = selection.header_state(page_keys, state.selected_keys)
    return DerivedView(
        page_records=page_records,
        pagination=pagination,
        selection=SelectionInfo(
            checked=header.checked,
            indeterminate=header.indeterminate,
            selected_keys=state.selected_keys,
        ),
        sort=state.sort,
        page_keys=page_keys,
    )
