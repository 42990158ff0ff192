# This file tests view state transitions and full view derivation.
# It exists to pin which actions send the view back to page 1 and which leave filters untouched.
# The tests replay the documented tab, sort, and paging walkthrough end to end.

from __future__ import annotations

from dataclasses import dataclass, replace

import pytest

from pesaflow.view_engine.filters import DateRange
from pesaflow.view_engine.reducer import derive_view, process_records, reduce
from pesaflow.view_engine.sorting import SortDirection
from pesaflow.view_engine.state import (
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
    default_view_state,
)
from tests.view_engine.support import SIMPLE_PROFILE, scenario_records


def _state(**overrides) -> ViewState:
    return replace(default_view_state(SIMPLE_PROFILE), **overrides)


@pytest.mark.parametrize(
    "action",
    [
        SetSearch("pend"),
        SetTab("Completed"),
        SetDateRange(DateRange("2024-01-01", "2024-01-31")),
        SetSortKey("amount"),
        SetPageSize(5),
        ClearFilters(),
    ],
)
def test_filter_sort_and_page_size_changes_reset_page(action) -> None:
    state = _state(current_page=4)

    assert reduce(state, action).current_page == 1


def test_set_page_leaves_filters_and_sort_unchanged() -> None:
    state = _state(search_query="x", active_tab="Completed", sort_key="amount")

    next_state = reduce(state, SetPage(3))

    assert next_state.current_page == 3
    assert next_state.search_query == "x"
    assert next_state.active_tab == "Completed"
    assert next_state.sort == state.sort


def test_set_page_below_one_is_raised_to_one() -> None:
    assert reduce(_state(current_page=2), SetPage(-3)).current_page == 1


def test_selection_actions_keep_page() -> None:
    state = _state(current_page=2)

    state = reduce(state, ToggleRowSelection(1))
    state = reduce(state, SelectAllOnPage((2, 3)))
    assert state.selected_keys == {1, 2, 3}
    state = reduce(state, DeselectAllOnPage((2,)))
    assert state.selected_keys == {1, 3}
    state = reduce(state, PruneSelection(frozenset({3})))
    assert state.selected_keys == {3}
    assert state.current_page == 2


def test_clear_filters_keeps_sort_and_selection() -> None:
    state = _state(
        search_query="abc",
        active_tab="Pending",
        date_range=DateRange("2024-01-01", "2024-01-02"),
        sort_key="amount",
        selected_keys=frozenset({1}),
    )

    cleared = reduce(state, ClearFilters())

    assert cleared.search_query == ""
    assert cleared.active_tab == "All"
    assert cleared.date_range is None
    assert cleared.sort_key == "amount"
    assert cleared.selected_keys == {1}


def test_unknown_action_raises_type_error() -> None:
    @dataclass(frozen=True)
    class Shuffle:
        seed: int

    with pytest.raises(TypeError, match="Unsupported view action: Shuffle"):
        reduce(_state(), Shuffle(1))


def test_tab_sort_and_page_walkthrough() -> None:
    records = scenario_records()
    state = _state()

    state = reduce(state, SetTab("Completed"))
    assert [record["id"] for record in process_records(records, state, SIMPLE_PROFILE)] == [1, 3]

    state = reduce(reduce(state, SetSortKey("amount")), SetSortKey("amount"))
    assert state.sort_direction is SortDirection.DESCENDING
    processed = process_records(records, state, SIMPLE_PROFILE)
    assert [(record["id"], record["amount"]) for record in processed] == [(1, 100), (3, 75)]

    state = reduce(reduce(state, SetPageSize(1)), SetPage(2))
    view = derive_view(records, state, SIMPLE_PROFILE)
    assert view.page_records == [{"id": 3, "status": "Completed", "amount": 75}]
    assert view.pagination.total_pages == 2
    assert view.page_keys == (3,)


def test_derive_view_reports_header_state() -> None:
    records = scenario_records()
    state = _state(selected_keys=frozenset({1, 2}))

    view = derive_view(records, state, SIMPLE_PROFILE)

    assert view.selection.checked is False
    assert view.selection.indeterminate is True
    payload = view.to_dict()
    assert payload["pagination"] == {"current_page": 1, "total_pages": 1, "total_count": 3}
    assert payload["sort"] == {"key": "id", "direction": "ascending"}


def test_view_state_rejects_invalid_paging() -> None:
    with pytest.raises(ValueError, match="page_size must be >= 1"):
        ViewState(page_size=0)
    with pytest.raises(ValueError, match="current_page must be >= 1"):
        ViewState(current_page=0)


def test_view_state_serializes_to_plain_values() -> None:
    state = _state(
        date_range=DateRange("2024-01-01", "2024-01-31"),
        selected_keys=frozenset({3, 1}),
    )

    assert state.to_dict() == {
        "search_query": "",
        "active_tab": "All",
        "date_range": {"start": "2024-01-01", "end": "2024-01-31"},
        "sort": "id:asc",
        "current_page": 1,
        "page_size": 10,
        "selected_keys": [1, 3],
    }
