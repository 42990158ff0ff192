# This file defines the view state and the actions that change it.
# The state is the complete, serializable description of a page's filter, sort, page, and selection.
# Actions are small frozen dataclasses so the reducer can dispatch on their type.

from __future__ import annotations

from collections.abc import Hashable
from dataclasses import dataclass, field
from typing import Any

from pesaflow.view_engine.filters import ALL_TAB, DateRange
from pesaflow.view_engine.pages import PageProfile
from pesaflow.view_engine.sorting import SortDirection, SortSpec


@dataclass(frozen=True)
class ViewState:
    search_query: str = ""
    active_tab: str = ALL_TAB
    date_range: DateRange | None = None
    sort_key: str = "id"
    sort_direction: SortDirection = SortDirection.ASCENDING
    current_page: int = 1
    page_size: int = 10
    selected_keys: frozenset[Hashable] = field(default_factory=frozenset)
    owner_key: Any = None

    def __post_init__(self) -> None:
        if self.current_page < 1:
            raise ValueError("current_page must be >= 1")
        if self.page_size < 1:
            raise ValueError("page_size must be >= 1")

    @property
    def sort(self) -> SortSpec:
        return SortSpec(key=self.sort_key, direction=self.sort_direction)

    def to_dict(self) -> dict[str, Any]:
        return {
            "search_query": self.search_query,
            "active_tab": self.active_tab,
            "date_range": (
                None
                if self.date_range is None
                else {"start": str(self.date_range.start), "end": str(self.date_range.end)}
            ),
            "sort": self.sort.as_text,
            "current_page": self.current_page,
            "page_size": self.page_size,
            "selected_keys": sorted(self.selected_keys, key=str),
        }


def default_view_state(
    profile: PageProfile, *, page_size: int | None = None, owner_key: Any = None
) -> ViewState:
    resolved_page_size = page_size or profile.page_size
    if resolved_page_size is None:
        raise ValueError(f"Page '{profile.name}' has no page size; pass one explicitly")
    return ViewState(
        active_tab=profile.default_tab,
        sort_key=profile.default_sort.key,
        sort_direction=profile.default_sort.direction,
        page_size=resolved_page_size,
        owner_key=owner_key,
    )


@dataclass(frozen=True)
class SetSearch:
    query: str


@dataclass(frozen=True)
class SetTab:
    tab: str


@dataclass(frozen=True)
class SetDateRange:
    date_range: DateRange | None


@dataclass(frozen=True)
class SetSortKey:
    key: str


@dataclass(frozen=True)
class SetPage:
    page: int


@dataclass(frozen=True)
class SetPageSize:
    page_size: int


@dataclass(frozen=True)
class ToggleRowSelection:
    key: Hashable


@dataclass(frozen=True)
class SelectAllOnPage:
    page_keys: tuple[Hashable, ...]


@dataclass(frozen=True)
class DeselectAllOnPage:
    page_keys: tuple[Hashable, ...]


@dataclass(frozen=True)
class ClearFilters:
    pass


@dataclass(frozen=True)
class PruneSelection:
    existing_keys: frozenset[Hashable]


Action = (
    SetSearch
    | SetTab
    | SetDateRange
    | SetSortKey
    | SetPage
    | SetPageSize
    | ToggleRowSelection
    | SelectAllOnPage
    | DeselectAllOnPage
    | ClearFilters
    | PruneSelection
)
