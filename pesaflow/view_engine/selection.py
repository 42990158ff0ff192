# This file implements row selection that persists across pages, filters, and sorts.
# Selection is a plain set of record keys; visibility never changes membership.
# The header checkbox state is derived from the current page's keys on demand and never stored.

from __future__ import annotations

from collections.abc import Hashable, Iterable
from dataclasses import dataclass


@dataclass(frozen=True)
class HeaderCheckboxState:
    checked: bool
    indeterminate: bool


def toggle(selected: frozenset[Hashable], key: Hashable) -> frozenset[Hashable]:
    if key in selected:
        return selected - {key}
    return selected | {key}


def select_all_on_page(
    selected: frozenset[Hashable], page_keys: Iterable[Hashable]
) -> frozenset[Hashable]:
    return selected | frozenset(page_keys)


def deselect_all_on_page(
    selected: frozenset[Hashable], page_keys: Iterable[Hashable]
) -> frozenset[Hashable]:
    return selected - frozenset(page_keys)


def header_state(
    page_keys: Iterable[Hashable], selected: frozenset[Hashable]
) -> HeaderCheckboxState:
    keys = list(page_keys)
    selected_on_page = sum(1 for key in keys if key in selected)
    checked = bool(keys) and selected_on_page == len(keys)
    return HeaderCheckboxState(
        checked=checked,
        indeterminate=0 < selected_on_page < len(keys),
    )


def prune(selected: frozenset[Hashable], existing_keys: Iterable[Hashable]) -> frozenset[Hashable]:
    """Drop keys whose records no longer exist."""

    return selected & frozenset(existing_keys)
