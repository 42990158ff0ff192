# This file handles page slicing and page-control helpers for tabular views.
# It exists so every page uses the same deterministic rules for page counts and clamping.
# Out-of-range page requests are clamped into range rather than rejected.
# The numbered-control and entry-range helpers feed the footer of each table.

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import TypeVar

T = TypeVar("T")

ELLIPSIS = "..."


@dataclass(frozen=True)
class PaginationSpec:
    page: int
    page_size: int

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.page_size


@dataclass(frozen=True)
class PaginationInfo:
    current_page: int
    total_pages: int
    total_count: int


def compute_total_pages(*, total_count: int, page_size: int) -> int:
    """Page count for display; an empty result still has one (empty) page."""

    if page_size < 1:
        raise ValueError("page_size must be >= 1")
    if total_count <= 0:
        return 1
    return ((total_count - 1) // page_size) + 1


def clamp_page(page: int, total_pages: int) -> int:
    return max(1, min(int(page), max(1, total_pages)))


def paginate(
    items: Sequence[T], *, page: int, page_size: int
) -> tuple[list[T], PaginationInfo]:
    total_count = len(items)
    total_pages = compute_total_pages(total_count=total_count, page_size=page_size)
    spec = PaginationSpec(page=clamp_page(page, total_pages), page_size=page_size)
    page_items = list(items[spec.offset : spec.offset + page_size])
    return page_items, PaginationInfo(
        current_page=spec.page, total_pages=total_pages, total_count=total_count
    )


def pagination_items(current_page: int, total_pages: int) -> list[int | str]:
    """Numbered page controls: every page up to five, otherwise first/last around a window."""

    if total_pages <= 5:
        return list(range(1, total_pages + 1))

    current = clamp_page(current_page, total_pages)
    pages: list[int | str] = [1]
    if current > 3:
        pages.append(ELLIPSIS)
    if current > 2:
        pages.append(current - 1)
    if 1 < current < total_pages:
        pages.append(current)
    if current < total_pages - 1:
        pages.append(current + 1)
    if current < total_pages - 2:
        pages.append(ELLIPSIS)
    pages.append(total_pages)

    deduped: list[int | str] = []
    for item in pages:
        if isinstance(item, int) and item in deduped:
            continue
        deduped.append(item)
    return deduped


def entry_range(*, current_page: int, page_size: int, total_count: int) -> tuple[int, int]:
    """1-based (first, last) row numbers shown on the current page; (0, 0) when empty."""

    if total_count <= 0:
        return 0, 0
    first = (current_page - 1) * page_size + 1
    return first, min(current_page * page_size, total_count)
