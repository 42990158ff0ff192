# This file is the controller a dashboard page holds for one table.
# It exists to tie the record store, page profile, view state, and export pipeline together.
# Every dispatched action re-derives the whole view from the current records and state.
# The controller also keeps selections pruned whenever the store drops records.

from __future__ import annotations

import logging
from collections.abc import Hashable
from dataclasses import replace
from typing import Any

from pesaflow.view_engine.engine_config import EngineConfig
from pesaflow.view_engine.export import (
    ExportFormat,
    ExportJob,
    ExportResult,
    ExportRunner,
    export_records,
)
from pesaflow.view_engine.pages import PageProfile
from pesaflow.view_engine.pagination import entry_range, pagination_items
from pesaflow.view_engine.records import Record, RecordStore
from pesaflow.view_engine.reducer import DerivedView, derive_view, process_records, reduce
from pesaflow.view_engine.state import (
    Action,
    DeselectAllOnPage,
    PruneSelection,
    SelectAllOnPage,
    SetPageSize,
    SetSortKey,
    SetTab,
    ToggleRowSelection,
    ViewState,
    default_view_state,
)

LOGGER = logging.getLogger("view_engine.table_view")


class TableView:
    def __init__(
        self,
        *,
        profile: PageProfile,
        store: RecordStore,
        config: EngineConfig,
        owner_key: Any = None,
        export_runner: ExportRunner | None = None,
    ) -> None:
        if store.records.key_field != profile.key_field:
            raise ValueError(
                f"Store key field '{store.records.key_field}' does not match "
                f"page '{profile.name}' key field '{profile.key_field}'"
            )
        self.profile = profile
        self.store = store
        self.config = config
        self.owner_key = owner_key
        self.export_runner = export_runner
        self._owns_runner = False
        self.state = self._initial_state()
        self._unsubscribe = store.subscribe(self._on_records_removed)

    def _initial_state(self) -> ViewState:
        return default_view_state(
            self.profile,
            page_size=self.config.clamp_page_size(self.profile.page_size),
            owner_key=self.owner_key,
        )

    # -- state transitions -------------------------------------------------

    def _validate(self, action: Action) -> Action:
        if isinstance(action, SetSortKey):
            self.profile.accessor(action.key)
        elif isinstance(action, SetTab) and action.tab not in self.profile.tabs:
            supported = ", ".join(self.profile.tabs)
            raise ValueError(f"Unsupported tab '{action.tab}'. Supported tabs: {supported}")
        elif isinstance(action, SetPageSize):
            options = self.page_size_options
            if options and action.page_size not in options:
                supported = ", ".join(str(size) for size in options)
                raise ValueError(
                    f"Unsupported page size {action.page_size}. Supported sizes: {supported}"
                )
            return SetPageSize(self.config.clamp_page_size(action.page_size))
        return action

    @property
    def page_size_options(self) -> tuple[int, ...]:
        """Sizes offered by the page-size picker; always includes the page's own default."""

        if not self.config.page_size_options:
            return ()
        initial = self._initial_state().page_size
        return tuple(sorted({*self.config.page_size_options, initial}))

    def dispatch(self, action: Action) -> DerivedView:
        self.state = reduce(self.state, self._validate(action))
        return self.view()

    def view(self) -> DerivedView:
        derived = derive_view(self.store.records, self.state, self.profile)
        if derived.pagination.current_page != self.state.current_page:
            self.state = replace(self.state, current_page=derived.pagination.current_page)
        return derived

    def toggle_row(self, key: Hashable) -> DerivedView:
        return self.dispatch(ToggleRowSelection(key))

    def select_all_on_page(self) -> DerivedView:
        return self.dispatch(SelectAllOnPage(self.view().page_keys))

    def deselect_all_on_page(self) -> DerivedView:
        return self.dispatch(DeselectAllOnPage(self.view().page_keys))

    def set_header_checkbox(self, checked: bool) -> DerivedView:
        if checked:
            return self.select_all_on_page()
        return self.deselect_all_on_page()

    def reset(self) -> DerivedView:
        self.state = self._initial_state()
        return self.view()

    def close(self) -> None:
        self._unsubscribe()
        self.state = self._initial_state()
        if self._owns_runner and self.export_runner is not None:
            self.export_runner.shutdown()
            self.export_runner = None
            self._owns_runner = False

    def _on_records_removed(self, removed: frozenset[Hashable]) -> None:
        stale = removed & self.state.selected_keys
        self.state = reduce(self.state, PruneSelection(self.store.records.keys()))
        if stale:
            LOGGER.info("Pruned %d selected key(s) after record removal", len(stale))

    # -- page footer helpers ----------------------------------------------

    def page_controls(self) -> list[int | str]:
        pagination = self.view().pagination
        return pagination_items(pagination.current_page, pagination.total_pages)

    def entry_range(self) -> tuple[int, int]:
        pagination = self.view().pagination
        return entry_range(
            current_page=pagination.current_page,
            page_size=self.state.page_size,
            total_count=pagination.total_count,
        )

    # -- export -------------------------------------------------------------

    def matching_records(self) -> list[Record]:
        return process_records(self.store.records, self.state, self.profile)

    def selected_records(self) -> list[Record]:
        return [
            record
            for record in self.matching_records()
            if record[self.profile.key_field] in self.state.selected_keys
        ]

    def export_context(self) -> str | None:
        if self.profile.tab_column is None:
            return None
        return self.state.active_tab

    def export(self, fmt: ExportFormat | str, *, context: str | None = None) -> ExportResult:
        return export_records(
            self.matching_records(),
            self.profile.export_accessors,
            ExportFormat(fmt),
            title=self.profile.report_title,
            context=context or self.export_context(),
            file_title=self.profile.file_title,
            currency_code=self.config.currency_code,
            include_time=self.config.include_time_in_exports,
        )

    def export_async(self, fmt: ExportFormat | str, *, context: str | None = None) -> ExportJob:
        if self.export_runner is None:
            self.export_runner = ExportRunner.from_config(self.config)
            self._owns_runner = True
            LOGGER.info(
                "Started export runner for %s (workers=%d)",
                self.profile.name,
                self.export_runner.max_workers,
            )
        return self.export_runner.submit(
            self.matching_records(),
            self.profile.export_accessors,
            ExportFormat(fmt),
            title=self.profile.report_title,
            context=context or self.export_context(),
            file_title=self.profile.file_title,
            currency_code=self.config.currency_code,
            include_time=self.config.include_time_in_exports,
        )
