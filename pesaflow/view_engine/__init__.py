"""
Tabular view engine shared by the dashboard's list pages.

Pipeline:
  records -> filters (scope, tab, date range, text) -> sort -> page slice
                                                          -> export (full set)
State changes go through `reduce`; `derive_view` recomputes what the page shows.
"""

from pesaflow.view_engine.engine_config import EngineConfig, load_engine_config
from pesaflow.view_engine.export import ExportFormat, ExportResult, ExportRunner
from pesaflow.view_engine.pages import PAGE_PROFILES, PageProfile, get_page_profile
from pesaflow.view_engine.records import RecordSet, RecordStore, records_from_frame
from pesaflow.view_engine.reducer import DerivedView, derive_view, process_records, reduce
from pesaflow.view_engine.state import ViewState, default_view_state
from pesaflow.view_engine.table_view import TableView

__all__ = [
    "EngineConfig",
    "load_engine_config",
    "ExportFormat",
    "ExportResult",
    "ExportRunner",
    "PAGE_PROFILES",
    "PageProfile",
    "get_page_profile",
    "RecordSet",
    "RecordStore",
    "records_from_frame",
    "DerivedView",
    "derive_view",
    "process_records",
    "reduce",
    "ViewState",
    "default_view_state",
    "TableView",
]
