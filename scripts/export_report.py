# This file exports a dashboard report from a local record file without the UI.
# It exists so operators can reproduce exactly what a filtered page would download.
# The script runs records through the same view engine the pages use, then writes CSV and/or PDF files.
# ruff: noqa: E402

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

ROOT_DIR = Path(__file__).resolve().parent.parent
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

import pandas as pd

from pesaflow.common.logging import configure_logging
from pesaflow.common.settings import get_settings
from pesaflow.view_engine.engine_config import load_engine_config
from pesaflow.view_engine.errors import ExportError
from pesaflow.view_engine.export import ExportFormat
from pesaflow.view_engine.filters import DateRange
from pesaflow.view_engine.formatting import format_count
from pesaflow.view_engine.pages import PAGE_PROFILES, get_page_profile
from pesaflow.view_engine.records import RecordStore, records_from_frame
from pesaflow.view_engine.sorting import SortDirection
from pesaflow.view_engine.state import SetDateRange, SetSearch, SetSortKey, SetTab
from pesaflow.view_engine.table_view import TableView

LOGGER = logging.getLogger("export_report")


def _read_frame(path: Path) -> pd.DataFrame:
    suffix = path.suffix.lower()
    if suffix == ".json":
        return pd.read_json(path, orient="records", dtype=False, convert_dates=False)
    if suffix == ".csv":
        return pd.read_csv(path)
    raise ValueError(f"Unsupported input file type '{suffix}'. Use .json or .csv")


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Export a filtered dashboard table to CSV or PDF.")
    parser.add_argument("--page", required=True, choices=sorted(PAGE_PROFILES))
    parser.add_argument("--input", required=True, type=Path, help="Records as .json or .csv")
    parser.add_argument("--format", choices=["csv", "pdf", "both"], default="csv")
    parser.add_argument("--tab", default=None)
    parser.add_argument("--search", default="")
    parser.add_argument("--start", default=None, help="Inclusive start date (ISO-8601)")
    parser.add_argument("--end", default=None, help="Inclusive end date (ISO-8601)")
    parser.add_argument("--sort", default=None, help="Column to sort by")
    parser.add_argument("--descending", action="store_true")
    parser.add_argument("--owner", default=None, help="Restrict rows to one owner key")
    parser.add_argument("--context", default=None, help="File name context, e.g. a group name")
    parser.add_argument("--output-dir", type=Path, default=None)
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    configure_logging()
    settings = get_settings()
    config = load_engine_config()
    profile = get_page_profile(args.page)

    records = records_from_frame(_read_frame(args.input), key_field=profile.key_field)
    view = TableView(
        profile=profile,
        store=RecordStore(records),
        config=config,
        owner_key=args.owner,
    )

    if args.tab:
        view.dispatch(SetTab(args.tab))
    if args.start and args.end:
        view.dispatch(SetDateRange(DateRange(start=args.start, end=args.end)))
    if args.search:
        view.dispatch(SetSearch(args.search))
    if args.sort:
        if args.sort not in profile.sortable_columns:
            LOGGER.error(
                "Cannot sort %s by %r. Sortable columns: %s",
                profile.name,
                args.sort,
                ", ".join(profile.sortable_columns),
            )
            view.close()
            return 2
        direction = SortDirection.DESCENDING if args.descending else SortDirection.ASCENDING
        view.dispatch(SetSortKey(args.sort))
        if view.state.sort_direction is not direction:
            view.dispatch(SetSortKey(args.sort))

    if args.format == "both":
        formats = [ExportFormat.CSV, ExportFormat.PDF]
    else:
        formats = [ExportFormat(args.format)]
    output_dir = args.output_dir or settings.export_path
    try:
        for fmt in formats:
            result = view.export(fmt, context=args.context)
            path = result.write_to(output_dir)
            print(f"Wrote {format_count(result.row_count)} rows to {path}")
    except ExportError as exc:
        LOGGER.error("Export failed: %s details=%s", exc, exc.details)
        return 1
    finally:
        view.close()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
