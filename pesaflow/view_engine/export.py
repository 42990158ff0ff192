# This file serializes the filtered and sorted record set into downloadable reports.
# It exists so every page exports exactly the rows its filters select, regardless of the visible page.
# Two targets are produced from the same accessors used for display: a PDF table and delimited text.
# Export jobs run on a small worker pool so the interactive view stays responsive; failures surface, never retry.

from __future__ import annotations

import logging
import re
import threading
from collections.abc import Iterable, Sequence
from concurrent.futures import CancelledError, Future, ThreadPoolExecutor
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any

import pandas as pd
from fpdf import FPDF
from fpdf.enums import XPos, YPos
from fpdf.errors import FPDFException

from pesaflow.view_engine.accessors import FieldAccessor, FieldKind
from pesaflow.view_engine.engine_config import EngineConfig
from pesaflow.view_engine.errors import ExportError
from pesaflow.view_engine.formatting import format_cell
from pesaflow.view_engine.records import Record

LOGGER = logging.getLogger("view_engine.export")

_UNSAFE_FILE_CHARS = re.compile(r"[^\w.-]", re.UNICODE)
_WHITESPACE = re.compile(r"\s+")

HEADER_FILL = (16, 185, 129)
STRIPE_FILL = (240, 240, 240)


class ExportFormat(str, Enum):
    PDF = "pdf"
    CSV = "csv"


@dataclass(frozen=True)
class TabularDocument:
    title: str
    columns: tuple[str, ...]
    rows: tuple[tuple[tuple[str, str], ...], ...]

    @property
    def body(self) -> list[list[str]]:
        return [[value for _, value in row] for row in self.rows]


@dataclass(frozen=True)
class ExportResult:
    format: ExportFormat
    file_name: str
    content: bytes
    row_count: int

    def write_to(self, directory: str | Path) -> Path:
        target_dir = Path(directory)
        target_dir.mkdir(parents=True, exist_ok=True)
        path = target_dir / self.file_name
        path.write_bytes(self.content)
        return path


def export_file_name(report_title: str, context: str | None, extension: str) -> str:
    """`<ReportTitle>_<Context>.<ext>` with whitespace collapsed to underscores."""

    parts = [report_title] + ([context] if context else [])
    stem = "_".join(_WHITESPACE.sub("_", part.strip()) for part in parts if part.strip())
    stem = _UNSAFE_FILE_CHARS.sub("", stem) or "export"
    return f"{stem}.{extension.lstrip('.')}"


def _check_cancelled(cancel_event: threading.Event | None) -> None:
    if cancel_event is not None and cancel_event.is_set():
        raise CancelledError("export cancelled")


def build_tabular_document(
    records: Iterable[Record],
    accessors: Sequence[FieldAccessor],
    *,
    title: str,
    currency_code: str,
    include_time: bool = False,
    cancel_event: threading.Event | None = None,
) -> TabularDocument:
    labels = tuple(accessor.label for accessor in accessors)
    rows: list[tuple[tuple[str, str], ...]] = []
    for record in records:
        _check_cancelled(cancel_event)
        rows.append(
            tuple(
                (
                    accessor.label,
                    format_cell(
                        accessor, record, currency_code=currency_code, include_time=include_time
                    ),
                )
                for accessor in accessors
            )
        )
    return TabularDocument(title=title, columns=labels, rows=tuple(rows))


def _delimited_value(
    accessor: FieldAccessor, record: Record, *, currency_code: str, include_time: bool
) -> Any:
    if accessor.kind is FieldKind.NUMBER:
        return accessor.sort_value(record)
    return format_cell(accessor, record, currency_code=currency_code, include_time=include_time)


def to_delimited_text(
    records: Iterable[Record],
    accessors: Sequence[FieldAccessor],
    *,
    currency_code: str,
    include_time: bool = False,
    cancel_event: threading.Event | None = None,
) -> str:
    """CSV text: header of labels, then one row per record; quoting only where a value needs it."""

    rows: list[list[Any]] = []
    for record in records:
        _check_cancelled(cancel_event)
        rows.append(
            [
                _delimited_value(
                    accessor, record, currency_code=currency_code, include_time=include_time
                )
                for accessor in accessors
            ]
        )
    frame = pd.DataFrame(rows, columns=[accessor.label for accessor in accessors], dtype=object)
    return frame.to_csv(index=False, lineterminator="\n")


def _pdf_text(value: str) -> str:
    return value.encode("latin-1", "replace").decode("latin-1")


class ReportPDF(FPDF):
    def __init__(self, title: str, *, orientation: str = "P") -> None:
        super().__init__(orientation=orientation, unit="mm", format="A4")
        self.report_title = title
        self.set_auto_page_break(auto=True, margin=15)

    def header(self) -> None:
        self.set_font("Helvetica", "B", 14)
        self.cell(0, 10, _pdf_text(self.report_title), new_x=XPos.LMARGIN, new_y=YPos.NEXT)
        self.ln(2)

    def footer(self) -> None:
        self.set_y(-15)
        self.set_font("Helvetica", "I", 8)
        self.set_text_color(128, 128, 128)
        self.cell(0, 10, f"Page {self.page_no()}", align="C")
        self.set_text_color(0, 0, 0)

    def _fit(self, text: str, width: float) -> str:
        text = _pdf_text(text)
        if self.get_string_width(text) <= width - 2:
            return text
        while text and self.get_string_width(text + "...") > width - 2:
            text = text[:-1]
        return text + "..."

    def table_header(self, columns: Sequence[str], width: float) -> None:
        self.set_font("Helvetica", "B", 9)
        self.set_fill_color(*HEADER_FILL)
        self.set_text_color(255, 255, 255)
        for label in columns:
            self.cell(width, 7, self._fit(label, width), border=1, align="L", fill=True)
        self.ln()
        self.set_text_color(0, 0, 0)
        self.set_font("Helvetica", "", 9)

    def table_body(
        self, body: Sequence[Sequence[str]], columns: Sequence[str], width: float
    ) -> None:
        self.set_fill_color(*STRIPE_FILL)
        fill = False
        for row in body:
            if self.will_page_break(6):
                self.add_page()
                self.table_header(columns, width)
                self.set_fill_color(*STRIPE_FILL)
            for value in row:
                self.cell(width, 6, self._fit(value, width), border=1, align="L", fill=fill)
            self.ln()
            fill = not fill


def render_pdf(document: TabularDocument) -> bytes:
    orientation = "L" if len(document.columns) > 6 else "P"
    pdf = ReportPDF(document.title, orientation=orientation)
    pdf.add_page()
    width = pdf.epw / max(1, len(document.columns))
    pdf.table_header(document.columns, width)
    pdf.table_body(document.body, document.columns, width)
    return bytes(pdf.output())


def export_records(
    records: Sequence[Record],
    accessors: Sequence[FieldAccessor],
    fmt: ExportFormat,
    *,
    title: str,
    context: str | None,
    currency_code: str,
    include_time: bool = False,
    file_title: str | None = None,
    cancel_event: threading.Event | None = None,
) -> ExportResult:
    """Serialize every given record; callers pass the full filtered and sorted set.

    `file_title` names the file when it should differ from the heading printed in the report.
    """

    fmt = ExportFormat(fmt)
    file_name = export_file_name(file_title or title, context, fmt.value)
    LOGGER.info("Export started file=%s rows=%d", file_name, len(records))
    try:
        if fmt is ExportFormat.CSV:
            text = to_delimited_text(
                records,
                accessors,
                currency_code=currency_code,
                include_time=include_time,
                cancel_event=cancel_event,
            )
            content = text.encode("utf-8")
        else:
            document = build_tabular_document(
                records,
                accessors,
                title=f"{title} - {context}" if context else title,
                currency_code=currency_code,
                include_time=include_time,
                cancel_event=cancel_event,
            )
            _check_cancelled(cancel_event)
            content = render_pdf(document)
    except CancelledError:
        LOGGER.info("Export cancelled file=%s", file_name)
        raise
    except (ValueError, TypeError, KeyError, FPDFException) as exc:
        LOGGER.exception("Export failed file=%s", file_name)
        raise ExportError(
            f"Failed to export {file_name}: {exc}",
            details={"file_name": file_name, "format": fmt.value, "rows": len(records)},
        ) from exc

    LOGGER.info("Export finished file=%s bytes=%d", file_name, len(content))
    return ExportResult(format=fmt, file_name=file_name, content=content, row_count=len(records))


class ExportJob:
    """Handle for a queued or running export."""

    def __init__(self, future: Future[ExportResult], cancel_event: threading.Event) -> None:
        self.future = future
        self._cancel_event = cancel_event

    def cancel(self) -> bool:
        """Cancel a queued job outright and ask a running one to stop at its next row.

        Returns True only when the job will never produce a result.
        """

        self._cancel_event.set()
        return self.future.cancel()

    def cancelled(self) -> bool:
        return self.future.cancelled()

    def cancel_requested(self) -> bool:
        return self._cancel_event.is_set()

    def result(self, timeout: float | None = None) -> ExportResult:
        return self.future.result(timeout=timeout)


class ExportRunner:
    def __init__(self, *, max_workers: int = 2) -> None:
        self.max_workers = max_workers
        self._executor = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="export")

    @classmethod
    def from_config(cls, config: EngineConfig) -> ExportRunner:
        return cls(max_workers=config.export_max_workers)

    def submit(
        self,
        records: Sequence[Record],
        accessors: Sequence[FieldAccessor],
        fmt: ExportFormat,
        *,
        title: str,
        context: str | None,
        currency_code: str,
        include_time: bool = False,
        file_title: str | None = None,
    ) -> ExportJob:
        cancel_event = threading.Event()
        future = self._executor.submit(
            export_records,
            tuple(records),
            tuple(accessors),
            fmt,
            title=title,
            context=context,
            currency_code=currency_code,
            include_time=include_time,
            file_title=file_title,
            cancel_event=cancel_event,
        )
        return ExportJob(future, cancel_event)

    def shutdown(self, *, wait: bool = True) -> None:
        self._executor.shutdown(wait=wait, cancel_futures=True)

    def __enter__(self) -> ExportRunner:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.shutdown()
