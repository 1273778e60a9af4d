"""Merge per-document accessibility reports into one wide CSV.

``merge`` wires the whole stage together:

    read input CSV → derive column layout → match each URL to a report →
    build merged rows → write output CSV

The output always has exactly one row per input record, whether or not a
report exists for it.
"""

from __future__ import annotations

import csv
from pathlib import Path
from typing import Iterable, Optional, Sequence
from urllib.parse import urlsplit

from pdfaudit.config import settings
from pdfaudit.errors import InvalidInputError, MalformedReportError, OutputError
from pdfaudit.reports.loader import find_report, list_report_files, load_report
from pdfaudit.reports.models import (
    AccessibilityReport,
    ColumnLayout,
    InputRecord,
    MergedRow,
)

_INPUT_FIELDS = ("url", "date", "title", "post_url")

# Export CSV header → input field, so scanner output can be merged directly.
_EXPORT_FIELD_MAP = {
    "PDF URL": "url",
    "Post Date": "date",
    "Post Title": "title",
    "Post URL": "post_url",
}


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _is_short_link(url: str, domains: Sequence[str]) -> bool:
    host = (urlsplit(url).hostname or "").lower()
    if not host:
        return any(d.lower() in url.lower() for d in domains)
    return any(host == d.lower() or host.endswith("." + d.lower()) for d in domains)


def _count(value: Optional[int]) -> str:
    return "" if value is None else str(value)


def report_name_for_url(url: str, short_link_domains: Optional[Sequence[str]] = None) -> str:
    """Derive the report file-name fragment expected for *url*.

    The last path segment is used; short links get a ``.pdf`` suffix because
    their segment is an opaque slug.  Spaces (literal or ``%20``) become
    underscores.
    """
    domains = settings.short_link_domains if short_link_domains is None else short_link_domains
    segment = urlsplit(url.strip()).path.rstrip("/").rsplit("/", 1)[-1]
    if segment and _is_short_link(url, domains):
        segment = f"{segment}.pdf"
    return segment.replace(" ", "_").replace("%20", "_")


def _passthrough(record: InputRecord) -> dict[str, str]:
    return {
        "url": record.url,
        "date": record.date,
        "title": record.title,
        "post_url": record.post_url,
    }


def build_row(
    record: InputRecord,
    report: AccessibilityReport,
    report_file: str,
    layout: ColumnLayout,
) -> MergedRow:
    """Fill a row from *report*; rule keys outside *layout* are dropped."""
    summary = report.summary
    values = _passthrough(record)
    values.update(
        {
            "Description": summary.description or "",
            "Needs_manual_check": _count(summary.needs_manual_check),
            "Passed_manually": _count(summary.passed_manually),
            "failed_manually": _count(summary.failed_manually),
            "skipped": _count(summary.skipped),
            "passed": _count(summary.passed),
            "failed": _count(summary.failed),
            "full_report": report_file,
        }
    )
    for key, cell in report.rule_cells():
        if key in layout:
            values[key] = cell
    return MergedRow(values=values)


def blank_row(record: InputRecord) -> MergedRow:
    """Row for a record without a usable report: passthrough fields only."""
    return MergedRow(values=_passthrough(record))


# ---------------------------------------------------------------------------
# Aggregation
# ---------------------------------------------------------------------------

class ReportAggregator:
    """Join input records with the reports found in *report_dir*.

    The report directory is listed once; the column layout is derived once
    from the first report file and reused for every row.
    """

    def __init__(
        self,
        report_dir: str | Path,
        skip_malformed: Optional[bool] = None,
        short_link_domains: Optional[Sequence[str]] = None,
    ) -> None:
        self.report_dir = Path(report_dir)
        self.skip_malformed = (
            settings.skip_malformed_reports if skip_malformed is None else skip_malformed
        )
        self._domains = short_link_domains
        self._files = list_report_files(self.report_dir)
        self._layout: Optional[ColumnLayout] = None

    @property
    def layout(self) -> ColumnLayout:
        if self._layout is None:
            self._layout = self._derive_layout()
        return self._layout

    def _derive_layout(self) -> ColumnLayout:
        for file_name in self._files:
            try:
                report = load_report(self.report_dir / file_name)
            except MalformedReportError as exc:
                if not self.skip_malformed:
                    raise
                print(f"[reports] ⚠ skipping header sample: {exc}")
                continue
            return ColumnLayout(report.rule_keys())
        return ColumnLayout()

    def row_for(self, record: InputRecord) -> MergedRow:
        """Return the merged row for one input record."""
        name = report_name_for_url(record.url, self._domains)
        path = find_report(self.report_dir, name, self._files)
        if path is None:
            return blank_row(record)

        try:
            report = load_report(path)
        except MalformedReportError as exc:
            if not self.skip_malformed:
                raise
            print(f"[reports] ⚠ {exc}; leaving row blank.")
            return blank_row(record)
        return build_row(record, report, path.name, self.layout)

    def aggregate(self, records: Iterable[InputRecord]) -> list[MergedRow]:
        layout = self.layout  # derive before any row so header errors surface first
        rows = [self.row_for(record) for record in records]
        print(f"[reports] {len(rows)} row(s) merged, {len(layout.dynamic_keys)} rule column(s).")
        return rows


def derive_layout(report_dir: str | Path, skip_malformed: Optional[bool] = None) -> ColumnLayout:
    """Column layout derived from the first report in *report_dir*."""
    return ReportAggregator(report_dir, skip_malformed=skip_malformed).layout


def aggregate(
    records: Iterable[InputRecord],
    report_dir: str | Path,
    skip_malformed: Optional[bool] = None,
) -> list[MergedRow]:
    """One :class:`MergedRow` per input record (see :class:`ReportAggregator`)."""
    return ReportAggregator(report_dir, skip_malformed=skip_malformed).aggregate(records)


# ---------------------------------------------------------------------------
# CSV I/O
# ---------------------------------------------------------------------------

def read_input_records(path: str | Path, delimiter: Optional[str] = None) -> list[InputRecord]:
    """Read the input CSV (``url,date,title,post_url`` or the export schema).

    Raises:
        InvalidInputError: If the file is missing or lacks the required columns.
    """
    sep = delimiter or settings.csv_delimiter
    try:
        handle = open(path, newline="", encoding="utf-8-sig")
    except OSError as exc:
        raise InvalidInputError(f"Cannot read input CSV {str(path)!r}: {exc}") from exc

    with handle:
        reader = csv.DictReader(handle, delimiter=sep)
        fields = [f.strip() for f in reader.fieldnames or []]
        reader.fieldnames = fields

        if set(_INPUT_FIELDS) <= set(fields):
            mapping = {f: f for f in _INPUT_FIELDS}
        elif set(_EXPORT_FIELD_MAP) <= set(fields):
            mapping = {target: source for source, target in _EXPORT_FIELD_MAP.items()}
        else:
            raise InvalidInputError(
                f"Input CSV {str(path)!r} must have columns {', '.join(_INPUT_FIELDS)}"
            )

        return [
            InputRecord(**{name: (row.get(source) or "").strip() for name, source in mapping.items()})
            for row in reader
        ]


def write_merged_csv(
    rows: Iterable[MergedRow],
    layout: ColumnLayout,
    destination: str | Path,
    delimiter: Optional[str] = None,
) -> int:
    """Write the merged rows with *layout*'s header; return the row count.

    Raises:
        OutputError: If *destination* cannot be opened for writing.
    """
    sep = delimiter or settings.csv_delimiter
    try:
        handle = open(destination, "w", newline="", encoding="utf-8")
    except OSError as exc:
        raise OutputError(f"Cannot write {str(destination)!r}: {exc}") from exc

    count = 0
    with handle:
        writer = csv.writer(handle, delimiter=sep)
        writer.writerow(layout.titles)
        for row in rows:
            writer.writerow(row.as_list(layout))
            count += 1
    return count


def merge(
    input_csv: str | Path,
    report_dir: str | Path,
    output_csv: str | Path,
    skip_malformed: Optional[bool] = None,
) -> int:
    """Run the whole merge stage and return the number of rows written."""
    records = read_input_records(input_csv)
    aggregator = ReportAggregator(report_dir, skip_malformed=skip_malformed)
    rows = aggregator.aggregate(records)
    return write_merged_csv(rows, aggregator.layout, output_csv)
