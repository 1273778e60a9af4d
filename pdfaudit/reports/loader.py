"""Locate and parse accessibility report files."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Optional, Sequence

from pydantic import ValidationError

from pdfaudit.errors import MalformedReportError, ReportDirectoryError
from pdfaudit.reports.models import AccessibilityReport

REPORT_SUFFIX = ".json"


def list_report_files(report_dir: str | Path) -> list[str]:
    """Return the names of the report files in *report_dir*, sorted.

    Raises:
        ReportDirectoryError: If the directory is missing or unreadable.
    """
    directory = Path(report_dir)
    if not directory.is_dir():
        raise ReportDirectoryError(f"Directory not found: {directory}")
    try:
        entries = list(directory.iterdir())
    except OSError as exc:
        raise ReportDirectoryError(f"Cannot read directory {directory}: {exc}") from exc
    return sorted(
        p.name for p in entries if p.is_file() and p.name.lower().endswith(REPORT_SUFFIX)
    )


def find_report(
    report_dir: str | Path,
    name: str,
    files: Optional[Sequence[str]] = None,
) -> Optional[Path]:
    """Return the first report whose file name contains *name*, or ``None``."""
    if not name:
        return None
    names = list_report_files(report_dir) if files is None else files
    for file_name in names:
        if name in file_name:
            return Path(report_dir) / file_name
    return None


def load_report(path: str | Path) -> AccessibilityReport:
    """Read and validate one report file.

    Raises:
        MalformedReportError: If the file is not JSON or lacks the
            ``Summary`` / ``Detailed Report`` sections.
    """
    report_path = Path(path)
    try:
        data = json.loads(report_path.read_text(encoding="utf-8"))
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise MalformedReportError(str(report_path), str(exc)) from exc

    try:
        return AccessibilityReport.model_validate(data)
    except ValidationError as exc:
        raise MalformedReportError(
            str(report_path), f"{exc.error_count()} validation error(s)"
        ) from exc
