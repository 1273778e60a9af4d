"""CSV export of scan results."""

from __future__ import annotations

import csv
from pathlib import Path
from typing import Iterable, Optional

from pdfaudit.config import settings
from pdfaudit.errors import OutputError
from pdfaudit.scanner.models import ExportRow

CSV_HEADERS = [
    "Post ID",
    "PDF URL",
    "Post Date",
    "Post Title",
    "Post URL",
]


def export_rows(
    rows: Iterable[ExportRow],
    destination: str | Path,
    delimiter: Optional[str] = None,
) -> int:
    """Write *rows* to *destination* and return the number of data rows.

    Raises:
        OutputError: If *destination* cannot be opened for writing.
    """
    sep = delimiter or settings.csv_delimiter
    try:
        handle = open(destination, "w", newline="", encoding="utf-8")
    except OSError as exc:
        raise OutputError(f"Impossible to create the file {str(destination)!r}: {exc}") from exc

    count = 0
    with handle:
        writer = csv.writer(handle, delimiter=sep)
        writer.writerow(CSV_HEADERS)
        for row in rows:
            writer.writerow(row.as_list())
            count += 1
    return count
