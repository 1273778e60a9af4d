"""Reports package: accessibility report loading and CSV merging."""

from pdfaudit.reports.aggregator import (
    ReportAggregator,
    aggregate,
    merge,
    read_input_records,
    report_name_for_url,
    write_merged_csv,
)
from pdfaudit.reports.loader import load_report
from pdfaudit.reports.models import AccessibilityReport, ColumnLayout, InputRecord, MergedRow

__all__ = [
    "ReportAggregator",
    "aggregate",
    "merge",
    "read_input_records",
    "report_name_for_url",
    "write_merged_csv",
    "load_report",
    "AccessibilityReport",
    "ColumnLayout",
    "InputRecord",
    "MergedRow",
]
