"""Scanner package: PDF-link discovery and CSV export."""

from pdfaudit.scanner.classifier import classify
from pdfaudit.scanner.exporter import export_rows
from pdfaudit.scanner.models import ClassificationResult, ContentRecord, ExportRow
from pdfaudit.scanner.resolver import RedirectResolver
from pdfaudit.scanner.scanner import ContentScanner, parse_start_date

__all__ = [
    "classify",
    "export_rows",
    "ClassificationResult",
    "ContentRecord",
    "ExportRow",
    "RedirectResolver",
    "ContentScanner",
    "parse_start_date",
]
