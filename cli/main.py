"""PDF audit CLI: entry-point for all pipeline stages.

Usage:
    python cli/main.py --help

Command groups:
    store      → content store (init / import / sites)
    find-pdfs  → PDF-link discovery and CSV export
    reports    → accessibility report merging
"""

from __future__ import annotations

import sys
from pathlib import Path

# Ensure the project root is on sys.path so that `from pdfaudit.xxx import ...`
# works when the CLI is invoked as `python cli/main.py` from any directory.
_ROOT = Path(__file__).resolve().parent.parent
if str(_ROOT) not in sys.path:
    sys.path.insert(0, str(_ROOT))

import typer

from cli.commands.find_pdfs import find_pdfs_app
from cli.commands.reports import reports_app
from cli.commands.store import store_app

app = typer.Typer(
    name="pdf-audit",
    help="PDF link discovery and accessibility report CLI.",
    no_args_is_help=True,
)

app.add_typer(store_app, name="store")
app.add_typer(find_pdfs_app, name="find-pdfs")
app.add_typer(reports_app, name="reports")


# ---------------------------------------------------------------------------
# Entry-point
# ---------------------------------------------------------------------------
if __name__ == "__main__":
    app()
