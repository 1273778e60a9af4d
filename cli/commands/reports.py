"""``reports`` commands: merge accessibility reports into one CSV."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer

from pdfaudit.config import settings
from pdfaudit.errors import PipelineError
from pdfaudit.reports import merge

reports_app = typer.Typer(help="Accessibility report operations.", no_args_is_help=True)


@reports_app.command("merge")
def merge_reports(
    handle: str = typer.Argument("file_list_1", help="Name of the input list (HANDLE.csv)."),
    input_csv: Optional[Path] = typer.Option(None, "--input", help="Input CSV (default HANDLE.csv)."),
    reports_dir: Optional[Path] = typer.Option(None, "--reports-dir", help="Directory of JSON reports."),
    output: Optional[Path] = typer.Option(
        None, "--output", help="Merged CSV (default OUTPUT_DIR/HANDLE/output.csv)."
    ),
    skip_malformed: bool = typer.Option(
        False, "--skip-malformed", help="Skip unparsable reports instead of aborting."
    ),
) -> None:
    """Merge the input CSV with the per-document JSON reports."""
    source = input_csv or Path(f"{handle}.csv")
    directory = reports_dir or settings.reports_dir
    destination = output or settings.output_dir / handle / "output.csv"

    typer.echo(f"📄 Merging {source} with reports in {directory} …")
    try:
        destination.parent.mkdir(parents=True, exist_ok=True)
        count = merge(source, directory, destination, skip_malformed=skip_malformed or None)
    except (PipelineError, OSError) as e:
        typer.echo(f"❌ Error: {e}")
        raise typer.Exit(code=1)

    typer.echo(f"✅ The CSV file was written successfully: {destination} ({count} rows)")
