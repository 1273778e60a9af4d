"""``find-pdfs`` commands: export every PDF link found in the content store."""

from __future__ import annotations

import re
from pathlib import Path
from typing import Optional

import typer

from pdfaudit.errors import PipelineError
from pdfaudit.scanner import ContentScanner, export_rows, parse_start_date
from pdfaudit.store import SqliteContentStore, get_connection, init_db

find_pdfs_app = typer.Typer(help="Find PDF links within the site content.", no_args_is_help=True)


def _default_filename(site_url: str) -> str:
    slug = re.sub(r"[^a-z0-9]+", "-", site_url.lower()).strip("-")
    return f"pdfs-{slug or 'site'}.csv"


@find_pdfs_app.command("export")
def export(
    output: Optional[str] = typer.Argument(None, help="CSV file to write."),
    post_types: str = typer.Option(
        "post", "--post-types", "--post_types", help="Comma-separated post types."
    ),
    network: bool = typer.Option(False, "--network", help="Scan every site of the network."),
    start_date: Optional[str] = typer.Option(
        None, "--start-date", "--start_date", help="Only posts published on/after MM-DD-YYYY."
    ),
    db: Optional[Path] = typer.Option(None, "--db", help="Content store path."),
) -> None:
    """Export posts containing PDFs.

    Example: ``find-pdfs export output.csv --post-types post,page --network``
    """
    # Validate before touching the store or the output file.
    try:
        after = parse_start_date(start_date)
    except PipelineError as e:
        typer.echo(f"❌ Error: {e}")
        raise typer.Exit(code=1)

    types = [t.strip() for t in post_types.split(",") if t.strip()] or ["post"]

    typer.echo("=== Get PDFs from sites ===")
    conn = get_connection(db)
    init_db(conn)
    try:
        store = SqliteContentStore(conn)
        sites = store.list_sites()
        active = [s for s in sites if not s.archived]
        filename = output or _default_filename(active[0].url if active else "")
        rows = ContentScanner().scan(store, types, start_date=after, network=network)
    finally:
        conn.close()

    if not rows:
        typer.echo("⚠️ No posts with PDFs found.")

    try:
        count = export_rows(rows, filename)
    except PipelineError as e:
        typer.echo(f"❌ Error: {e}")
        raise typer.Exit(code=1)

    posts = len({(r.post_id, r.post_url) for r in rows})
    typer.echo(f"✅ {posts} posts with PDFs have been exported to {filename} ({count} links).")
