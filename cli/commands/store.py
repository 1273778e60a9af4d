"""``store`` commands: manage the local SQLite content store."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Optional

import typer

from pdfaudit.config import settings
from pdfaudit.errors import PipelineError
from pdfaudit.store import get_connection, init_db
from pdfaudit.store.records import import_content, list_sites

store_app = typer.Typer(help="Content store operations.", no_args_is_help=True)


@store_app.command("init")
def store_init(
    db: Optional[Path] = typer.Option(None, "--db", help="Content store path."),
) -> None:
    """Create the content store tables if they do not exist."""
    conn = get_connection(db)
    init_db(conn)
    conn.close()
    typer.echo(f"[store init] Content store ready at {db or settings.db_path}")


@store_app.command("import")
def store_import(
    path: Path = typer.Argument(..., help="JSON export with 'sites' and 'posts'."),
    db: Optional[Path] = typer.Option(None, "--db", help="Content store path."),
) -> None:
    """Load sites and posts from a JSON export."""
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        typer.echo(f"❌ Error: cannot read {path}: {e}")
        raise typer.Exit(code=1)

    conn = get_connection(db)
    init_db(conn)
    try:
        sites, posts = import_content(conn, data)
    except PipelineError as e:
        typer.echo(f"❌ Error: {e}")
        raise typer.Exit(code=1)
    finally:
        conn.close()
    typer.echo(f"✅ Imported {sites} site(s) and {posts} post(s).")


@store_app.command("sites")
def store_sites(
    db: Optional[Path] = typer.Option(None, "--db", help="Content store path."),
) -> None:
    """List the sites in the content store."""
    conn = get_connection(db)
    init_db(conn)
    sites = list_sites(conn)
    conn.close()
    if not sites:
        typer.echo("No sites found.")
        return
    for s in sites:
        flag = "  (archived)" if s.archived else ""
        typer.echo(f"  {s.id}  {s.url}{flag}")
