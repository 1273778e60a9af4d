"""SQLite connection factory for the content store.

Usage::

    from pdfaudit.store.connection import get_connection

    conn = get_connection()
    rows = conn.execute("SELECT * FROM posts").fetchall()
"""

from __future__ import annotations

import sqlite3
from pathlib import Path
from typing import Optional

from pdfaudit.config import settings


def get_connection(db_path: Optional[Path] = None) -> sqlite3.Connection:
    """Open and configure a SQLite connection.

    Args:
        db_path: Override the DB path.  Defaults to ``settings.db_path``.

    Returns:
        A :class:`sqlite3.Connection` with ``row_factory`` set to
        :class:`sqlite3.Row` and foreign keys enforced.
    """
    path = db_path or settings.db_path

    # Create parent directory if needed (no-op for `:memory:`)
    if db_path is None:
        settings.ensure_workspace()
    elif str(path) != ":memory:":
        Path(path).parent.mkdir(parents=True, exist_ok=True)

    conn = sqlite3.connect(str(path))
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA foreign_keys = ON")
    return conn
