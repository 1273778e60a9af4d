"""Content-store schema initialisation.

``init_db(conn)`` is idempotent, safe to call on an existing database.
"""

from __future__ import annotations

import sqlite3

_SCHEMA = """
CREATE TABLE IF NOT EXISTS sites (
    id        INTEGER PRIMARY KEY,
    url       TEXT NOT NULL UNIQUE,
    archived  INTEGER NOT NULL DEFAULT 0
);

CREATE TABLE IF NOT EXISTS posts (
    id         INTEGER NOT NULL,
    site_id    INTEGER NOT NULL REFERENCES sites(id) ON DELETE CASCADE,
    post_type  TEXT NOT NULL DEFAULT 'post',
    status     TEXT NOT NULL DEFAULT 'publish',
    title      TEXT NOT NULL DEFAULT '',
    body       TEXT NOT NULL DEFAULT '',
    post_date  TEXT NOT NULL,
    permalink  TEXT NOT NULL DEFAULT '',
    PRIMARY KEY (site_id, id)
);

CREATE INDEX IF NOT EXISTS idx_posts_type_date
    ON posts (site_id, post_type, post_date);
"""


def init_db(conn: sqlite3.Connection) -> None:
    """Create the ``sites`` and ``posts`` tables if they do not exist."""
    conn.executescript(_SCHEMA)
