"""Read/write operations on the ``sites`` and ``posts`` tables.

:class:`SqliteContentStore` adapts these functions to the
:class:`ContentStore` protocol the scanner consumes.
"""

from __future__ import annotations

import sqlite3
from datetime import date
from typing import Any, Optional, Protocol, Sequence

from pdfaudit.errors import InvalidInputError
from pdfaudit.scanner.models import ContentRecord, Site


class ContentStore(Protocol):
    """Anything that can list sites and query published records."""

    def list_sites(self) -> list[Site]: ...

    def query_records(
        self,
        post_types: Sequence[str],
        after: Optional[date] = None,
        site_id: Optional[int] = None,
    ) -> list[ContentRecord]: ...

    def get_record(self, record_id: int, site_id: Optional[int] = None) -> Optional[ContentRecord]: ...


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

def _row_to_site(row: sqlite3.Row) -> Site:
    return Site(id=row["id"], url=row["url"], archived=bool(row["archived"]))


def _row_to_record(row: sqlite3.Row) -> ContentRecord:
    return ContentRecord(
        id=row["id"],
        body=row["body"],
        date=row["post_date"],
        title=row["title"],
        permalink=row["permalink"],
        post_type=row["post_type"],
        status=row["status"],
        site_id=row["site_id"],
    )


def _upsert_site(
    conn: sqlite3.Connection,
    url: str,
    archived: bool,
    site_id: Optional[int],
) -> int:
    """Write a site row without committing; return its id."""
    existing = conn.execute("SELECT id FROM sites WHERE url = ?", (url,)).fetchone()
    if existing:
        conn.execute(
            "UPDATE sites SET archived = ? WHERE id = ?", (int(archived), existing["id"])
        )
        return existing["id"]
    cursor = conn.execute(
        "INSERT INTO sites (id, url, archived) VALUES (?, ?, ?)",
        (site_id, url, int(archived)),
    )
    return cursor.lastrowid  # type: ignore[return-value]


def _insert_record(
    conn: sqlite3.Connection,
    record_id: int,
    site_id: int,
    post_date: str,
    title: str,
    body: str,
    permalink: str,
    post_type: str,
    status: str,
) -> None:
    """Write a post row without committing."""
    conn.execute(
        """
        INSERT OR REPLACE INTO posts
            (id, site_id, post_type, status, title, body, post_date, permalink)
        VALUES (?, ?, ?, ?, ?, ?, ?, ?)
        """,
        (record_id, site_id, post_type, status, title, body, post_date, permalink),
    )


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def create_site(
    conn: sqlite3.Connection,
    url: str,
    archived: bool = False,
    site_id: Optional[int] = None,
) -> Site:
    """Insert a site, or update the archived flag of an existing *url*."""
    with conn:
        sid = _upsert_site(conn, url, archived, site_id)
    row = conn.execute("SELECT * FROM sites WHERE id = ?", (sid,)).fetchone()
    return _row_to_site(row)


def list_sites(conn: sqlite3.Connection) -> list[Site]:
    """Return all sites, primary (lowest id) first."""
    rows = conn.execute("SELECT * FROM sites ORDER BY id").fetchall()
    return [_row_to_site(r) for r in rows]


def create_record(
    conn: sqlite3.Connection,
    record_id: int,
    site_id: int,
    post_date: str,
    title: str = "",
    body: str = "",
    permalink: str = "",
    post_type: str = "post",
    status: str = "publish",
) -> ContentRecord:
    """Insert (or replace) a post row and return it as a record."""
    with conn:
        _insert_record(
            conn, record_id, site_id, post_date, title, body, permalink, post_type, status
        )
    return get_record(conn, record_id, site_id)  # type: ignore[return-value]


def get_record(
    conn: sqlite3.Connection,
    record_id: int,
    site_id: Optional[int] = None,
) -> Optional[ContentRecord]:
    """Fetch one post by id (within *site_id* when given).  ``None`` if absent."""
    if site_id is None:
        row = conn.execute(
            "SELECT * FROM posts WHERE id = ? ORDER BY site_id LIMIT 1", (record_id,)
        ).fetchone()
    else:
        row = conn.execute(
            "SELECT * FROM posts WHERE id = ? AND site_id = ?", (record_id, site_id)
        ).fetchone()
    return _row_to_record(row) if row else None


def query_records(
    conn: sqlite3.Connection,
    post_types: Sequence[str],
    after: Optional[date] = None,
    site_id: Optional[int] = None,
) -> list[ContentRecord]:
    """Return published posts of *post_types*, oldest first.

    Args:
        conn: Open DB connection.
        post_types: Post types to include (e.g. ``["post", "page"]``).
        after: Only posts published on or after this day.
        site_id: Restrict to one site.  All sites when omitted.
    """
    if not post_types:
        return []

    clauses = ["status = 'publish'"]
    params: list[Any] = []

    placeholders = ", ".join("?" for _ in post_types)
    clauses.append(f"post_type IN ({placeholders})")
    params.extend(post_types)

    if after is not None:
        clauses.append("substr(post_date, 1, 10) >= ?")
        params.append(after.isoformat())
    if site_id is not None:
        clauses.append("site_id = ?")
        params.append(site_id)

    sql = f"SELECT * FROM posts WHERE {' AND '.join(clauses)} ORDER BY post_date, id"  # noqa: S608
    return [_row_to_record(r) for r in conn.execute(sql, params).fetchall()]


def import_content(conn: sqlite3.Connection, data: Any) -> tuple[int, int]:
    """Load a ``{"sites": [...], "posts": [...]}`` export into the store.

    Post entries accept ``body`` or ``content`` for the body and ``date`` or
    ``post_date`` for the publish date.  The whole file is imported in one
    transaction: any invalid entry leaves the store unchanged.

    Returns:
        ``(sites_imported, posts_imported)``.

    Raises:
        InvalidInputError: If the payload does not have the expected shape, or
            an entry conflicts with existing rows.
    """
    if not isinstance(data, dict) or not isinstance(data.get("posts"), list):
        raise InvalidInputError("Import file must be an object with a 'posts' list")

    sites = data.get("sites") or []
    count = 0
    with conn:
        for site in sites:
            try:
                _upsert_site(
                    conn,
                    url=site["url"],
                    archived=bool(site.get("archived", False)),
                    site_id=site.get("id"),
                )
            except (KeyError, TypeError) as exc:
                raise InvalidInputError(f"Invalid site entry {site!r}: {exc}") from exc
            except sqlite3.IntegrityError as exc:
                raise InvalidInputError(
                    f"Site {site.get('id')!r} ({site.get('url')}) conflicts with an existing site"
                ) from exc

        for post in data["posts"]:
            try:
                _insert_record(
                    conn,
                    record_id=int(post["id"]),
                    site_id=int(post.get("site_id", 1)),
                    post_date=str(post.get("date") or post["post_date"]),
                    title=post.get("title", ""),
                    body=post.get("body", post.get("content", "")),
                    permalink=post.get("permalink", ""),
                    post_type=post.get("post_type", "post"),
                    status=post.get("status", "publish"),
                )
            except (KeyError, TypeError, ValueError) as exc:
                raise InvalidInputError(f"Invalid post entry {post!r}: {exc}") from exc
            except sqlite3.IntegrityError as exc:
                raise InvalidInputError(
                    f"Post {post.get('id')!r} references an unknown site"
                ) from exc
            count += 1

    return len(sites), count


class SqliteContentStore:
    """:class:`ContentStore` backed by an open SQLite connection."""

    def __init__(self, conn: sqlite3.Connection) -> None:
        self._conn = conn

    def list_sites(self) -> list[Site]:
        return list_sites(self._conn)

    def query_records(
        self,
        post_types: Sequence[str],
        after: Optional[date] = None,
        site_id: Optional[int] = None,
    ) -> list[ContentRecord]:
        return query_records(self._conn, post_types, after=after, site_id=site_id)

    def get_record(self, record_id: int, site_id: Optional[int] = None) -> Optional[ContentRecord]:
        return get_record(self._conn, record_id, site_id)
