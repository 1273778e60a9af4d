"""Tests for the SQLite content store.

All tests use an in-memory SQLite database so they are fast, isolated and
side-effect free (nothing written to ~/.pdfaudit_data).
"""

from __future__ import annotations

import sqlite3
from datetime import date
from typing import Generator

import pytest

from pdfaudit.errors import InvalidInputError
from pdfaudit.store import SqliteContentStore, get_connection, init_db
from pdfaudit.store.records import (
    create_record,
    create_site,
    get_record,
    import_content,
    list_sites,
    query_records,
)


@pytest.fixture()
def conn() -> Generator[sqlite3.Connection, None, None]:
    """In-memory connection with the schema initialised."""
    connection = get_connection(db_path=":memory:")  # type: ignore[arg-type]
    init_db(connection)
    yield connection
    connection.close()


class TestSchema:
    def test_init_db_is_idempotent(self, conn: sqlite3.Connection) -> None:
        init_db(conn)
        tables = {
            row[0]
            for row in conn.execute("SELECT name FROM sqlite_master WHERE type='table'")
        }
        assert {"sites", "posts"} <= tables

    def test_foreign_keys_enabled(self, conn: sqlite3.Connection) -> None:
        assert conn.execute("PRAGMA foreign_keys").fetchone()[0] == 1

    def test_file_database_creates_parent(self, tmp_path) -> None:
        path = tmp_path / "nested" / "content.db"
        connection = get_connection(path)
        init_db(connection)
        connection.close()
        assert path.exists()


class TestSites:
    def test_create_and_list(self, conn: sqlite3.Connection) -> None:
        create_site(conn, "https://b.test", site_id=2)
        create_site(conn, "https://a.test", archived=True, site_id=1)
        sites = list_sites(conn)
        assert [s.url for s in sites] == ["https://a.test", "https://b.test"]
        assert sites[0].archived is True

    def test_existing_url_updates_archived_flag(self, conn: sqlite3.Connection) -> None:
        create_site(conn, "https://a.test", site_id=1)
        create_record(conn, 1, 1, "2024-01-01 00:00:00")
        site = create_site(conn, "https://a.test", archived=True)
        assert site.id == 1 and site.archived is True
        assert get_record(conn, 1) is not None


class TestRecords:
    @pytest.fixture()
    def populated(self, conn: sqlite3.Connection) -> sqlite3.Connection:
        create_site(conn, "https://a.test", site_id=1)
        create_site(conn, "https://b.test", site_id=2)
        create_record(conn, 1, 1, "2024-01-10 08:00:00", title="Jan")
        create_record(conn, 2, 1, "2024-02-10 08:00:00", title="Feb")
        create_record(conn, 3, 1, "2024-02-11 08:00:00", title="Draft", status="draft")
        create_record(conn, 4, 1, "2024-02-12 08:00:00", title="Page", post_type="page")
        create_record(conn, 5, 2, "2024-03-01 08:00:00", title="Other site")
        return conn

    def test_query_only_published_posts(self, populated: sqlite3.Connection) -> None:
        titles = [r.title for r in query_records(populated, ["post"], site_id=1)]
        assert titles == ["Jan", "Feb"]

    def test_query_multiple_post_types(self, populated: sqlite3.Connection) -> None:
        titles = [r.title for r in query_records(populated, ["post", "page"], site_id=1)]
        assert titles == ["Jan", "Feb", "Page"]

    def test_query_after_is_inclusive(self, populated: sqlite3.Connection) -> None:
        titles = [r.title for r in query_records(populated, ["post"], after=date(2024, 2, 10))]
        assert titles == ["Feb", "Other site"]

    def test_query_without_post_types(self, populated: sqlite3.Connection) -> None:
        assert query_records(populated, []) == []

    def test_get_record(self, populated: sqlite3.Connection) -> None:
        record = get_record(populated, 5)
        assert record is not None
        assert record.site_id == 2
        assert get_record(populated, 5, site_id=1) is None
        assert get_record(populated, 999) is None

    def test_store_adapter(self, populated: sqlite3.Connection) -> None:
        store = SqliteContentStore(populated)
        assert len(store.list_sites()) == 2
        assert [r.id for r in store.query_records(["post"], site_id=2)] == [5]
        assert store.get_record(1).title == "Jan"  # type: ignore[union-attr]


class TestImport:
    def test_imports_sites_and_posts(self, conn: sqlite3.Connection) -> None:
        data = {
            "sites": [{"id": 1, "url": "https://a.test"}],
            "posts": [
                {
                    "id": 7,
                    "site_id": 1,
                    "date": "2024-05-01 12:00:00",
                    "title": "Hello",
                    "content": '<a href="https://a.test/x.pdf">x</a>',
                    "permalink": "https://a.test/hello",
                }
            ],
        }
        assert import_content(conn, data) == (1, 1)
        record = get_record(conn, 7)
        assert record is not None
        assert record.body.startswith("<a href")
        assert record.post_type == "post"

    def test_rejects_wrong_shape(self, conn: sqlite3.Connection) -> None:
        with pytest.raises(InvalidInputError):
            import_content(conn, [{"id": 1}])

    def test_rejects_post_without_date(self, conn: sqlite3.Connection) -> None:
        data = {"sites": [{"id": 1, "url": "https://a.test"}], "posts": [{"id": 1}]}
        with pytest.raises(InvalidInputError):
            import_content(conn, data)

    def test_rejects_unknown_site(self, conn: sqlite3.Connection) -> None:
        data = {"posts": [{"id": 1, "site_id": 9, "date": "2024-01-01"}]}
        with pytest.raises(InvalidInputError):
            import_content(conn, data)

    def test_rejects_duplicate_site_id(self, conn: sqlite3.Connection) -> None:
        data = {
            "sites": [
                {"id": 1, "url": "https://a.test"},
                {"id": 1, "url": "https://b.test"},
            ],
            "posts": [],
        }
        with pytest.raises(InvalidInputError, match="conflicts"):
            import_content(conn, data)

    def test_failed_import_leaves_store_unchanged(self, conn: sqlite3.Connection) -> None:
        data = {
            "sites": [{"id": 1, "url": "https://a.test"}],
            "posts": [
                {"id": 1, "site_id": 1, "date": "2024-01-01"},
                {"id": 2, "site_id": 9, "date": "2024-01-02"},
            ],
        }
        with pytest.raises(InvalidInputError):
            import_content(conn, data)
        assert list_sites(conn) == []
        assert get_record(conn, 1) is None

    def test_failed_import_keeps_earlier_rows(self, conn: sqlite3.Connection) -> None:
        create_site(conn, "https://a.test", site_id=1)
        create_record(conn, 5, 1, "2024-01-01")
        with pytest.raises(InvalidInputError):
            import_content(conn, {"posts": [{"id": 6}]})
        assert [s.url for s in list_sites(conn)] == ["https://a.test"]
        assert get_record(conn, 5) is not None
