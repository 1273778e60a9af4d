"""Content store package.

Public re-exports so callers can write::

    from pdfaudit.store import get_connection, init_db, SqliteContentStore
"""

from pdfaudit.store.connection import get_connection
from pdfaudit.store.migrations import init_db
from pdfaudit.store.records import ContentStore, SqliteContentStore

__all__ = ["get_connection", "init_db", "ContentStore", "SqliteContentStore"]
