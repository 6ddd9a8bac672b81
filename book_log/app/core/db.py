"""
SQLite persistence for book records and a simple migration system.

``BookStore`` owns a single connection that is opened explicitly when
the application starts and closed when it shuts down.  Nothing in this
module keeps a connection at import time; the application lifespan
creates the store and hands it to the service layer.

All statements use ``?`` parameter binding.  Any ``sqlite3.Error`` is
logged and re-raised as :class:`StoreError`, which includes constraint
violations such as a rating outside 1..10.  ``date_read`` is checked
in Python before the write as well, because SQLite's ``date()``
accepts days such as ``2021-02-29``.  Ids outside SQLite's 64-bit
range cannot exist and are reported as missing.

The migration mechanism stores applied versions in the ``migrations``
table and executes new migrations in order.
"""

import logging
import sqlite3
from contextlib import contextmanager
from datetime import date
from pathlib import Path
from typing import Any, Dict, Iterator, List, Mapping, Optional

from .errors import StoreError

logger = logging.getLogger(__name__)


MIGRATIONS: list[tuple[int, str]] = [
    # Migration 1: initial schema
    (
        1,
        """
        CREATE TABLE IF NOT EXISTS books (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            title TEXT NOT NULL,
            author TEXT NOT NULL,
            rating INTEGER NOT NULL
                CHECK (typeof(rating) = 'integer' AND rating BETWEEN 1 AND 10),
            notes TEXT NOT NULL,
            date_read TEXT NOT NULL
                CHECK (date(date_read, '+0 days') IS NOT NULL
                    AND date(date_read, '+0 days') = date_read),
            isbn TEXT
        );
        """,
    ),
    # Migration 2: the index page sorts by date by default
    (
        2,
        """
        CREATE INDEX IF NOT EXISTS idx_books_date_read ON books(date_read);
        """,
    ),
]


def get_database_path(database_url: str) -> str:
    """Compute the path to the SQLite database file.

    Absolute paths and ``:memory:`` are used as is.  Relative paths are
    resolved against the current working directory.
    """
    if database_url == ":memory:" or Path(database_url).is_absolute():
        return database_url
    return str((Path.cwd() / database_url).resolve())


def apply_migrations(conn: sqlite3.Connection) -> int:
    """Apply pending migrations and return the resulting schema version."""
    cursor = conn.cursor()
    cursor.execute("CREATE TABLE IF NOT EXISTS migrations (version INTEGER PRIMARY KEY)")
    row = cursor.execute("SELECT MAX(version) AS version FROM migrations").fetchone()
    current_version = row["version"] if row and row["version"] is not None else 0

    for version, sql in MIGRATIONS:
        if version > current_version:
            cursor.executescript(sql)
            cursor.execute("INSERT INTO migrations (version) VALUES (?)", (version,))
            logger.info("Applied migration %s", version)
            current_version = version
    conn.commit()
    return current_version


# SQLite INTEGER PRIMARY KEY range; larger ids cannot be bound.
MAX_ROW_ID = 2**63 - 1


def _date_read_value(value: Any) -> Any:
    """Return ``value`` as an ISO date string, rejecting impossible dates.

    Text must already be in ``YYYY-MM-DD`` form and name a real calendar
    day; ``2021-02-29`` raises ``StoreError`` before anything is written.
    Other values are passed through for the column constraints to judge.
    """
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, str):
        try:
            parsed = date.fromisoformat(value)
        except ValueError:
            parsed = None
        if parsed is None or parsed.isoformat() != value:
            logger.warning("Rejected date_read %r: not a calendar date", value)
            raise StoreError(f"Invalid date_read: {value!r}")
    return value


def _valid_id(book_id: int) -> bool:
    return 0 < book_id <= MAX_ROW_ID


class BookStore:
    """Persistence for book records backed by one SQLite connection."""

    def __init__(self, database_url: str) -> None:
        self.path = get_database_path(database_url)
        self._conn: Optional[sqlite3.Connection] = None

    def open(self) -> "BookStore":
        """Connect to the database and bring the schema up to date."""
        if self._conn is not None:
            return self
        try:
            # The connection is created during application startup and
            # used from request handlers, which may run on another thread.
            conn = sqlite3.connect(self.path, check_same_thread=False)
            conn.row_factory = sqlite3.Row
            apply_migrations(conn)
        except sqlite3.Error as exc:
            logger.exception("Could not open database %s", self.path)
            raise StoreError("Could not open database") from exc
        self._conn = conn
        logger.info("Opened book database at %s", self.path)
        return self

    def close(self) -> None:
        if self._conn is not None:
            self._conn.close()
            self._conn = None
            logger.info("Closed book database")

    def __enter__(self) -> "BookStore":
        return self.open()

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    @property
    def is_open(self) -> bool:
        return self._conn is not None

    @contextmanager
    def _cursor(self) -> Iterator[sqlite3.Cursor]:
        """Yield a cursor, committing on success and rolling back on error."""
        if self._conn is None:
            raise StoreError("Book store is not open")
        conn = self._conn
        try:
            yield conn.cursor()
            conn.commit()
        except sqlite3.Error as exc:
            conn.rollback()
            logger.exception("Database operation failed")
            raise StoreError(str(exc)) from exc

    def insert(self, fields: Mapping[str, Any]) -> int:
        """Insert a new book and return its system-assigned id."""
        with self._cursor() as cursor:
            cursor.execute(
                """
                INSERT INTO books (title, author, rating, notes, date_read, isbn)
                VALUES (?, ?, ?, ?, ?, ?)
                """,
                (
                    fields.get("title"),
                    fields.get("author"),
                    fields.get("rating"),
                    fields.get("notes"),
                    _date_read_value(fields.get("date_read")),
                    fields.get("isbn"),
                ),
            )
            return cursor.lastrowid

    def select_all(self) -> List[Dict[str, Any]]:
        with self._cursor() as cursor:
            rows = cursor.execute(
                "SELECT id, title, author, rating, notes, date_read, isbn FROM books"
            ).fetchall()
        return [dict(row) for row in rows]

    def select_by_id(self, book_id: int) -> Optional[Dict[str, Any]]:
        if not _valid_id(book_id):
            return None
        with self._cursor() as cursor:
            row = cursor.execute(
                "SELECT id, title, author, rating, notes, date_read, isbn FROM books WHERE id = ?",
                (book_id,),
            ).fetchone()
        return dict(row) if row else None

    def update_by_id(self, book_id: int, fields: Mapping[str, Any]) -> bool:
        """Overwrite the editable columns of a book.

        Returns ``False`` when no row has the given id.
        """
        if not _valid_id(book_id):
            return False
        with self._cursor() as cursor:
            cursor.execute(
                """
                UPDATE books
                SET title = ?, author = ?, rating = ?, notes = ?, date_read = ?
                WHERE id = ?
                """,
                (
                    fields.get("title"),
                    fields.get("author"),
                    fields.get("rating"),
                    fields.get("notes"),
                    _date_read_value(fields.get("date_read")),
                    book_id,
                ),
            )
            return cursor.rowcount > 0

    def delete_by_id(self, book_id: int) -> bool:
        """Delete a book.  Returns ``False`` when nothing was deleted."""
        if not _valid_id(book_id):
            return False
        with self._cursor() as cursor:
            cursor.execute("DELETE FROM books WHERE id = ?", (book_id,))
            return cursor.rowcount > 0

    def count(self) -> int:
        with self._cursor() as cursor:
            row = cursor.execute("SELECT COUNT(*) AS total FROM books").fetchone()
        return row["total"]
