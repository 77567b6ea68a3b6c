"""
SQLite database integration and simple migration system.

A :class:`Database` value owns the location of the SQLite file and hands
out short-lived connections through :meth:`Database.connect`.  The
application factory creates exactly one ``Database`` and passes it to
every service, so there is no module-level connection handle.

The migration mechanism stores applied migration versions in the
``migrations`` table and executes new migrations in order.
"""

import logging
import os
import sqlite3
from contextlib import contextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterator

from .errors import StorageError

logger = logging.getLogger(__name__)


MIGRATIONS: list[tuple[int, str]] = [
    # Migration 1: users and memos
    (
        1,
        """
        CREATE TABLE IF NOT EXISTS users (
            id TEXT PRIMARY KEY,
            username TEXT NOT NULL UNIQUE,
            password TEXT NOT NULL,
            created_at TEXT NOT NULL,
            updated_at TEXT NOT NULL
        );

        CREATE TABLE IF NOT EXISTS memos (
            id TEXT PRIMARY KEY,
            user_id TEXT NOT NULL,
            title TEXT NOT NULL,
            content TEXT NOT NULL DEFAULT '',
            related_memo_ids TEXT NOT NULL DEFAULT '',
            created_at TEXT NOT NULL,
            updated_at TEXT NOT NULL,
            FOREIGN KEY(user_id) REFERENCES users(id)
        );
        """,
    ),
    # Migration 2: listing is always per owner, newest first
    (
        2,
        """
        CREATE INDEX IF NOT EXISTS idx_memos_user_created ON memos(user_id, created_at);
        """,
    ),
]


def utc_now() -> str:
    """Current UTC time as an ISO-8601 string with microseconds."""
    return datetime.now(timezone.utc).isoformat(timespec="microseconds")


def _casefold(value):
    return value.casefold() if isinstance(value, str) else value


def resolve_database_path(database_url: str) -> str:
    """Compute the path to the SQLite database file.

    Absolute paths and ``:memory:`` are returned unchanged; relative paths
    are resolved against the current working directory.  The parent
    directory is created if it does not exist.
    """
    if database_url == ":memory:":
        return database_url
    path = Path(database_url)
    if not path.is_absolute():
        path = Path(os.getcwd()) / path
    path.parent.mkdir(parents=True, exist_ok=True)
    return str(path.resolve())


class Database:
    """Storage handle shared by the credential and memo services.

    Each call to :meth:`connect` opens a new connection, so a single
    ``Database`` may be used from FastAPI's worker threads.  An in-memory
    database is therefore only useful for one-shot scripts; tests use a
    temporary file.
    """

    def __init__(self, database_url: str) -> None:
        self.path = resolve_database_path(database_url)

    def __repr__(self) -> str:
        return f"Database({self.path!r})"

    def _open(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self.path)
        # Return rows as dict-like objects keyed by column name
        conn.row_factory = sqlite3.Row
        # SQLite leaves foreign keys off unless enabled per connection.
        conn.execute("PRAGMA foreign_keys = ON")
        # lower() in SQLite only folds ASCII; keyword search needs full
        # Unicode case folding.
        conn.create_function("casefold", 1, _casefold, deterministic=True)
        return conn

    @contextmanager
    def connect(self) -> Iterator[sqlite3.Connection]:
        """Yield a connection, committing on success and rolling back on error.

        Any ``sqlite3.Error`` escaping the block is re-raised as
        :class:`StorageError`.  Application errors raised inside the block
        (``NotFound``, ``DuplicateError`` ...) pass through unchanged after
        the rollback.
        """
        try:
            conn = self._open()
        except sqlite3.Error as exc:
            logger.error("Could not open database %s: %s", self.path, exc)
            raise StorageError("Could not open database") from exc
        try:
            yield conn
            conn.commit()
        except sqlite3.Error as exc:
            conn.rollback()
            logger.error("Database error: %s", exc)
            raise StorageError("Database operation failed") from exc
        except BaseException:
            conn.rollback()
            raise
        finally:
            conn.close()


def init_db(db: Database) -> int:
    """Apply pending migrations and return the resulting schema version.

    Creates the ``migrations`` table if it does not exist, checks the
    current schema version, and applies any newer entries of
    ``MIGRATIONS``.  To change the schema, append a migration with an
    incremented version number.
    """
    with db.connect() as conn:
        conn.execute("CREATE TABLE IF NOT EXISTS migrations (version INTEGER PRIMARY KEY)")
        row = conn.execute("SELECT MAX(version) AS version FROM migrations").fetchone()
        current_version = row["version"] if row and row["version"] is not None else 0

        for version, sql in MIGRATIONS:
            if version > current_version:
                conn.executescript(sql)
                conn.execute("INSERT INTO migrations (version) VALUES (?)", (version,))
                logger.info("Applied migration %s to %s", version, db.path)
                current_version = version
    return current_version
