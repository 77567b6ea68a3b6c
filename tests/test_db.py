"""
Tests for fast_memos.app.core.db: migrations and error conversion.
"""

import sqlite3

import pytest

from fast_memos.app.core.db import MIGRATIONS, Database, init_db, resolve_database_path
from fast_memos.app.core.errors import NotFound, StorageError


class TestMigrations:
    def test_all_tables_exist(self, db):
        with db.connect() as conn:
            tables = {
                r["name"] for r in conn.execute("SELECT name FROM sqlite_master WHERE type='table'")
            }
        assert {"migrations", "users", "memos"} <= tables

    def test_version_recorded(self, db):
        with db.connect() as conn:
            row = conn.execute("SELECT MAX(version) AS version FROM migrations").fetchone()
        assert row["version"] == MIGRATIONS[-1][0]

    def test_idempotent(self, db):
        assert init_db(db) == MIGRATIONS[-1][0]
        with db.connect() as conn:
            count = conn.execute("SELECT COUNT(*) AS n FROM migrations").fetchone()["n"]
        assert count == len(MIGRATIONS)

    def test_foreign_keys_enabled(self, db):
        with db.connect() as conn:
            assert conn.execute("PRAGMA foreign_keys").fetchone()[0] == 1


class TestConnect:
    def test_commits_on_success(self, db):
        with db.connect() as conn:
            conn.execute(
                "INSERT INTO users (id, username, password, created_at, updated_at) "
                "VALUES ('u1', 'someone', 'x$y', 'now', 'now')"
            )
        with db.connect() as conn:
            assert conn.execute("SELECT COUNT(*) FROM users").fetchone()[0] == 1

    def test_rolls_back_on_application_error(self, db):
        with pytest.raises(NotFound):
            with db.connect() as conn:
                conn.execute(
                    "INSERT INTO users (id, username, password, created_at, updated_at) "
                    "VALUES ('u1', 'someone', 'x$y', 'now', 'now')"
                )
                raise NotFound("nope")
        with db.connect() as conn:
            assert conn.execute("SELECT COUNT(*) FROM users").fetchone()[0] == 0

    def test_sqlite_error_becomes_storage_error(self, db):
        with pytest.raises(StorageError) as excinfo:
            with db.connect() as conn:
                conn.execute("SELECT * FROM no_such_table")
        assert isinstance(excinfo.value.__cause__, sqlite3.OperationalError)

    def test_unmigrated_database_fails_as_storage_error(self, tmp_path):
        bare = Database(str(tmp_path / "bare.db"))
        with pytest.raises(StorageError):
            with bare.connect() as conn:
                conn.execute("SELECT * FROM memos")

    def test_casefold_function(self, db):
        with db.connect() as conn:
            assert conn.execute("SELECT casefold('Straße')").fetchone()[0] == "strasse"


class TestResolvePath:
    def test_memory_unchanged(self):
        assert resolve_database_path(":memory:") == ":memory:"

    def test_relative_resolved_against_cwd(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        assert resolve_database_path("data/memos.db") == str((tmp_path / "data" / "memos.db").resolve())
        assert (tmp_path / "data").is_dir()
