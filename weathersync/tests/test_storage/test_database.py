"""Tests for database connection, WAL mode, and migrations."""

from pathlib import Path

import pytest

from weathersync.storage.database import connect, run_migrations, transaction


class TestConnect:
    def test_wal_mode(self, tmp_path: Path):
        db = connect(tmp_path / "test.db")
        mode = db.execute("PRAGMA journal_mode").fetchone()[0]
        assert mode == "wal"
        db.close()

    def test_foreign_keys_enabled(self, tmp_path: Path):
        db = connect(tmp_path / "test.db")
        fk = db.execute("PRAGMA foreign_keys").fetchone()[0]
        assert fk == 1
        db.close()

    def test_row_factory(self, tmp_path: Path):
        db = connect(tmp_path / "test.db")
        db.execute("CREATE TABLE t (x TEXT)")
        db.execute("INSERT INTO t VALUES ('hello')")
        row = db.execute("SELECT x FROM t").fetchone()
        assert row["x"] == "hello"
        db.close()

    def test_creates_parent_directory(self, tmp_path: Path):
        db = connect(tmp_path / "nested" / "dir" / "test.db")
        assert (tmp_path / "nested" / "dir").is_dir()
        db.close()


class TestMigrations:
    def test_creates_all_tables(self, tmp_path: Path):
        db = connect(tmp_path / "test.db")
        applied = run_migrations(db)
        assert "v001_initial" in applied

        tables = {
            row[0]
            for row in db.execute(
                "SELECT name FROM sqlite_master WHERE type='table'"
            ).fetchall()
        }
        expected = {
            "schema_versions",
            "weather",
            "preferences",
            "sync_runs",
            "config_snapshots",
        }
        assert expected.issubset(tables)
        db.close()

    def test_idempotent(self, tmp_path: Path):
        db = connect(tmp_path / "test.db")
        applied1 = run_migrations(db)
        applied2 = run_migrations(db)
        assert len(applied1) > 0
        assert len(applied2) == 0
        db.close()


class TestTransaction:
    def test_commits_on_success(self, tmp_path: Path):
        db = connect(tmp_path / "test.db")
        db.execute("CREATE TABLE t (x INTEGER)")
        db.commit()
        with transaction(db):
            db.execute("INSERT INTO t VALUES (1)")
        assert not db.in_transaction
        other = connect(tmp_path / "test.db")
        assert other.execute("SELECT COUNT(*) FROM t").fetchone()[0] == 1
        other.close()
        db.close()

    def test_rolls_back_on_error(self, tmp_path: Path):
        db = connect(tmp_path / "test.db")
        db.execute("CREATE TABLE t (x INTEGER)")
        db.execute("INSERT INTO t VALUES (1)")
        db.commit()
        with pytest.raises(RuntimeError):
            with transaction(db):
                db.execute("DELETE FROM t")
                raise RuntimeError("boom")
        assert db.execute("SELECT COUNT(*) FROM t").fetchone()[0] == 1
        db.close()
