"""Tests for preferences, notification bookkeeping and the run log."""

import sqlite3
from datetime import UTC, datetime, timedelta

from weathersync.storage import state_repo

NOW = datetime(2026, 10, 18, 9, 30, tzinfo=UTC)


class TestPreferences:
    def test_get_missing(self, db: sqlite3.Connection):
        assert state_repo.get_preference(db, "nope") is None

    def test_set_and_get(self, db: sqlite3.Connection):
        state_repo.set_preference(db, "k", "v1")
        state_repo.set_preference(db, "k", "v2")
        assert state_repo.get_preference(db, "k") == "v2"

    def test_seed_does_not_overwrite(self, db: sqlite3.Connection):
        state_repo.seed_preference(db, "k", "first")
        state_repo.seed_preference(db, "k", "second")
        assert state_repo.get_preference(db, "k") == "first"

    def test_notifications_flag(self, db: sqlite3.Connection):
        assert state_repo.are_notifications_enabled(db) is False
        state_repo.set_notifications_enabled(db, True)
        assert state_repo.are_notifications_enabled(db) is True
        state_repo.set_notifications_enabled(db, False)
        assert state_repo.are_notifications_enabled(db) is False


class TestLastNotified:
    def test_never(self, db: sqlite3.Connection):
        assert state_repo.get_last_notified_at(db) is None

    def test_round_trip(self, db: sqlite3.Connection):
        assert state_repo.set_last_notified_at(db, NOW) is True
        assert state_repo.get_last_notified_at(db) == NOW

    def test_monotonic(self, db: sqlite3.Connection):
        state_repo.set_last_notified_at(db, NOW)
        assert state_repo.set_last_notified_at(db, NOW - timedelta(hours=1)) is False
        assert state_repo.get_last_notified_at(db) == NOW

    def test_naive_value_read_as_utc(self, db: sqlite3.Connection):
        state_repo.set_preference(db, state_repo.LAST_NOTIFIED_AT, "2026-10-18T09:30:00")
        assert state_repo.get_last_notified_at(db) == NOW

    def test_corrupt_value(self, db: sqlite3.Connection):
        state_repo.set_preference(db, state_repo.LAST_NOTIFIED_AT, "yesterday")
        assert state_repo.get_last_notified_at(db) is None


class TestRuns:
    def test_create_and_complete(self, db: sqlite3.Connection):
        state_repo.create_run(db, "run-1", "abc")
        run = state_repo.get_run(db, "run-1")
        assert run is not None
        assert run["status"] == "running"

        state_repo.complete_run(
            db, "run-1", "failed",
            error_kind="network", error_message="boom",
            records_stored=0, notified=0,
        )
        run = state_repo.get_run(db, "run-1")
        assert run["status"] == "failed"
        assert run["error_kind"] == "network"
        assert run["error_message"] == "boom"
        assert run["completed_at"] is not None

    def test_latest_run(self, db: sqlite3.Connection):
        assert state_repo.get_latest_run(db) is None
        state_repo.create_run(db, "run-1")
        state_repo.create_run(db, "run-2")
        assert state_repo.get_latest_run(db)["run_id"] == "run-2"
