"""Initial schema: forecast rows, preferences, run log, config snapshots."""

import sqlite3

DDL = [
    # One row per forecast day; replaced wholesale on every sync
    """
    CREATE TABLE IF NOT EXISTS weather (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        date TEXT NOT NULL UNIQUE,
        weather_id INTEGER NOT NULL,
        max_temp REAL NOT NULL,
        min_temp REAL NOT NULL,
        humidity REAL NOT NULL DEFAULT 0,
        pressure REAL NOT NULL DEFAULT 0,
        wind_speed REAL NOT NULL DEFAULT 0,
        wind_degrees REAL NOT NULL DEFAULT 0
    )
    """,

    # User preferences and notification bookkeeping
    """
    CREATE TABLE IF NOT EXISTS preferences (
        key TEXT PRIMARY KEY,
        value TEXT NOT NULL,
        updated_at TEXT NOT NULL DEFAULT CURRENT_TIMESTAMP
    )
    """,

    # Sync run log
    """
    CREATE TABLE IF NOT EXISTS sync_runs (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        run_id TEXT UNIQUE NOT NULL,
        config_hash TEXT,
        started_at TEXT NOT NULL DEFAULT CURRENT_TIMESTAMP,
        completed_at TEXT,
        status TEXT NOT NULL DEFAULT 'running',
        error_kind TEXT,
        error_message TEXT,
        records_stored INTEGER NOT NULL DEFAULT 0,
        notified INTEGER NOT NULL DEFAULT 0,
        companion_sent INTEGER NOT NULL DEFAULT 0,
        duration_seconds REAL
    )
    """,
    "CREATE INDEX IF NOT EXISTS idx_sync_runs_started ON sync_runs(started_at)",

    # Config snapshots
    """
    CREATE TABLE IF NOT EXISTS config_snapshots (
        config_hash TEXT PRIMARY KEY,
        config_json TEXT NOT NULL,
        created_at TEXT NOT NULL DEFAULT CURRENT_TIMESTAMP
    )
    """,
]


def up(conn: sqlite3.Connection) -> None:
    for stmt in DDL:
        conn.execute(stmt)
    conn.commit()
