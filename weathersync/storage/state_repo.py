"""Repository for user preferences, notification bookkeeping and the run log."""

import sqlite3
from datetime import UTC, datetime

NOTIFICATIONS_ENABLED = "notifications_enabled"
LAST_NOTIFIED_AT = "last_notified_at"

# --- Preferences ---

def get_preference(conn: sqlite3.Connection, key: str) -> str | None:
    """Get a preference value."""
    row = conn.execute(
        "SELECT value FROM preferences WHERE key = ?", (key,)
    ).fetchone()
    if row is None:
        return None
    return row[0]


def set_preference(conn: sqlite3.Connection, key: str, value: str) -> None:
    """Set a preference value."""
    conn.execute(
        "INSERT INTO preferences (key, value, updated_at) VALUES (?, ?, CURRENT_TIMESTAMP) "
        "ON CONFLICT(key) DO UPDATE SET value = excluded.value, updated_at = CURRENT_TIMESTAMP",
        (key, value),
    )
    conn.commit()


def seed_preference(conn: sqlite3.Connection, key: str, value: str) -> None:
    """Set a preference only if it has never been set."""
    conn.execute(
        "INSERT OR IGNORE INTO preferences (key, value) VALUES (?, ?)", (key, value)
    )
    conn.commit()


def are_notifications_enabled(conn: sqlite3.Connection) -> bool:
    return get_preference(conn, NOTIFICATIONS_ENABLED) == "true"


def set_notifications_enabled(conn: sqlite3.Connection, enabled: bool) -> None:
    set_preference(conn, NOTIFICATIONS_ENABLED, "true" if enabled else "false")


def get_last_notified_at(conn: sqlite3.Connection) -> datetime | None:
    """When the last notification was shown, or None if never."""
    value = get_preference(conn, LAST_NOTIFIED_AT)
    if not value:
        return None
    try:
        moment = datetime.fromisoformat(value)
    except ValueError:
        return None
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=UTC)
    return moment


def set_last_notified_at(conn: sqlite3.Connection, moment: datetime) -> bool:
    """Advance the last-notified time. Earlier times are ignored.

    Returns True if the stored value changed.
    """
    current = get_last_notified_at(conn)
    if current is not None and moment <= current:
        return False
    set_preference(conn, LAST_NOTIFIED_AT, moment.isoformat())
    return True


# --- Runs ---

def create_run(
    conn: sqlite3.Connection, run_id: str, config_hash: str | None = None
) -> None:
    """Record the start of a sync run."""
    conn.execute(
        "INSERT INTO sync_runs (run_id, config_hash) VALUES (?, ?)",
        (run_id, config_hash),
    )
    conn.commit()


def complete_run(
    conn: sqlite3.Connection,
    run_id: str,
    status: str,
    error_kind: str | None = None,
    error_message: str | None = None,
    **metrics: int | float | None,
) -> None:
    """Record run completion with metrics."""
    sets = ["completed_at = CURRENT_TIMESTAMP", "status = ?"]
    params: list = [status]

    if error_kind is not None:
        sets.append("error_kind = ?")
        params.append(error_kind)
    if error_message is not None:
        sets.append("error_message = ?")
        params.append(error_message)
    for key, val in metrics.items():
        if val is not None:
            sets.append(f"{key} = ?")
            params.append(val)

    params.append(run_id)
    conn.execute(f"UPDATE sync_runs SET {', '.join(sets)} WHERE run_id = ?", params)
    conn.commit()


def get_latest_run(conn: sqlite3.Connection) -> dict | None:
    """Get the most recent run."""
    row = conn.execute(
        "SELECT * FROM sync_runs ORDER BY id DESC LIMIT 1"
    ).fetchone()
    if row is None:
        return None
    return dict(row)


def get_run(conn: sqlite3.Connection, run_id: str) -> dict | None:
    """Get a specific run by ID."""
    row = conn.execute(
        "SELECT * FROM sync_runs WHERE run_id = ?", (run_id,)
    ).fetchone()
    if row is None:
        return None
    return dict(row)
