"""Repository for the stored forecast: full replace and today's summary."""

import logging
import sqlite3
from collections.abc import Sequence
from contextlib import closing
from datetime import date

from weathersync.errors import StorageError
from weathersync.models.weather import TodaySummary, WeatherRecord
from weathersync.storage.database import transaction

logger = logging.getLogger(__name__)

SUMMARY_PROJECTION = ("weather_id", "max_temp", "min_temp")


def replace_all(conn: sqlite3.Connection, records: Sequence[WeatherRecord]) -> int:
    """Delete every stored row and insert the given records in one transaction.

    On any failure the transaction is rolled back, the previous rows remain
    and StorageError is raised. Returns the number of rows inserted.
    """
    if not records:
        raise ValueError("replace_all requires at least one record")

    rows = [
        (
            r.date.isoformat(),
            r.weather_condition_id,
            r.max_temp,
            r.min_temp,
            r.humidity,
            r.pressure,
            r.wind_speed,
            r.wind_degrees,
        )
        for r in records
    ]
    try:
        with transaction(conn):
            deleted = conn.execute("DELETE FROM weather").rowcount
            conn.executemany(
                "INSERT INTO weather "
                "(date, weather_id, max_temp, min_temp, humidity, pressure, "
                "wind_speed, wind_degrees) VALUES (?, ?, ?, ?, ?, ?, ?, ?)",
                rows,
            )
    except sqlite3.Error as e:
        raise StorageError(f"Replacing stored forecast failed: {e}") from e
    logger.info("Replaced %d stored days with %d new days", deleted, len(rows))
    return len(rows)


def query_today(conn: sqlite3.Connection, today: date) -> TodaySummary | None:
    """Summary of the stored row for `today`, or None if there is none."""
    columns = ", ".join(SUMMARY_PROJECTION)
    try:
        with closing(
            conn.execute(f"SELECT {columns} FROM weather WHERE date = ?", (today.isoformat(),))
        ) as cursor:
            row = cursor.fetchone()
    except sqlite3.Error as e:
        raise StorageError(f"Reading today's forecast failed: {e}") from e
    if row is None:
        return None
    return TodaySummary(
        weather_condition_id=int(row[0]),
        max_temp=float(row[1]),
        min_temp=float(row[2]),
    )


def get_all_records(conn: sqlite3.Connection) -> list[WeatherRecord]:
    """All stored records ordered by date."""
    rows = conn.execute(
        "SELECT date, weather_id, max_temp, min_temp, humidity, pressure, "
        "wind_speed, wind_degrees FROM weather ORDER BY date"
    ).fetchall()
    return [
        WeatherRecord(
            date=date.fromisoformat(r["date"]),
            weather_condition_id=r["weather_id"],
            max_temp=r["max_temp"],
            min_temp=r["min_temp"],
            humidity=r["humidity"],
            pressure=r["pressure"],
            wind_speed=r["wind_speed"],
            wind_degrees=r["wind_degrees"],
        )
        for r in rows
    ]


def count_records(conn: sqlite3.Connection) -> int:
    return conn.execute("SELECT COUNT(*) FROM weather").fetchone()[0]
