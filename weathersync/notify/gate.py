"""Notification gate: at most one notification per rolling interval."""

import logging
import sqlite3
from datetime import datetime, timedelta

from weathersync.storage import state_repo

logger = logging.getLogger(__name__)

ONE_DAY = timedelta(days=1)


def should_notify(
    now: datetime,
    last_notified_at: datetime | None,
    notifications_enabled: bool,
    interval: timedelta = ONE_DAY,
) -> bool:
    """Fire only when enabled and at least `interval` has elapsed.

    A missing last-notified time counts as "never notified".
    """
    if not notifications_enabled:
        return False
    if last_notified_at is None:
        return True
    return now - last_notified_at >= interval


def record_notified(conn: sqlite3.Connection, now: datetime) -> None:
    if not state_repo.set_last_notified_at(conn, now):
        logger.warning("Ignoring last-notified time %s older than stored value", now)
