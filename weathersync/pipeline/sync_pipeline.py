"""Sync pipeline: fetch, normalize, replace, summarize, notify.

At most one run executes at a time in the process: every pipeline shares
one run lock. Every failure ends the run in the FAILED state and is logged;
nothing propagates to the caller.
"""

import logging
import sqlite3
import threading
import time
import uuid
from collections.abc import Callable
from datetime import date, datetime, timedelta
from pathlib import Path

import httpx

from weathersync.config.loader import config_hash, load_config, snapshot_config
from weathersync.config.schema import OverlapPolicy, SyncConfig
from weathersync.errors import NetworkError, StorageError
from weathersync.ingest.normalizer import normalize
from weathersync.ingest.openweather_client import OpenWeatherClient
from weathersync.models.common import normalize_date, utc_now
from weathersync.models.sync import SyncErrorKind, SyncResult, SyncState
from weathersync.models.weather import TodaySummary
from weathersync.notify import gate
from weathersync.notify.companion import CompanionSink
from weathersync.notify.notifier import build_notifier
from weathersync.reporting.formatters import format_result_text
from weathersync.storage import state_repo, weather_repo
from weathersync.storage.database import connect, run_migrations

logger = logging.getLogger(__name__)

DEFAULT_DB = "data/weather.db"

_RUN_LOCK = threading.Lock()


class SyncPipeline:
    def __init__(
        self,
        config: SyncConfig | None = None,
        db_path: str | Path = DEFAULT_DB,
        config_path: str | Path | None = None,
        client: OpenWeatherClient | None = None,
        notifier=None,
        companion: CompanionSink | None = None,
        clock: Callable[[], datetime] = utc_now,
    ):
        if config is None:
            config = load_config(config_path) if config_path is not None else SyncConfig()
        self.config: SyncConfig = config
        self.config_path = config_path
        self.db_path = db_path
        self.client = client
        self.notifier = notifier
        self.companion = companion
        self.clock = clock
        self._lock = _RUN_LOCK

    def sync_weather(self) -> SyncResult:
        """Run one sync. Never raises."""
        blocking = self.config.ops.overlap_policy == OverlapPolicy.WAIT
        if not self._lock.acquire(blocking=blocking):
            logger.info("Sync already in progress, dropping trigger")
            result = SyncResult(run_id=str(uuid.uuid4()))
            result.advance(SyncState.SKIPPED_BUSY)
            return result
        try:
            return self._run()
        finally:
            self._lock.release()

    def _current_config(self) -> SyncConfig:
        """Config is re-read every run so edits apply to the next sync."""
        if self.config_path is not None:
            self.config = load_config(self.config_path)
        return self.config

    def _run(self) -> SyncResult:
        start_time = time.monotonic()
        result = SyncResult(run_id=str(uuid.uuid4()))
        conn: sqlite3.Connection | None = None

        try:
            config = self._current_config()
            conn = connect(self.db_path)
            run_migrations(conn)
            state_repo.seed_preference(
                conn,
                state_repo.NOTIFICATIONS_ENABLED,
                "true" if config.notifications.enabled else "false",
            )
            self._log_run_start(conn, result.run_id, config)
            self._execute(conn, config, result)
        except Exception as e:
            _fail(result, e)
        finally:
            result.duration_seconds = time.monotonic() - start_time
            if conn is not None:
                self._log_run_end(conn, result)
                conn.close()

        logger.info("\n%s", format_result_text(result))
        return result

    def _execute(
        self, conn: sqlite3.Connection, config: SyncConfig, result: SyncResult
    ) -> None:
        today = normalize_date(self.clock())

        # 1. FETCH
        result.advance(SyncState.FETCHING)
        client = self.client or OpenWeatherClient.from_config(config)
        raw_text = client.fetch(config)

        # 2. PARSE
        result.advance(SyncState.PARSING)
        records = normalize(raw_text, config.units, today)
        if not records:
            logger.info("No forecast data in response, keeping stored data")
            result.advance(SyncState.NO_DATA)
            result.error_kind = SyncErrorKind.NO_DATA
            result.advance(SyncState.DONE)
            return

        # 3. REPLACE
        result.advance(SyncState.REPLACING)
        result.records_stored = weather_repo.replace_all(conn, records)

        # 4. SUMMARIZE
        result.advance(SyncState.SUMMARIZING)
        summary = weather_repo.query_today(conn, today)
        result.summary = summary
        if summary is None:
            logger.warning("No stored forecast for %s, skipping summary", today)
            result.advance(SyncState.NO_SUMMARY)

        # 5. DECIDE
        result.advance(SyncState.DECIDING)
        now = self.clock()
        enabled = state_repo.are_notifications_enabled(conn)
        last_notified = state_repo.get_last_notified_at(conn)
        interval = timedelta(hours=config.notifications.min_interval_hours)
        if not gate.should_notify(now, last_notified, enabled, interval):
            logger.info(
                "Not notifying (enabled=%s, last notified %s)", enabled, last_notified
            )
            result.advance(SyncState.SKIP)
            result.advance(SyncState.DONE)
            return

        result.advance(SyncState.NOTIFY)
        notifier = self.notifier or build_notifier(config.notifications, config.units)
        notifier.notify(summary)
        result.notified = True
        self._record_notified(conn, now)

        if summary is not None:
            result.companion_sent = self._hand_off(config, summary, today)
        result.advance(SyncState.DONE)

    def _record_notified(self, conn: sqlite3.Connection, now: datetime) -> None:
        """The user has already been notified, so a failed write-back only logs."""
        try:
            gate.record_notified(conn, now)
        except (StorageError, sqlite3.Error):
            logger.warning("Could not record notification time %s", now, exc_info=True)

    def _hand_off(self, config: SyncConfig, summary: TodaySummary, today: date) -> bool:
        companion = self.companion or CompanionSink.from_config(config.companion, config.units)
        if companion is None:
            return False
        try:
            return companion.send(summary, today)
        except Exception:
            logger.warning("Companion hand-off raised, ignoring", exc_info=True)
            return False

    def _log_run_start(
        self, conn: sqlite3.Connection, run_id: str, config: SyncConfig
    ) -> None:
        try:
            snapshot_config(config, conn)
            state_repo.create_run(conn, run_id, config_hash(config))
        except sqlite3.Error:
            logger.warning("Could not record run start", exc_info=True)

    def _log_run_end(self, conn: sqlite3.Connection, result: SyncResult) -> None:
        try:
            state_repo.complete_run(
                conn,
                result.run_id,
                result.state.value,
                error_kind=result.error_kind.value if result.error_kind else None,
                error_message=result.error_message or None,
                records_stored=result.records_stored,
                notified=int(result.notified),
                companion_sent=int(result.companion_sent),
                duration_seconds=result.duration_seconds,
            )
        except sqlite3.Error:
            logger.warning("Could not record run completion", exc_info=True)


def classify_error(error: BaseException) -> SyncErrorKind:
    if isinstance(error, (NetworkError, httpx.HTTPError)):
        return SyncErrorKind.NETWORK
    if isinstance(error, (StorageError, sqlite3.Error)):
        return SyncErrorKind.STORAGE
    return SyncErrorKind.UNEXPECTED


def _fail(result: SyncResult, error: Exception) -> None:
    kind = classify_error(error)
    logger.exception(
        "Sync run %s failed while %s (%s)", result.run_id[:8], result.state.value, kind.value
    )
    result.error_kind = kind
    result.error_message = str(error)
    result.advance(SyncState.FAILED)


def sync_weather(config: SyncConfig, db_path: str | Path = DEFAULT_DB) -> SyncResult:
    """One-shot sync. Serialized with every other run in the process."""
    return SyncPipeline(config, db_path).sync_weather()
