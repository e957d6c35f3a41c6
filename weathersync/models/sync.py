"""Sync run states, error taxonomy and per-run outcome."""

from dataclasses import dataclass, field
from enum import StrEnum

from weathersync.models.weather import TodaySummary


class SyncState(StrEnum):
    FETCHING = "fetching"
    PARSING = "parsing"
    NO_DATA = "no_data"
    REPLACING = "replacing"
    SUMMARIZING = "summarizing"
    NO_SUMMARY = "no_summary"
    DECIDING = "deciding"
    NOTIFY = "notify"
    SKIP = "skip"
    DONE = "done"
    FAILED = "failed"
    SKIPPED_BUSY = "skipped_busy"


class SyncErrorKind(StrEnum):
    NETWORK = "network"
    NO_DATA = "no_data"  # valid empty result, not a failure
    STORAGE = "storage"
    UNEXPECTED = "unexpected"


@dataclass
class SyncResult:
    run_id: str
    state: SyncState = SyncState.FETCHING
    error_kind: SyncErrorKind | None = None
    error_message: str = ""
    records_stored: int = 0
    summary: TodaySummary | None = None
    notified: bool = False
    companion_sent: bool = False
    duration_seconds: float = 0.0
    visited: list[SyncState] = field(default_factory=list)

    @property
    def failed(self) -> bool:
        return self.state == SyncState.FAILED

    def advance(self, state: SyncState) -> None:
        self.state = state
        self.visited.append(state)
