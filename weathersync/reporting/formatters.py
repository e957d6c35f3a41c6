"""Output formatters for temperatures, notifications and run results."""

import json

from weathersync.models.common import UnitSystem
from weathersync.models.sync import SyncResult
from weathersync.models.weather import TodaySummary, WeatherRecord

GENERIC_NOTIFICATION_TEXT = "New weather data is available"


def format_temperature(value: float, units: UnitSystem) -> str:
    suffix = "F" if units == UnitSystem.IMPERIAL else "C"
    return f"{value:.0f}°{suffix}"


def format_high_low(high: float, low: float, units: UnitSystem) -> str:
    return f"High: {format_temperature(high, units)} Low: {format_temperature(low, units)}"


def notification_text(summary: TodaySummary | None, units: UnitSystem) -> str:
    """Body text for the user notification."""
    if summary is None:
        return GENERIC_NOTIFICATION_TEXT
    return (
        f"Forecast: {summary.description} - "
        f"{format_high_low(summary.max_temp, summary.min_temp, units)}"
    )


def format_record_line(record: WeatherRecord, units: UnitSystem) -> str:
    return (
        f"{record.date.isoformat()}  {record.weather_condition_id:>3}  "
        f"{format_high_low(record.max_temp, record.min_temp, units)}  "
        f"humidity {record.humidity:.0f}%"
    )


def format_result_text(r: SyncResult) -> str:
    """Plain text result for logging."""
    lines = [
        f"=== Sync {r.state.value} | Run {r.run_id[:8]} ===",
        f"Stored: {r.records_stored} days",
        f"Notified: {'yes' if r.notified else 'no'} | "
        f"Companion: {'yes' if r.companion_sent else 'no'}",
    ]
    if r.summary is not None:
        lines.append(
            f"Today: {r.summary.description} "
            f"{r.summary.max_temp:.1f}/{r.summary.min_temp:.1f}"
        )
    if r.error_kind is not None:
        detail = f" ({r.error_message})" if r.error_message else ""
        lines.append(f"Outcome: {r.error_kind.value}{detail}")
    lines.append(f"Duration: {r.duration_seconds:.1f}s")
    return "\n".join(lines)


def format_result_json(r: SyncResult) -> str:
    """JSON result for programmatic consumption."""
    data = {
        "run_id": r.run_id,
        "state": r.state.value,
        "error_kind": r.error_kind.value if r.error_kind else None,
        "error_message": r.error_message,
        "records_stored": r.records_stored,
        "notified": r.notified,
        "companion_sent": r.companion_sent,
        "duration_seconds": r.duration_seconds,
        "visited": [s.value for s in r.visited],
    }
    return json.dumps(data, indent=2)
