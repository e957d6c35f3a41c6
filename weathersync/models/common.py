"""Common types and helpers shared across models."""

from datetime import UTC, date, datetime
from enum import StrEnum


class UnitSystem(StrEnum):
    METRIC = "metric"
    IMPERIAL = "imperial"


def utc_now() -> datetime:
    return datetime.now(UTC)


def normalize_date(moment: datetime | None = None) -> date:
    """Collapse a moment to its UTC calendar day."""
    if moment is None:
        moment = utc_now()
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=UTC)
    return moment.astimezone(UTC).date()
