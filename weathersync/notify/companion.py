"""Companion device hand-off: best-effort push of today's summary."""

import logging
from datetime import date

import httpx

from weathersync.config.schema import CompanionConfig
from weathersync.models.common import UnitSystem
from weathersync.models.weather import TodaySummary

logger = logging.getLogger(__name__)


class CompanionSink:
    """Fire-and-forget sender. `send` never raises."""

    def __init__(self, url: str, units: UnitSystem, timeout: float = 5.0):
        self.url = url
        self.units = units
        self.timeout = timeout

    @classmethod
    def from_config(cls, config: CompanionConfig, units: UnitSystem) -> "CompanionSink | None":
        if not config.enabled or not config.url:
            return None
        return cls(config.url, units, config.timeout_seconds)

    def build_payload(self, summary: TodaySummary, today: date) -> dict:
        return {
            "condition": summary.description,
            "icon": summary.icon,
            "high": summary.max_temp,
            "low": summary.min_temp,
            "units": self.units.value,
            "date": today.isoformat(),
        }

    def send(self, summary: TodaySummary, today: date) -> bool:
        """Returns True if the companion accepted the summary."""
        try:
            resp = httpx.post(
                self.url, json=self.build_payload(summary, today), timeout=self.timeout
            )
            if resp.status_code >= 400:
                logger.warning("Companion rejected summary: HTTP %d", resp.status_code)
                return False
            return True
        except Exception:
            logger.warning("Companion hand-off failed", exc_info=True)
            return False
