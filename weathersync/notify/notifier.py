"""User notification sinks: console (chat-style print) or webhook POST."""

import logging

import httpx

from weathersync.config.schema import NotificationConfig, NotificationSink
from weathersync.models.common import UnitSystem
from weathersync.models.weather import TodaySummary
from weathersync.reporting.formatters import notification_text

logger = logging.getLogger(__name__)


class NotificationError(Exception):
    """Raised when a notification cannot be delivered."""


class ConsoleNotifier:
    def __init__(self, title: str, units: UnitSystem):
        self.title = title
        self.units = units

    def notify(self, summary: TodaySummary | None) -> None:
        text = notification_text(summary, self.units)
        logger.info("Notification: %s", text)
        print(f"🔔 {self.title}: {text}")


class WebhookNotifier:
    """POSTs `{"title", "text"}` to a webhook."""

    def __init__(self, url: str, title: str, units: UnitSystem, timeout: float = 10.0):
        if not url:
            raise NotificationError("Webhook notifications need notifications.webhook_url")
        self.url = url
        self.title = title
        self.units = units
        self.timeout = timeout

    def notify(self, summary: TodaySummary | None) -> None:
        payload = {"title": self.title, "text": notification_text(summary, self.units)}
        try:
            resp = httpx.post(self.url, json=payload, timeout=self.timeout)
        except httpx.RequestError as e:
            raise NotificationError(f"Webhook request failed: {e}") from e
        if resp.status_code >= 400:
            raise NotificationError(f"Webhook returned HTTP {resp.status_code}")
        logger.info("Notification delivered to webhook")


def build_notifier(
    config: NotificationConfig, units: UnitSystem
) -> ConsoleNotifier | WebhookNotifier:
    if config.sink == NotificationSink.WEBHOOK:
        return WebhookNotifier(config.webhook_url, config.title, units)
    return ConsoleNotifier(config.title, units)
