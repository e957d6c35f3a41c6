"""Pydantic v2 configuration schema with strict validation."""

from enum import StrEnum

from pydantic import BaseModel, Field

from weathersync.models.common import UnitSystem


class LocationMode(StrEnum):
    COORDS = "coords"
    PLACE = "place"


class NotificationSink(StrEnum):
    CONSOLE = "console"
    WEBHOOK = "webhook"


class OverlapPolicy(StrEnum):
    WAIT = "wait"  # block until the in-flight run finishes
    SKIP = "skip"  # drop the trigger


class LocationConfig(BaseModel):
    model_config = {"extra": "forbid"}

    mode: LocationMode = LocationMode.PLACE
    place: str = ""
    latitude: float | None = None
    longitude: float | None = None

    def has_valid_coordinates(self) -> bool:
        if self.latitude is None or self.longitude is None:
            return False
        return -90.0 <= self.latitude <= 90.0 and -180.0 <= self.longitude <= 180.0


class ProviderConfig(BaseModel):
    model_config = {"extra": "forbid"}

    base_url: str = "https://api.openweathermap.org/data/2.5/forecast/daily"
    api_key: str = ""
    timeout_seconds: float = Field(default=15.0, gt=0.0)
    forecast_days: int = Field(default=14, ge=1, le=16)
    user_agent: str = "weathersync/0.1.0"


class NotificationConfig(BaseModel):
    model_config = {"extra": "forbid"}

    enabled: bool = True  # seeds the stored preference on first run
    min_interval_hours: float = Field(default=24.0, gt=0.0)
    sink: NotificationSink = NotificationSink.CONSOLE
    webhook_url: str = ""
    title: str = "Weather updated"


class CompanionConfig(BaseModel):
    model_config = {"extra": "forbid"}

    enabled: bool = False
    url: str = ""
    timeout_seconds: float = Field(default=5.0, gt=0.0)


class OpsConfig(BaseModel):
    model_config = {"extra": "forbid"}

    sync_interval_minutes: int = Field(default=180, ge=1)
    overlap_policy: OverlapPolicy = OverlapPolicy.WAIT


class SyncConfig(BaseModel):
    model_config = {"extra": "forbid"}

    units: UnitSystem = UnitSystem.METRIC
    location: LocationConfig = LocationConfig()
    provider: ProviderConfig = ProviderConfig()
    notifications: NotificationConfig = NotificationConfig()
    companion: CompanionConfig = CompanionConfig()
    ops: OpsConfig = OpsConfig()
