"""Forecast records and the derived daily summary."""

from dataclasses import dataclass
from datetime import date

from weathersync.weather import conditions


@dataclass(frozen=True)
class WeatherRecord:
    date: date
    weather_condition_id: int
    max_temp: float
    min_temp: float
    humidity: float = 0.0
    pressure: float = 0.0
    wind_speed: float = 0.0
    wind_degrees: float = 0.0


@dataclass(frozen=True)
class TodaySummary:
    weather_condition_id: int
    max_temp: float
    min_temp: float

    @property
    def description(self) -> str:
        return conditions.description_for(self.weather_condition_id)

    @property
    def icon(self) -> str:
        return conditions.icon_for(self.weather_condition_id)
