"""Normalizer: provider forecast JSON to WeatherRecords.

Error envelopes and malformed payloads yield an empty list; nothing here
raises on bad input.
"""

import json
import logging
from datetime import date, timedelta

from weathersync.models.common import UnitSystem
from weathersync.models.weather import WeatherRecord
from weathersync.weather.conditions import to_condition_id

logger = logging.getLogger(__name__)

OK_CODE = 200


def normalize(raw_text: str, units: UnitSystem, today: date) -> list[WeatherRecord]:
    """Parse a daily forecast response into one record per day, starting today."""
    try:
        payload = json.loads(raw_text)
    except (TypeError, ValueError):
        logger.warning("Forecast response is not valid JSON")
        return []

    if not isinstance(payload, dict):
        logger.warning("Forecast response is not an object")
        return []

    if not _status_ok(payload):
        logger.warning(
            "Forecast provider reported error cod=%s message=%s",
            payload.get("cod"), payload.get("message", ""),
        )
        return []

    entries = payload.get("list")
    if not isinstance(entries, list):
        logger.warning("Forecast response has no day list")
        return []

    records: list[WeatherRecord] = []
    for index, entry in enumerate(entries):
        try:
            records.append(_parse_entry(entry, today + timedelta(days=index), units))
        except (KeyError, IndexError, TypeError, ValueError) as e:
            logger.warning("Malformed forecast entry %d: %s", index, e)
            return []
    return records


def convert_temperature(celsius: float, units: UnitSystem) -> float:
    if units == UnitSystem.IMPERIAL:
        return celsius * 9 / 5 + 32
    return celsius


def _status_ok(payload: dict) -> bool:
    """True unless the envelope carries a non-200 `cod`.

    The provider sends `cod` as a string on success and sometimes as an int
    on errors; a missing code is treated as success.
    """
    if "cod" not in payload:
        return True
    try:
        return int(payload["cod"]) == OK_CODE
    except (TypeError, ValueError):
        return False


def _parse_entry(entry: object, day: date, units: UnitSystem) -> WeatherRecord:
    if not isinstance(entry, dict):
        raise TypeError(f"entry is {type(entry).__name__}, not an object")

    temp = entry["temp"]
    high = _number(temp["max"])
    low = _number(temp["min"])
    condition = to_condition_id(entry["weather"][0]["id"])

    return WeatherRecord(
        date=day,
        weather_condition_id=condition,
        max_temp=convert_temperature(high, units),
        min_temp=convert_temperature(low, units),
        humidity=_number(entry.get("humidity", 0)),
        pressure=_number(entry.get("pressure", 0)),
        wind_speed=_number(entry.get("speed", 0)),
        wind_degrees=_number(entry.get("deg", 0)),
    )


def _number(value: object) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"expected a number, got {value!r}")
    return float(value)
