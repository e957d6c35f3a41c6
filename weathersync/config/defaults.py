"""Default location used when the config names none."""

from weathersync.config.schema import LocationConfig, LocationMode

DEFAULT_LOCATION = LocationConfig(
    mode=LocationMode.PLACE,
    place="94043,USA",
    latitude=37.4284,
    longitude=-122.0724,
)
