"""OpenWeatherMap daily forecast client: one blocking request per call."""

import logging
import os
from urllib.parse import urlencode

import httpx

from weathersync.config.schema import LocationMode, SyncConfig
from weathersync.errors import NetworkError

logger = logging.getLogger(__name__)

API_KEY_ENV = "OPENWEATHER_API_KEY"
PROVIDER_UNITS = "metric"  # converted to the user's units by the normalizer


def build_request_url(config: SyncConfig) -> str:
    """Build the forecast URL for the configured location.

    Coordinates are used when the location is in coords mode and both
    values are in range; otherwise the place name is queried.
    """
    location = config.location
    params: dict[str, str | int | float] = {}
    if location.mode == LocationMode.COORDS and location.has_valid_coordinates():
        params["lat"] = location.latitude  # type: ignore[assignment]
        params["lon"] = location.longitude  # type: ignore[assignment]
    else:
        params["q"] = location.place
    params["mode"] = "json"
    params["units"] = PROVIDER_UNITS
    params["cnt"] = config.provider.forecast_days

    api_key = config.provider.api_key or os.environ.get(API_KEY_ENV, "")
    if api_key:
        params["appid"] = api_key

    return f"{config.provider.base_url}?{urlencode(params)}"


class OpenWeatherClient:
    def __init__(self, timeout: float = 15.0, user_agent: str = "weathersync/0.1.0"):
        self.timeout = timeout
        self.user_agent = user_agent

    @classmethod
    def from_config(cls, config: SyncConfig) -> "OpenWeatherClient":
        return cls(
            timeout=config.provider.timeout_seconds,
            user_agent=config.provider.user_agent,
        )

    def fetch(self, config: SyncConfig) -> str:
        """Fetch raw forecast JSON text for the configured location.

        Raises NetworkError on any transport failure or non-2xx status.
        """
        url = build_request_url(config)
        return self.get_text(url)

    def get_text(self, url: str) -> str:
        headers = {"User-Agent": self.user_agent, "Accept": "application/json"}
        try:
            resp = httpx.get(url, headers=headers, timeout=self.timeout)
        except httpx.HTTPError as e:
            raise NetworkError(f"Forecast request failed: {e}") from e

        if resp.is_error:
            raise NetworkError(
                f"Forecast provider returned HTTP {resp.status_code}",
                status_code=resp.status_code,
            )
        logger.debug("Fetched %d bytes of forecast data", len(resp.content))
        return resp.text
