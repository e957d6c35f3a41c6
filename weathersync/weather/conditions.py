"""Weather condition taxonomy: provider codes, descriptions and icons.

Condition ids follow the OpenWeatherMap grouping:
2xx thunderstorm, 3xx drizzle, 5xx rain, 6xx snow, 7xx atmosphere,
800 clear, 80x clouds, 9xx extreme / additional.
"""

import logging

logger = logging.getLogger(__name__)

MIN_CONDITION_ID = 200
MAX_CONDITION_ID = 999

DESCRIPTIONS: dict[int, str] = {
    200: "Storm",
    201: "Storm",
    202: "Storm",
    210: "Light storm",
    211: "Storm",
    212: "Heavy storm",
    221: "Ragged storm",
    230: "Storm",
    231: "Storm",
    232: "Storm",
    300: "Light drizzle",
    301: "Drizzle",
    302: "Heavy drizzle",
    310: "Light drizzle and rain",
    311: "Drizzle and rain",
    312: "Heavy drizzle and rain",
    313: "Shower rain and drizzle",
    314: "Heavy shower rain and drizzle",
    321: "Shower drizzle",
    500: "Light rain",
    501: "Moderate rain",
    502: "Heavy rain",
    503: "Intense rain",
    504: "Extreme rain",
    511: "Freezing rain",
    520: "Light shower rain",
    521: "Shower rain",
    522: "Heavy shower rain",
    531: "Ragged shower rain",
    600: "Light snow",
    601: "Snow",
    602: "Heavy snow",
    611: "Sleet",
    612: "Shower sleet",
    615: "Rain and snow",
    616: "Rain and snow",
    620: "Light shower snow",
    621: "Shower snow",
    622: "Heavy shower snow",
    701: "Mist",
    711: "Smoke",
    721: "Haze",
    731: "Sand and dust",
    741: "Fog",
    751: "Sand",
    761: "Dust",
    762: "Volcanic ash",
    771: "Squalls",
    781: "Tornado",
    800: "Clear",
    801: "Mostly clear",
    802: "Scattered clouds",
    803: "Broken clouds",
    804: "Overcast clouds",
    900: "Tornado",
    901: "Tropical storm",
    902: "Hurricane",
    903: "Cold",
    904: "Hot",
    905: "Windy",
    906: "Hail",
    951: "Calm",
    952: "Light breeze",
    953: "Gentle breeze",
    954: "Breeze",
    955: "Fresh breeze",
    956: "Strong breeze",
    957: "High wind",
    958: "Gale",
    959: "Severe gale",
    960: "Storm",
    961: "Violent storm",
    962: "Hurricane",
}


def to_condition_id(provider_code: object) -> int:
    """Map a provider condition code onto the internal condition id.

    Raises ValueError for codes that are not integers in the known range.
    """
    if isinstance(provider_code, bool):
        raise ValueError(f"Invalid condition code: {provider_code!r}")
    if isinstance(provider_code, float) and provider_code.is_integer():
        provider_code = int(provider_code)
    if not isinstance(provider_code, int):
        raise ValueError(f"Invalid condition code: {provider_code!r}")
    if not MIN_CONDITION_ID <= provider_code <= MAX_CONDITION_ID:
        raise ValueError(f"Condition code out of range: {provider_code}")
    if provider_code not in DESCRIPTIONS:
        logger.debug("Unmapped condition code %d, keeping as-is", provider_code)
    return provider_code


def description_for(condition_id: int) -> str:
    if condition_id in DESCRIPTIONS:
        return DESCRIPTIONS[condition_id]
    logger.warning("No description for condition id %d", condition_id)
    return "Unknown"


def icon_for(condition_id: int) -> str:
    """Icon name for a condition id, grouped by range."""
    if 200 <= condition_id <= 232:
        return "storm"
    if 300 <= condition_id <= 321:
        return "light_rain"
    if 500 <= condition_id <= 504:
        return "rain"
    if condition_id == 511:
        return "snow"
    if 520 <= condition_id <= 531:
        return "rain"
    if 600 <= condition_id <= 622:
        return "snow"
    if 701 <= condition_id <= 761:
        return "fog"
    if condition_id in (762, 771, 781):
        return "storm"
    if condition_id == 800:
        return "clear"
    if condition_id == 801:
        return "light_clouds"
    if 802 <= condition_id <= 804:
        return "cloudy"
    if 900 <= condition_id <= 906:
        return "storm"
    if 958 <= condition_id <= 962:
        return "storm"
    if 951 <= condition_id <= 957:
        return "clear"

    logger.warning("Unknown condition id %d, using storm icon", condition_id)
    return "storm"
