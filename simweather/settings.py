"""Runtime settings for the weather fetcher, read from the environment."""
from __future__ import annotations

import os

VERSION = "0.3.0"


class ImproperlyConfigured(RuntimeError):
    """Raised when a setting is missing or cannot be interpreted."""


def env(name: str, default: str | None = None) -> str:
    """Fetch environment variables while allowing explicit defaults."""

    value = os.environ.get(name, default)
    if value is None:
        raise ImproperlyConfigured(f"Environment variable {name} is required")
    return value


def env_float(name: str, default: float) -> float:
    value = env(name, str(default))
    try:
        return float(value)
    except ValueError:
        raise ImproperlyConfigured(f"Environment variable {name} must be a number, got {value!r}") from None


# Parameters in this order: radius [statute miles], longitude, latitude
DEFAULT_WEATHER_URL = (
    "https://www.aviationweather.gov/adds/dataserver_current/httpparam"
    "?dataSource=metars&requestType=retrieve&format=xml"
    "&radialDistance={radius_sm:.0f};{longitude:.2f},{latitude:.2f}"
    "&hoursBeforeNow=2&mostRecent=true"
    "&fields=raw_text,station_id,latitude,longitude,altim_in_hg"
)

WEATHER_URL = env("SIMWEATHER_WEATHER_URL", DEFAULT_WEATHER_URL)
NETWORK_TIMEOUT = env_float("SIMWEATHER_NETWORK_TIMEOUT", 90.0)
MAX_RADIUS_NM = env_float("SIMWEATHER_MAX_RADIUS_NM", 100.0)
USER_AGENT = env("SIMWEATHER_USER_AGENT", f"simweather/{VERSION}")
LOG_LEVEL = env("SIMWEATHER_LOG_LEVEL", "INFO").upper()
TESTING_MODE = os.environ.get("TESTING_MODE", "0") == "1"
