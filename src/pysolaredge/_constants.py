"""Internal constants shared across the library."""

from __future__ import annotations

from datetime import datetime

BASE_URL = "https://monitoringapi.solaredge.com"
DEV_PROXY_URL = "http://localhost:5173/solaredge"
USER_AGENT = "pysolaredge"

# ------------------------------------------------------------------
# Endpoints
# ------------------------------------------------------------------

ENDPOINT_DETAILS = "details"
ENDPOINT_OVERVIEW = "overview"
ENDPOINT_POWER = "power"
ENDPOINT_ENERGY = "energy"
ENDPOINT_ENERGY_DETAILS = "energyDetails"
ENDPOINT_POWER_FLOW = "currentPowerFlow"
ENDPOINT_ENV_BENEFITS = "envBenefits"
ENDPOINT_INVENTORY = "inventory"
ENDPOINT_POWER_DETAILS = "powerDetails"

_MINUTE = 60.0
_HOUR = 60 * _MINUTE

#: Freshness window per endpoint, in seconds.
CACHE_TTLS: dict[str, float] = {
    ENDPOINT_DETAILS: 1 * _HOUR,
    ENDPOINT_OVERVIEW: 15 * _MINUTE,
    ENDPOINT_POWER: 15 * _MINUTE,
    # Historical energy does not change once the day is over.
    ENDPOINT_ENERGY: 24 * _HOUR,
    ENDPOINT_ENERGY_DETAILS: 24 * _HOUR,
    ENDPOINT_POWER_FLOW: 10 * _MINUTE,
    ENDPOINT_ENV_BENEFITS: 12 * _HOUR,
    ENDPOINT_INVENTORY: 12 * _HOUR,
    ENDPOINT_POWER_DETAILS: 15 * _MINUTE,
}
DEFAULT_CACHE_TTL: float = 15 * _MINUTE

#: Cooldown applied after an HTTP 429. SolarEdge does not document how long
#: a daily-quota block lasts; one hour is an observed, adjustable value.
DEFAULT_RATE_LIMIT_COOLDOWN: float = 1 * _HOUR

ENERGY_METERS = "PRODUCTION,PURCHASED"
POWER_DETAILS_METERS = "PRODUCTION,CONSUMPTION,PURCHASED"

# ------------------------------------------------------------------
# Persisted storage keys
# ------------------------------------------------------------------

DATA_KEY_PREFIX = "solar_data_"
LAST_SUCCESS_KEY_PREFIX = "solar_last_success_"
BLOCKED_UNTIL_KEY = "solar_api_blocked_until"

# ------------------------------------------------------------------
# Time formatting
# ------------------------------------------------------------------

API_TIME_FORMAT = "%Y-%m-%d %H:%M:%S"


def format_api_time(value: datetime | str) -> str:
    """Render *value* in the ``YYYY-MM-DD HH:MM:SS`` form the API expects.

    Strings are passed through unchanged so callers can hand over
    preformatted values.
    """
    if isinstance(value, str):
        return value
    return value.strftime(API_TIME_FORMAT)
