"""Coarse region and city derivation from an IANA timezone name.

No geolocation permission is needed; used when registration or posting
does not carry an explicit region/location.
"""
from moodfeed.core.config import settings

_REGION_PREFIXES = {
    "Europe/": "EU",
    "America/": "US",
    "Asia/": "ASIA",
    "Australia/": "OC",
    "Africa/": "AF",
}


def detect_region(timezone: str | None = None) -> str:
    tz = timezone or settings.DEFAULT_TIMEZONE or ""
    for prefix, region in _REGION_PREFIXES.items():
        if tz.startswith(prefix):
            return region
    return "GLOBAL"


def city_from_timezone(timezone: str | None = None) -> str:
    """'Europe/Berlin' -> 'Berlin', 'America/New_York' -> 'New York'."""
    tz = timezone or settings.DEFAULT_TIMEZONE or ""
    parts = tz.split("/")
    if len(parts) < 2 or not parts[-1]:
        return "Unknown"
    return parts[-1].replace("_", " ")
