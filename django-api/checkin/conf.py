"""App settings, read from settings.INGREZZI with defaults."""

from django.conf import settings

DEFAULTS = {
    "SCAN_COOLDOWN_SECONDS": 2.0,
    "STATS_CACHE_SECONDS": 30,
    "USER_HEADER": "X-Ingrezzi-User",
}


def app_setting(name: str):
    return getattr(settings, "INGREZZI", {}).get(name, DEFAULTS[name])


def stats_cache_key(event_id) -> str:
    return f"checkin:stats:{event_id}"
