"""App settings, read from ``settings.COMPETITIONS`` with defaults."""

from datetime import timedelta
from typing import Any

from django.conf import settings

DEFAULTS: dict[str, Any] = {
    "MAX_WRITE_ATTEMPTS": 3,
    "SCHEDULE_PAST_GRACE_MINUTES": 5,
    "MIN_EVENT_DURATION_MINUTES": 60,
    "EVENT_LIST_CACHE_TIMEOUT": 300,
}


def get_setting(name: str) -> Any:
    overrides = getattr(settings, "COMPETITIONS", {}) or {}
    if name in overrides:
        return overrides[name]
    return DEFAULTS[name]


def scheduling_grace() -> timedelta:
    return timedelta(minutes=get_setting("SCHEDULE_PAST_GRACE_MINUTES"))


def min_event_duration() -> timedelta:
    return timedelta(minutes=get_setting("MIN_EVENT_DURATION_MINUTES"))
