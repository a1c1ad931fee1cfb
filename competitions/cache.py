"""Cache keys for event listings."""

from django.core.cache import cache


def group_events_key(group_id: str) -> str:
    return f"competitions:group:{group_id}:events"


def invalidate_group_events(group_id: str) -> None:
    cache.delete(group_events_key(group_id))
