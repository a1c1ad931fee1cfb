"""Django signals for cache invalidation."""

from django.db.models.signals import post_delete, post_save
from django.dispatch import receiver

from competitions.cache import invalidate_group_events
from competitions.models import Event


@receiver([post_save, post_delete], sender=Event)
def invalidate_event_cache(sender, instance, **kwargs):
    """Invalidate the group listing when one of its events is saved or deleted."""
    invalidate_group_events(str(instance.group_id))
