from competitions.services.event_service import EventService
from competitions.stores.django_store import DjangoEventStore, DjangoTeamStore


def get_event_service() -> EventService:
    """EventService wired to the Django ORM stores."""
    return EventService(DjangoEventStore(), DjangoTeamStore())


__all__ = ["EventService", "get_event_service"]
