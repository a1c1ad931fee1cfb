from competitions.domain.models import EventRecord, EventStatus, EventType, Team
from competitions.domain.value_objects import EventId, GroupId, TeamId

__all__ = [
    "EventRecord",
    "EventStatus",
    "EventType",
    "Team",
    "EventId",
    "GroupId",
    "TeamId",
]
