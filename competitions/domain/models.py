"""Domain models representing persisted state.

These are pure domain objects with no API input rules.
Django ORM models are in competitions/models.py (persistence layer).
"""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any

from competitions.domain.value_objects import EventId, GroupId, TeamId

# Reserved key of the persisted judging criteria that holds the prerequisite list.
PREREQUISITES_KEY = "prerequisites"


class EventType(str, Enum):
    """Kind of event. Carried through untouched by the engine."""

    COMPETITION = "competition"
    CHALLENGE = "challenge"
    SURVEY = "survey"


class EventStatus(str, Enum):
    """Lifecycle status of an event."""

    DRAFT = "draft"
    SCHEDULED = "scheduled"
    ACTIVE = "active"
    COMPLETED = "completed"
    CANCELLED = "cancelled"

    @property
    def is_terminal(self) -> bool:
        return self in (EventStatus.COMPLETED, EventStatus.CANCELLED)

    @property
    def requires_schedule(self) -> bool:
        return self in (EventStatus.SCHEDULED, EventStatus.ACTIVE, EventStatus.COMPLETED)


@dataclass(frozen=True)
class EventRecord:
    """Domain representation of an Event.

    Snapshots are never mutated; engine functions return new records.
    ``eligible_team_ids`` of None or () means the event is open to every team
    of the group. ``version`` is the optimistic concurrency token observed
    when the record was read.
    """

    id: EventId
    group_id: GroupId
    title: str
    description: str
    event_type: EventType
    status: EventStatus
    created_by: str
    created_at: datetime
    updated_at: datetime
    start_time: datetime | None = None
    end_time: datetime | None = None
    submission_deadline: datetime | None = None
    eligible_team_ids: tuple[TeamId, ...] | None = None
    prerequisite_event_ids: tuple[EventId, ...] = ()
    judging_criteria: Mapping[str, Any] = field(default_factory=dict)
    version: int = 0

    @property
    def is_open(self) -> bool:
        return not self.eligible_team_ids

    @property
    def is_restricted(self) -> bool:
        return not self.is_open

    @property
    def has_schedule(self) -> bool:
        return self.start_time is not None and self.end_time is not None


@dataclass(frozen=True)
class Team:
    """Domain representation of a Team."""

    id: TeamId
    group_id: GroupId
    name: str


def split_prerequisites(
    criteria: Mapping[str, Any] | None,
) -> tuple[dict[str, Any], tuple[EventId, ...]]:
    """Separate the reserved prerequisite list from persisted judging criteria.

    A missing key means no prerequisites. Entries that are not event-id
    strings are dropped.
    """
    remaining = dict(criteria or {})
    raw = remaining.pop(PREREQUISITES_KEY, None) or []
    ids: list[EventId] = []
    for value in raw:
        if not isinstance(value, str):
            continue
        try:
            ids.append(EventId.from_string(value))
        except ValueError:
            continue
    return remaining, tuple(ids)


def merge_prerequisites(
    criteria: Mapping[str, Any], prerequisite_ids: Iterable[EventId]
) -> dict[str, Any]:
    """Build the persisted judging criteria, storing prerequisites under the reserved key."""
    merged = {k: v for k, v in criteria.items() if k != PREREQUISITES_KEY}
    ids = [str(event_id) for event_id in prerequisite_ids]
    if ids:
        merged[PREREQUISITES_KEY] = ids
    return merged
