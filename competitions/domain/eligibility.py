"""Team eligibility for events.

A team may view or submit to an event when it passes membership (open
event, or listed in the eligible teams) and every prerequisite event has
completed. Prerequisite statuses are looked up by the caller so resolution
stays a pure function.
"""

from collections.abc import Callable, Iterable, Mapping, Sequence
from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import Enum
from typing import Self

from competitions.domain.errors import CyclicPrerequisiteError, InvalidTeamsError
from competitions.domain.models import EventRecord, EventStatus
from competitions.domain.value_objects import EventId, TeamId


class IneligibilityReason(str, Enum):
    NOT_MEMBER = "not_member"
    PREREQUISITE_INCOMPLETE = "prerequisite_incomplete"


@dataclass(frozen=True)
class EligibilityDecision:
    """Outcome of an eligibility check. Truthy when the team is eligible."""

    eligible: bool
    reason: IneligibilityReason | None = None
    missing_prerequisite_ids: tuple[EventId, ...] = ()

    @classmethod
    def allowed(cls) -> Self:
        return cls(eligible=True)

    @classmethod
    def not_member(cls) -> Self:
        return cls(eligible=False, reason=IneligibilityReason.NOT_MEMBER)

    @classmethod
    def prerequisite_incomplete(cls, missing: Iterable[EventId]) -> Self:
        return cls(
            eligible=False,
            reason=IneligibilityReason.PREREQUISITE_INCOMPLETE,
            missing_prerequisite_ids=tuple(missing),
        )

    def __bool__(self) -> bool:
        return self.eligible


def is_team_member(event: EventRecord, team_id: TeamId) -> bool:
    return event.is_open or team_id in event.eligible_team_ids


def resolve_eligibility(
    event: EventRecord,
    team_id: TeamId,
    prerequisite_statuses: Mapping[EventId, EventStatus],
) -> EligibilityDecision:
    """Decide whether ``team_id`` may take part in ``event``.

    Membership is checked first, so a team outside a restricted event is
    reported as NOT_MEMBER whatever its prerequisites look like. A
    prerequisite missing from ``prerequisite_statuses`` counts as incomplete.
    """
    if not is_team_member(event, team_id):
        return EligibilityDecision.not_member()

    missing = [
        prereq_id
        for prereq_id in event.prerequisite_event_ids
        if prerequisite_statuses.get(prereq_id) != EventStatus.COMPLETED
    ]
    if missing:
        return EligibilityDecision.prerequisite_incomplete(missing)
    return EligibilityDecision.allowed()


def find_prerequisite_cycle(
    event_id: EventId,
    prerequisite_ids: Sequence[EventId],
    lookup: Callable[[EventId], Sequence[EventId]],
) -> None:
    """Walk the prerequisite graph rooted at ``event_id`` and reject cycles.

    ``prerequisite_ids`` are the (possibly proposed) direct prerequisites of
    ``event_id``; ``lookup`` returns the stored prerequisites of any other
    event, or an empty sequence for unknown ids.

    Raises:
        CyclicPrerequisiteError: With the path ending at the revisited event.
    """

    def edges(node: EventId) -> Sequence[EventId]:
        if node == event_id:
            return prerequisite_ids
        return lookup(node)

    finished: set[EventId] = set()
    path: list[EventId] = [event_id]
    on_path: set[EventId] = {event_id}
    stack: list[Iterable[EventId]] = [iter(edges(event_id))]

    while stack:
        child = next(stack[-1], None)
        if child is None:
            stack.pop()
            node = path.pop()
            on_path.discard(node)
            finished.add(node)
            continue
        if child in on_path:
            raise CyclicPrerequisiteError(str(n) for n in [*path, child])
        if child in finished:
            continue
        path.append(child)
        on_path.add(child)
        stack.append(iter(edges(child)))


def validate_eligible_teams(
    team_ids: Sequence[TeamId] | None,
    group_team_ids: Iterable[TeamId],
) -> tuple[TeamId, ...] | None:
    """Normalize a restriction list: None or empty means open.

    Raises:
        InvalidTeamsError: On duplicate ids or teams outside the group.
    """
    if not team_ids:
        return None
    seen: set[TeamId] = set()
    duplicates = []
    for team_id in team_ids:
        if team_id in seen:
            duplicates.append(str(team_id))
        seen.add(team_id)
    if duplicates:
        raise InvalidTeamsError("Eligible teams list cannot contain duplicates", duplicates)

    known = set(group_team_ids)
    foreign = [str(team_id) for team_id in team_ids if team_id not in known]
    if foreign:
        raise InvalidTeamsError(
            "Eligible teams must belong to the event's group: " + ", ".join(foreign),
            foreign,
        )
    return tuple(team_ids)


def submissions_open(event: EventRecord, now: datetime) -> bool:
    """Whether teams can submit right now: active, inside the window, before the deadline."""
    if event.status != EventStatus.ACTIVE:
        return False
    if event.start_time is not None and now < event.start_time:
        return False
    if event.end_time is not None and now > event.end_time:
        return False
    if event.submission_deadline is not None and now > event.submission_deadline:
        return False
    return True


def time_until_deadline(event: EventRecord, now: datetime) -> timedelta | None:
    if event.submission_deadline is None or now > event.submission_deadline:
        return None
    return event.submission_deadline - now
