"""Event lifecycle state machine.

States: draft -> scheduled -> active -> completed
draft, scheduled and active can also move to cancelled.
completed and cancelled are terminal.
"""

from dataclasses import replace
from datetime import datetime

from competitions.domain.errors import (
    EventOperationError,
    InvalidTransitionError,
    ScheduleInvalidError,
)
from competitions.domain.models import EventRecord, EventStatus
from competitions.domain.schedule import validate_schedule

VALID_TRANSITIONS: dict[EventStatus, frozenset[EventStatus]] = {
    EventStatus.DRAFT: frozenset({EventStatus.SCHEDULED, EventStatus.CANCELLED}),
    EventStatus.SCHEDULED: frozenset({EventStatus.ACTIVE, EventStatus.CANCELLED}),
    EventStatus.ACTIVE: frozenset({EventStatus.COMPLETED, EventStatus.CANCELLED}),
    EventStatus.COMPLETED: frozenset(),
    EventStatus.CANCELLED: frozenset(),
}


def allowed_transitions(current: EventStatus) -> frozenset[EventStatus]:
    return VALID_TRANSITIONS.get(current, frozenset())


def can_transition(current: EventStatus, target: EventStatus) -> bool:
    """Check if a status transition is in the transition table."""
    return target in allowed_transitions(current)


def transition(event: EventRecord, target: EventStatus, now: datetime) -> EventRecord:
    """Return a copy of ``event`` moved to ``target``.

    Moving to the current status returns the event unchanged.

    Raises:
        InvalidTransitionError: If the pair is not in the transition table.
        ScheduleInvalidError: If the target status needs a schedule the event
            does not have, or the schedule is out of order.
    """
    if target == event.status:
        return event
    if not can_transition(event.status, target):
        raise InvalidTransitionError(event.status.value, target.value)

    if target.requires_schedule:
        if not event.has_schedule:
            raise ScheduleInvalidError(
                f"Cannot move event to {target.value} without start and end times"
            )
        validate_schedule(event.start_time, event.end_time, event.submission_deadline)

    return replace(event, status=target, updated_at=now)


def determine_appropriate_status(event: EventRecord, now: datetime) -> EventStatus:
    """Recommend the status an event should be in at ``now``.

    Read-only: the caller applies the recommendation with ``transition``.
    Drafts stay drafts, and the recommendation never moves backward or to
    cancelled.
    """
    status = event.status
    end_time = event.end_time
    if status not in (EventStatus.SCHEDULED, EventStatus.ACTIVE) or end_time is None:
        return status

    if now >= end_time:
        return EventStatus.COMPLETED
    if (
        status == EventStatus.SCHEDULED
        and event.start_time is not None
        and event.start_time <= now
    ):
        return EventStatus.ACTIVE
    return status


def needs_status_update(event: EventRecord, now: datetime) -> bool:
    return determine_appropriate_status(event, now) != event.status


def auto_promote(event: EventRecord, now: datetime) -> EventRecord:
    """Apply the recommended status through the transition table.

    A scheduled event whose end time has already passed goes through active
    on its way to completed. Returns ``event`` itself when nothing changes.
    """
    target = determine_appropriate_status(event, now)
    promoted = event
    while promoted.status != target:
        step = EventStatus.ACTIVE if promoted.status == EventStatus.SCHEDULED else target
        promoted = transition(promoted, step, now)
    return promoted


def apply_schedule(
    event: EventRecord,
    start_time: datetime | None,
    end_time: datetime | None,
    submission_deadline: datetime | None,
    now: datetime,
) -> EventRecord:
    """Return a copy of ``event`` carrying a new schedule.

    Raises:
        EventOperationError: If the event is completed or cancelled.
        ScheduleInvalidError: If the schedule is out of order, or the event's
            status requires start and end times that are missing.
    """
    if event.status.is_terminal:
        raise EventOperationError(
            f"Cannot change the schedule of a {event.status.value} event"
        )
    validate_schedule(start_time, end_time, submission_deadline)
    if event.status.requires_schedule and (start_time is None or end_time is None):
        raise ScheduleInvalidError(
            f"A {event.status.value} event must keep start and end times"
        )
    return replace(
        event,
        start_time=start_time,
        end_time=end_time,
        submission_deadline=submission_deadline,
        updated_at=now,
    )
