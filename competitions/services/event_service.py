"""Event service - all business logic lives here.

Services:
- Depend only on interfaces (stores)
- Validate domain invariants
- Perform orchestration and error mapping
- Return domain models or domain errors

Every write is conditioned on the version read just before it. A conflict
re-reads the event and recomputes the change, up to ``MAX_WRITE_ATTEMPTS``
times, before ConflictError reaches the caller.
"""

import logging
from collections.abc import Callable, Mapping, Sequence
from dataclasses import replace
from datetime import datetime, timedelta
from typing import Any
from uuid import UUID, uuid4

from django.utils import timezone

from competitions import conf
from competitions.domain import (
    EventId,
    EventRecord,
    EventStatus,
    EventType,
    GroupId,
    TeamId,
)
from competitions.domain.cloning import clone_event
from competitions.domain.eligibility import (
    EligibilityDecision,
    find_prerequisite_cycle,
    resolve_eligibility,
    submissions_open,
    time_until_deadline,
    validate_eligible_teams,
)
from competitions.domain.errors import (
    ConflictError,
    DomainError,
    EventNotFoundError,
    EventOperationError,
    GroupNotFoundError,
    InvalidEventIdError,
    InvalidIdentifierError,
    InvalidInputError,
    InvalidPrerequisiteError,
)
from competitions.domain.lifecycle import (
    apply_schedule,
    auto_promote,
    needs_status_update,
    transition,
)
from competitions.domain.models import split_prerequisites
from competitions.domain.schedule import SchedulingPolicy, validate_schedule
from competitions.stores.interfaces import EventStore, TeamStore

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]
Change = Callable[[EventRecord, datetime], EventRecord]


def _parse_event_id(value: str) -> EventId:
    try:
        return EventId.from_string(value)
    except (ValueError, TypeError, AttributeError):
        raise InvalidEventIdError() from None


def _parse_group_id(value: str) -> GroupId:
    try:
        return GroupId.from_string(value)
    except (ValueError, TypeError, AttributeError):
        raise InvalidIdentifierError("group") from None


def _parse_team_id(value: str) -> TeamId:
    try:
        return TeamId.from_string(value)
    except (ValueError, TypeError, AttributeError):
        raise InvalidIdentifierError("team") from None


def _parse_status(value: EventStatus | str) -> EventStatus:
    try:
        return EventStatus(value)
    except ValueError:
        raise InvalidInputError(f"Unknown event status: {value}") from None


class EventService:
    """Service for event lifecycle, access control and eligibility."""

    def __init__(
        self,
        store: EventStore,
        team_store: TeamStore,
        *,
        clock: Clock | None = None,
        policy: SchedulingPolicy | None = None,
        max_attempts: int | None = None,
        id_factory: Callable[[], UUID] = uuid4,
    ) -> None:
        self._store = store
        self._teams = team_store
        self._clock = clock or timezone.now
        self._policy = policy or SchedulingPolicy(
            past_grace=conf.scheduling_grace(),
            min_duration=conf.min_event_duration(),
        )
        self._max_attempts = max_attempts or conf.get_setting("MAX_WRITE_ATTEMPTS")
        self._new_id = id_factory

    # Reads

    def list_group_events(
        self,
        group_id: str,
        status: str | None = None,
        search: str | None = None,
    ) -> list[EventRecord]:
        """Return a group's events, optionally filtered by status and title."""
        statuses = [_parse_status(status)] if status else None
        return self._store.list_group_events(
            _parse_group_id(group_id), statuses=statuses, search=search
        )

    def get_event(self, event_id: str) -> EventRecord:
        """Return an event by ID.

        Raises:
            InvalidEventIdError: If the event_id is not a valid UUID.
            EventNotFoundError: If the event does not exist.
        """
        return self._require(_parse_event_id(event_id))

    def submissions_open(self, event_id: str) -> bool:
        return submissions_open(self.get_event(event_id), self._clock())

    def time_until_deadline(self, event_id: str) -> timedelta | None:
        """Time left to submit, or None when there is no deadline ahead."""
        return time_until_deadline(self.get_event(event_id), self._clock())

    def events_with_upcoming_deadlines(
        self, group_id: str, days_ahead: int = 7
    ) -> list[EventRecord]:
        """Return active events whose submission deadline falls in the next ``days_ahead`` days.

        Ordered by deadline, soonest first.

        Raises:
            InvalidInputError: If ``days_ahead`` is not positive.
        """
        if days_ahead < 1:
            raise InvalidInputError("days_ahead must be at least 1")
        now = self._clock()
        horizon = now + timedelta(days=days_ahead)
        events = self._store.list_group_events(
            _parse_group_id(group_id), statuses=(EventStatus.ACTIVE,)
        )
        upcoming = [
            event
            for event in events
            if event.submission_deadline is not None
            and now < event.submission_deadline < horizon
        ]
        return sorted(upcoming, key=lambda event: event.submission_deadline)

    # Lifecycle

    def create_event(
        self,
        group_id: str,
        *,
        title: str,
        description: str,
        event_type: EventType | str,
        created_by: str,
        judging_criteria: Mapping[str, Any] | None = None,
    ) -> EventRecord:
        """Create a draft event with no schedule, open to every team.

        Raises:
            GroupNotFoundError: If the group does not exist.
        """
        gid = _parse_group_id(group_id)
        if not self._teams.group_exists(gid):
            raise GroupNotFoundError(str(gid))
        now = self._clock()
        criteria, _ = split_prerequisites(judging_criteria)
        event = EventRecord(
            id=EventId(self._new_id()),
            group_id=gid,
            title=title.strip(),
            description=description.strip(),
            event_type=EventType(event_type),
            status=EventStatus.DRAFT,
            created_by=created_by,
            created_at=now,
            updated_at=now,
            judging_criteria=criteria,
        )
        created = self._store.create_event(event)
        logger.info("Created event %s in group %s", created.id, created.group_id)
        return created

    def update_event(
        self,
        event_id: str,
        *,
        title: str | None = None,
        description: str | None = None,
        judging_criteria: Mapping[str, Any] | None = None,
    ) -> EventRecord:
        """Edit an event's title, description or judging criteria.

        Fields left as None are unchanged. Prerequisites stay as stored and
        are only changed through ``set_prerequisites``.

        Raises:
            InvalidInputError: If the title is blank.
        """
        changes: dict[str, Any] = {}
        if title is not None:
            if not title.strip():
                raise InvalidInputError("Title cannot be empty")
            changes["title"] = title.strip()
        if description is not None:
            changes["description"] = description.strip()
        if judging_criteria is not None:
            changes["judging_criteria"], _ = split_prerequisites(judging_criteria)

        def change(current: EventRecord, now: datetime) -> EventRecord:
            if all(getattr(current, name) == value for name, value in changes.items()):
                return current
            return replace(current, updated_at=now, **changes)

        return self._mutate(_parse_event_id(event_id), change)

    def delete_event(self, event_id: str) -> None:
        """Delete a draft event.

        Raises:
            EventOperationError: If the event has left draft.
        """
        eid = _parse_event_id(event_id)
        for attempt in range(1, self._max_attempts + 1):
            current = self._require(eid)
            if current.status != EventStatus.DRAFT:
                raise EventOperationError(
                    f"Cannot delete event with status: {current.status.value}. "
                    "Only draft events can be deleted."
                )
            try:
                self._store.delete_event(eid, expected_version=current.version)
            except ConflictError:
                self._log_conflict(eid, attempt)
                continue
            logger.info("Deleted event %s", eid)
            return
        raise ConflictError(str(eid))

    def schedule_event(
        self,
        event_id: str,
        start_time: datetime,
        end_time: datetime,
        submission_deadline: datetime | None = None,
    ) -> EventRecord:
        """Give a draft event its schedule and move it to scheduled.

        Besides ordering, interactive scheduling rejects start times in the
        past and events shorter than the configured minimum.
        """
        change = self._schedule_change(start_time, end_time, submission_deadline)
        return self._mutate(_parse_event_id(event_id), change)

    def schedule_draft_event(
        self,
        event_id: str,
        start_time: datetime,
        end_time: datetime,
        submission_deadline: datetime | None = None,
    ) -> EventRecord:
        """Schedule a draft event and promote it at once if its start has passed.

        Within the scheduling grace period the start may already be behind
        ``now``; the event is then written as active in the same write.
        """
        schedule = self._schedule_change(start_time, end_time, submission_deadline)

        def change(current: EventRecord, now: datetime) -> EventRecord:
            return auto_promote(schedule(current, now), now)

        return self._mutate(_parse_event_id(event_id), change)

    def _schedule_change(
        self,
        start_time: datetime,
        end_time: datetime,
        submission_deadline: datetime | None,
    ) -> Change:
        def change(current: EventRecord, now: datetime) -> EventRecord:
            if current.status != EventStatus.DRAFT:
                raise EventOperationError(
                    f"Cannot schedule event with status: {current.status.value}. "
                    "Only draft events can be scheduled."
                )
            self._policy.check(start_time, end_time, submission_deadline, now)
            scheduled = apply_schedule(
                current, start_time, end_time, submission_deadline, now
            )
            return transition(scheduled, EventStatus.SCHEDULED, now)

        return change

    def update_schedule(
        self,
        event_id: str,
        start_time: datetime | None,
        end_time: datetime | None,
        submission_deadline: datetime | None = None,
    ) -> EventRecord:
        """Replace the schedule of a non-terminal event without changing its status."""

        def change(current: EventRecord, now: datetime) -> EventRecord:
            return apply_schedule(current, start_time, end_time, submission_deadline, now)

        return self._mutate(_parse_event_id(event_id), change)

    def transition_event(self, event_id: str, target: EventStatus | str) -> EventRecord:
        """Move an event to ``target`` through the transition table.

        Raises:
            InvalidTransitionError: If the move is not allowed.
            ScheduleInvalidError: If the target needs a schedule the event lacks.
        """
        status = _parse_status(target)

        def change(current: EventRecord, now: datetime) -> EventRecord:
            return transition(current, status, now)

        updated = self._mutate(_parse_event_id(event_id), change)
        logger.info("Event %s is now %s", updated.id, updated.status.value)
        return updated

    def events_needing_status_update(self, group_id: str) -> list[EventRecord]:
        now = self._clock()
        events = self._store.list_group_events(
            _parse_group_id(group_id),
            statuses=(EventStatus.SCHEDULED, EventStatus.ACTIVE),
        )
        return [event for event in events if needs_status_update(event, now)]

    def auto_promote_group(self, group_id: str) -> list[EventRecord]:
        """Apply time-based status recommendations to a group's events.

        Safe to run repeatedly. An event that fails to promote is logged and
        skipped so the rest of the group still moves. Only events this scan
        actually wrote are returned; one that another writer already moved
        between the scan and the write is left out.
        """
        promoted = []
        for event in self.events_needing_status_update(group_id):
            try:
                updated, written = self._apply(event.id, auto_promote)
            except DomainError:
                logger.exception("Failed to promote event %s", event.id)
                continue
            if not written:
                continue
            promoted.append(updated)
            logger.info("Promoted event %s to %s", event.id, updated.status.value)
        return promoted

    # Access control and prerequisites

    def set_access_control(
        self, event_id: str, team_ids: Sequence[str] | None
    ) -> EventRecord:
        """Restrict an event to ``team_ids``, or open it when None or empty.

        Raises:
            InvalidTeamsError: On duplicates or teams outside the event's group.
        """
        requested = [_parse_team_id(t) for t in team_ids or ()]

        def change(current: EventRecord, now: datetime) -> EventRecord:
            group_team_ids = [t.id for t in self._teams.list_group_teams(current.group_id)]
            eligible = validate_eligible_teams(requested, group_team_ids)
            return replace(current, eligible_team_ids=eligible, updated_at=now)

        return self._mutate(_parse_event_id(event_id), change)

    def set_prerequisites(self, event_id: str, prerequisite_ids: Sequence[str]) -> EventRecord:
        """Gate an event on other events of its group reaching completed.

        Raises:
            InvalidPrerequisiteError: If an id is unknown or in another group.
            CyclicPrerequisiteError: If the new list would make the graph cyclic.
        """
        requested = tuple(dict.fromkeys(_parse_event_id(p) for p in prerequisite_ids))

        def change(current: EventRecord, now: datetime) -> EventRecord:
            found = self._store.get_events(requested)
            for prereq_id in requested:
                prereq = found.get(prereq_id)
                if prereq is None:
                    raise InvalidPrerequisiteError(
                        "Prerequisite event not found", str(prereq_id)
                    )
                if prereq.group_id != current.group_id:
                    raise InvalidPrerequisiteError(
                        "Prerequisite events must be in the same group", str(prereq_id)
                    )
            find_prerequisite_cycle(current.id, requested, self._prerequisites_of)
            return replace(current, prerequisite_event_ids=requested, updated_at=now)

        return self._mutate(_parse_event_id(event_id), change)

    # Eligibility

    def check_eligibility(self, event_id: str, team_id: str) -> EligibilityDecision:
        """Decide whether a team may view or submit to an event.

        Raises:
            CyclicPrerequisiteError: If stored prerequisites form a cycle.
        """
        event = self.get_event(event_id)
        tid = _parse_team_id(team_id)
        find_prerequisite_cycle(event.id, event.prerequisite_event_ids, self._prerequisites_of)
        found = self._store.get_events(event.prerequisite_event_ids)
        statuses = {eid: prereq.status for eid, prereq in found.items()}
        return resolve_eligibility(event, tid, statuses)

    def eligible_team_ids(self, event_id: str) -> list[TeamId]:
        """Return the teams that pass membership: every group team for open events."""
        event = self.get_event(event_id)
        if event.is_open:
            return [team.id for team in self._teams.list_group_teams(event.group_id)]
        return list(event.eligible_team_ids)

    def accessible_events_for_team(self, group_id: str, team_id: str) -> list[EventRecord]:
        """Return the group's events the team is eligible for.

        Prerequisites always point inside the group, so the group listing
        supplies every status the resolver needs.
        """
        tid = _parse_team_id(team_id)
        events = self._store.list_group_events(_parse_group_id(group_id))
        statuses = {event.id: event.status for event in events}
        return [event for event in events if resolve_eligibility(event, tid, statuses)]

    # Cloning

    def clone_event(
        self,
        event_id: str,
        *,
        created_by: str,
        title: str | None = None,
        description: str | None = None,
        preserve_schedule: bool = False,
        preserve_access_control: bool = True,
    ) -> EventRecord:
        """Create a draft copy of an event. Prerequisites are never copied."""
        source = self.get_event(event_id)
        clone = clone_event(
            source,
            new_id=EventId(self._new_id()),
            created_by=created_by,
            now=self._clock(),
            title=title.strip() if title else None,
            description=description.strip() if description else None,
            preserve_schedule=preserve_schedule,
            preserve_access_control=preserve_access_control,
        )
        validate_schedule(clone.start_time, clone.end_time, clone.submission_deadline)
        if clone.eligible_team_ids:
            group_team_ids = [t.id for t in self._teams.list_group_teams(clone.group_id)]
            validate_eligible_teams(clone.eligible_team_ids, group_team_ids)
        created = self._store.create_event(clone)
        logger.info("Cloned event %s into %s", source.id, created.id)
        return created

    # Internals

    def _require(self, event_id: EventId) -> EventRecord:
        event = self._store.get_event(event_id)
        if event is None:
            raise EventNotFoundError(str(event_id))
        return event

    def _prerequisites_of(self, event_id: EventId) -> Sequence[EventId]:
        event = self._store.get_event(event_id)
        return event.prerequisite_event_ids if event is not None else ()

    def _mutate(self, event_id: EventId, change: Change) -> EventRecord:
        return self._apply(event_id, change)[0]

    def _apply(self, event_id: EventId, change: Change) -> tuple[EventRecord, bool]:
        """Run ``change`` against the stored event and write the result.

        Returns the resulting record and whether it was written; a change
        that returns the record it was given writes nothing.
        """
        for attempt in range(1, self._max_attempts + 1):
            current = self._require(event_id)
            updated = change(current, self._clock())
            if updated is current:
                return current, False
            try:
                saved = self._store.update_event(updated, expected_version=current.version)
            except ConflictError:
                self._log_conflict(event_id, attempt)
                continue
            return saved, True
        raise ConflictError(str(event_id))

    def _log_conflict(self, event_id: EventId, attempt: int) -> None:
        logger.warning(
            "Write conflict on event %s (attempt %d of %d)",
            event_id,
            attempt,
            self._max_attempts,
        )
