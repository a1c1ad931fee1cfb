"""Unit tests for the event status state machine and auto-promotion.

Run with: pytest tests/test_lifecycle.py -v
"""

from datetime import datetime, timedelta, timezone
from itertools import product

import pytest

from competitions.domain import EventStatus
from competitions.domain.errors import (
    EventOperationError,
    InvalidTransitionError,
    ScheduleInvalidError,
)
from competitions.domain.lifecycle import (
    VALID_TRANSITIONS,
    allowed_transitions,
    apply_schedule,
    auto_promote,
    can_transition,
    determine_appropriate_status,
    needs_status_update,
    transition,
)

START = datetime(2025, 3, 1, 10, 0, tzinfo=timezone.utc)
END = datetime(2025, 3, 1, 12, 0, tzinfo=timezone.utc)
DEADLINE = datetime(2025, 3, 1, 11, 30, tzinfo=timezone.utc)

ALLOWED = {
    (EventStatus.DRAFT, EventStatus.SCHEDULED),
    (EventStatus.DRAFT, EventStatus.CANCELLED),
    (EventStatus.SCHEDULED, EventStatus.ACTIVE),
    (EventStatus.SCHEDULED, EventStatus.CANCELLED),
    (EventStatus.ACTIVE, EventStatus.COMPLETED),
    (EventStatus.ACTIVE, EventStatus.CANCELLED),
}
REJECTED = [
    pair
    for pair in product(EventStatus, EventStatus)
    if pair not in ALLOWED and pair[0] != pair[1]
]


@pytest.fixture
def scheduled_event(make_event):
    return make_event(
        status=EventStatus.SCHEDULED,
        start_time=START,
        end_time=END,
        submission_deadline=DEADLINE,
    )


class TestTransitionTable:
    """Tests for the allowed status pairs."""

    def test_table_matches_lifecycle(self):
        table = {(src, dst) for src, targets in VALID_TRANSITIONS.items() for dst in targets}
        assert table == ALLOWED

    @pytest.mark.parametrize("current,target", REJECTED)
    def test_unlisted_pairs_are_rejected(self, make_event, current, target):
        """Every pair outside the table raises InvalidTransitionError."""
        event = make_event(status=current, start_time=START, end_time=END)
        assert not can_transition(current, target)
        with pytest.raises(InvalidTransitionError):
            transition(event, target, END)

    def test_completed_cannot_be_cancelled(self, make_event):
        event = make_event(status=EventStatus.COMPLETED, start_time=START, end_time=END)
        with pytest.raises(InvalidTransitionError) as excinfo:
            transition(event, EventStatus.CANCELLED, END)
        assert excinfo.value.current == "completed"
        assert excinfo.value.target == "cancelled"

    def test_terminal_statuses_allow_nothing(self):
        assert allowed_transitions(EventStatus.COMPLETED) == frozenset()
        assert allowed_transitions(EventStatus.CANCELLED) == frozenset()


class TestTransition:
    """Tests for executing status changes."""

    def test_same_status_is_a_no_op(self, scheduled_event):
        assert transition(scheduled_event, EventStatus.SCHEDULED, END) is scheduled_event

    def test_draft_to_scheduled_requires_times(self, make_event):
        with pytest.raises(ScheduleInvalidError):
            transition(make_event(start_time=START), EventStatus.SCHEDULED, START)

    def test_draft_to_scheduled_validates_order(self, make_event):
        event = make_event(start_time=START, end_time=END, submission_deadline=END + timedelta(hours=1))
        with pytest.raises(ScheduleInvalidError, match="deadline"):
            transition(event, EventStatus.SCHEDULED, START)

    def test_draft_to_scheduled(self, make_event):
        event = make_event(start_time=START, end_time=END)
        now = START - timedelta(days=1)
        scheduled = transition(event, EventStatus.SCHEDULED, now)
        assert scheduled.status is EventStatus.SCHEDULED
        assert scheduled.updated_at == now
        assert event.status is EventStatus.DRAFT

    def test_manual_early_activation(self, scheduled_event):
        """An operator may activate before the start time."""
        activated = transition(scheduled_event, EventStatus.ACTIVE, START - timedelta(hours=5))
        assert activated.status is EventStatus.ACTIVE

    @pytest.mark.parametrize(
        "status", [EventStatus.DRAFT, EventStatus.SCHEDULED, EventStatus.ACTIVE]
    )
    def test_cancel_from_open_statuses(self, make_event, status):
        event = make_event(status=status, start_time=START, end_time=END)
        assert transition(event, EventStatus.CANCELLED, START).status is EventStatus.CANCELLED

    def test_cancel_draft_without_schedule(self, make_event):
        assert transition(make_event(), EventStatus.CANCELLED, START).status is EventStatus.CANCELLED


class TestDetermineAppropriateStatus:
    """Tests for the time-based status recommendation."""

    def test_draft_stays_draft(self, make_event):
        event = make_event(start_time=START, end_time=END)
        assert determine_appropriate_status(event, END + timedelta(days=1)) is EventStatus.DRAFT

    def test_scheduled_before_start(self, scheduled_event):
        assert (
            determine_appropriate_status(scheduled_event, START - timedelta(minutes=1))
            is EventStatus.SCHEDULED
        )

    def test_scheduled_at_start_becomes_active(self, scheduled_event):
        assert determine_appropriate_status(scheduled_event, START) is EventStatus.ACTIVE

    def test_scheduled_at_end_becomes_completed(self, scheduled_event):
        assert determine_appropriate_status(scheduled_event, END) is EventStatus.COMPLETED

    def test_active_inside_window_unchanged(self, scheduled_event):
        active = transition(scheduled_event, EventStatus.ACTIVE, START)
        assert determine_appropriate_status(active, DEADLINE) is EventStatus.ACTIVE

    @pytest.mark.parametrize("status", [EventStatus.COMPLETED, EventStatus.CANCELLED])
    def test_terminal_unchanged(self, make_event, status):
        event = make_event(status=status, start_time=START, end_time=END)
        assert determine_appropriate_status(event, END + timedelta(days=30)) is status

    def test_active_without_end_unchanged(self, make_event):
        event = make_event(status=EventStatus.ACTIVE, start_time=START)
        assert determine_appropriate_status(event, END + timedelta(days=30)) is EventStatus.ACTIVE

    @pytest.mark.parametrize(
        "now",
        [START - timedelta(hours=1), START, DEADLINE, END, END + timedelta(days=1)],
    )
    def test_recommendation_is_stable(self, scheduled_event, now):
        """Same inputs give the same answer, and applying it leaves nothing to do."""
        first = determine_appropriate_status(scheduled_event, now)
        assert determine_appropriate_status(scheduled_event, now) is first

        promoted = auto_promote(scheduled_event, now)
        assert promoted.status is first
        assert determine_appropriate_status(promoted, now) is promoted.status
        assert not needs_status_update(promoted, now)

    def test_march_first_scenario(self, scheduled_event):
        """Scheduled 10:00-12:00 goes active at 10:05 and completes at 12:01."""
        at_1005 = START + timedelta(minutes=5)
        assert determine_appropriate_status(scheduled_event, at_1005) is EventStatus.ACTIVE

        active = transition(scheduled_event, EventStatus.ACTIVE, at_1005)
        assert active.status is EventStatus.ACTIVE
        assert (active.start_time, active.end_time, active.submission_deadline) == (
            START,
            END,
            DEADLINE,
        )

        at_1201 = END + timedelta(minutes=1)
        assert determine_appropriate_status(active, at_1201) is EventStatus.COMPLETED


class TestAutoPromote:
    """Tests for applying recommendations through the table."""

    def test_nothing_to_do_returns_same_event(self, scheduled_event):
        assert auto_promote(scheduled_event, START - timedelta(hours=1)) is scheduled_event

    def test_ended_scheduled_event_passes_through_active(self, scheduled_event):
        completed = auto_promote(scheduled_event, END + timedelta(hours=1))
        assert completed.status is EventStatus.COMPLETED


class TestApplySchedule:
    """Tests for changing an event's times."""

    def test_draft_may_carry_partial_schedule(self, make_event):
        updated = apply_schedule(make_event(), START, None, None, START)
        assert updated.start_time == START
        assert updated.status is EventStatus.DRAFT

    def test_scheduled_event_must_keep_both_times(self, scheduled_event):
        with pytest.raises(ScheduleInvalidError):
            apply_schedule(scheduled_event, START, None, None, START)

    def test_reschedule_active_event(self, scheduled_event):
        active = transition(scheduled_event, EventStatus.ACTIVE, START)
        later = END + timedelta(hours=2)
        updated = apply_schedule(active, START, later, None, START)
        assert updated.end_time == later
        assert updated.submission_deadline is None

    @pytest.mark.parametrize("status", [EventStatus.COMPLETED, EventStatus.CANCELLED])
    def test_terminal_events_are_frozen(self, make_event, status):
        event = make_event(status=status, start_time=START, end_time=END)
        with pytest.raises(EventOperationError):
            apply_schedule(event, START, END + timedelta(hours=1), None, END)

    def test_rejects_bad_order(self, make_event):
        with pytest.raises(ScheduleInvalidError):
            apply_schedule(make_event(), END, START, None, START)
