"""Time-ordering checks for an event's start, end and submission deadline."""

from dataclasses import dataclass
from datetime import datetime, timedelta

from competitions.domain.errors import ScheduleInvalidError


def schedule_error(
    start_time: datetime | None,
    end_time: datetime | None,
    submission_deadline: datetime | None,
) -> str | None:
    """Return the first ordering problem with a schedule, or None when it is valid.

    Past times are accepted so backfilled records validate.
    """
    if start_time is not None and end_time is not None and end_time <= start_time:
        return "End time must be after start time"
    if submission_deadline is not None:
        if start_time is not None and submission_deadline < start_time:
            return "Submission deadline must be after start time"
        if end_time is not None and submission_deadline > end_time:
            return "Submission deadline must be before end time"
    return None


def validate_schedule(
    start_time: datetime | None,
    end_time: datetime | None,
    submission_deadline: datetime | None,
) -> None:
    """Raise ScheduleInvalidError if the schedule is out of order."""
    reason = schedule_error(start_time, end_time, submission_deadline)
    if reason is not None:
        raise ScheduleInvalidError(reason)


@dataclass(frozen=True)
class SchedulingPolicy:
    """Extra rules applied when an operator schedules an event interactively."""

    past_grace: timedelta = timedelta(minutes=5)
    min_duration: timedelta = timedelta(hours=1)

    def check(
        self,
        start_time: datetime,
        end_time: datetime,
        submission_deadline: datetime | None,
        now: datetime,
    ) -> None:
        validate_schedule(start_time, end_time, submission_deadline)
        if end_time - start_time < self.min_duration:
            minutes = int(self.min_duration.total_seconds() // 60)
            raise ScheduleInvalidError(f"Events must be at least {minutes} minutes long")
        if start_time < now - self.past_grace:
            raise ScheduleInvalidError("Cannot schedule events in the past")
