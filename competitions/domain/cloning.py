"""Build a new draft event from an existing one."""

from dataclasses import replace
from datetime import datetime

from competitions.domain.models import PREREQUISITES_KEY, EventRecord, EventStatus
from competitions.domain.value_objects import EventId


def clone_event(
    source: EventRecord,
    *,
    new_id: EventId,
    created_by: str,
    now: datetime,
    title: str | None = None,
    description: str | None = None,
    preserve_schedule: bool = False,
    preserve_access_control: bool = True,
) -> EventRecord:
    """Return an unsaved draft copy of ``source``.

    Event type and judging criteria are copied. Prerequisites never are, so a
    clone starts ungated. The schedule and the eligible teams are copied only
    when asked for; otherwise the clone has no times and is open to all teams.
    """
    return replace(
        source,
        id=new_id,
        title=title if title is not None else f"{source.title} (Copy)",
        description=description if description is not None else source.description,
        status=EventStatus.DRAFT,
        created_by=created_by,
        created_at=now,
        updated_at=now,
        start_time=source.start_time if preserve_schedule else None,
        end_time=source.end_time if preserve_schedule else None,
        submission_deadline=source.submission_deadline if preserve_schedule else None,
        eligible_team_ids=source.eligible_team_ids if preserve_access_control else None,
        prerequisite_event_ids=(),
        judging_criteria={
            k: v for k, v in source.judging_criteria.items() if k != PREREQUISITES_KEY
        },
        version=0,
    )
