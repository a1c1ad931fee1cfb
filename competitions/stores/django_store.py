"""Django ORM implementation of the EventStore and TeamStore."""

from collections.abc import Iterable

from django.db import transaction

from competitions import models
from competitions.domain import (
    EventId,
    EventRecord,
    EventStatus,
    EventType,
    GroupId,
    Team,
    TeamId,
)
from competitions.domain.errors import ConflictError, EventNotFoundError
from competitions.domain.models import merge_prerequisites, split_prerequisites
from competitions.stores.interfaces import EventStore, TeamStore


def _to_domain(row: models.Event) -> EventRecord:
    criteria, prerequisite_ids = split_prerequisites(row.judging_criteria)
    team_ids = row.eligible_team_ids or []
    return EventRecord(
        id=EventId(row.id),
        group_id=GroupId(row.group_id),
        title=row.title,
        description=row.description,
        event_type=EventType(row.event_type),
        status=EventStatus(row.status),
        created_by=row.created_by,
        created_at=row.created_at,
        updated_at=row.updated_at,
        start_time=row.start_time,
        end_time=row.end_time,
        submission_deadline=row.submission_deadline,
        eligible_team_ids=tuple(TeamId.from_string(t) for t in team_ids) or None,
        prerequisite_event_ids=prerequisite_ids,
        judging_criteria=criteria,
        version=row.version,
    )


def _row_fields(event: EventRecord) -> dict:
    team_ids = event.eligible_team_ids
    return {
        "title": event.title,
        "description": event.description,
        "event_type": event.event_type.value,
        "status": event.status.value,
        "start_time": event.start_time,
        "end_time": event.end_time,
        "submission_deadline": event.submission_deadline,
        "eligible_team_ids": [str(t) for t in team_ids] if team_ids else None,
        "judging_criteria": merge_prerequisites(
            event.judging_criteria, event.prerequisite_event_ids
        ),
        "created_by": event.created_by,
        "created_at": event.created_at,
        "updated_at": event.updated_at,
    }


class DjangoEventStore(EventStore):
    """PostgreSQL-backed event store using Django ORM."""

    def create_event(self, event: EventRecord) -> EventRecord:
        row = models.Event.objects.create(
            id=event.id.value,
            group_id=event.group_id.value,
            version=event.version,
            **_row_fields(event),
        )
        return _to_domain(row)

    def get_event(self, event_id: EventId) -> EventRecord | None:
        row = models.Event.objects.filter(pk=event_id.value).first()
        return _to_domain(row) if row is not None else None

    def get_events(self, event_ids: Iterable[EventId]) -> dict[EventId, EventRecord]:
        rows = models.Event.objects.filter(pk__in=[e.value for e in event_ids])
        return {EventId(row.id): _to_domain(row) for row in rows}

    def list_group_events(
        self,
        group_id: GroupId,
        statuses: Iterable[EventStatus] | None = None,
        search: str | None = None,
    ) -> list[EventRecord]:
        queryset = models.Event.objects.filter(group_id=group_id.value)
        if statuses is not None:
            queryset = queryset.filter(status__in=[s.value for s in statuses])
        if search:
            queryset = queryset.filter(title__icontains=search.strip())
        return [_to_domain(row) for row in queryset.order_by("-created_at")]

    def update_event(self, event: EventRecord, expected_version: int) -> EventRecord:
        # Row save (not QuerySet.update) so post_save receivers still fire.
        with transaction.atomic():
            row = (
                models.Event.objects.select_for_update()
                .filter(pk=event.id.value)
                .first()
            )
            if row is None:
                raise EventNotFoundError(str(event.id))
            if row.version != expected_version:
                raise ConflictError(str(event.id))
            for name, value in _row_fields(event).items():
                setattr(row, name, value)
            row.version = expected_version + 1
            row.save()
        return _to_domain(row)

    def delete_event(self, event_id: EventId, expected_version: int) -> None:
        with transaction.atomic():
            row = (
                models.Event.objects.select_for_update()
                .filter(pk=event_id.value)
                .first()
            )
            if row is None:
                raise EventNotFoundError(str(event_id))
            if row.version != expected_version:
                raise ConflictError(str(event_id))
            row.delete()


class DjangoTeamStore(TeamStore):
    """Team lookups backed by the Django ORM."""

    def list_group_teams(self, group_id: GroupId) -> list[Team]:
        rows = models.Team.objects.filter(group_id=group_id.value).order_by("name")
        return [
            Team(id=TeamId(row.id), group_id=GroupId(row.group_id), name=row.name)
            for row in rows
        ]

    def group_exists(self, group_id: GroupId) -> bool:
        return models.Group.objects.filter(pk=group_id.value).exists()
