"""Django ORM models (persistence layer).

These models handle database concerns. Domain logic lives in domain/.
"""

import uuid

from django.db import models

from competitions.domain.models import EventStatus, EventType


class Group(models.Model):
    """Persistence model for the organizational group owning teams and events."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=255)
    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self) -> str:
        return self.name


class Team(models.Model):
    """Persistence model for teams."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    group = models.ForeignKey(Group, on_delete=models.CASCADE, related_name="teams")
    name = models.CharField(max_length=255)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["name"]
        indexes = [
            models.Index(fields=["group", "name"], name="team_group_name_idx"),
        ]

    def __str__(self) -> str:
        return self.name


class Event(models.Model):
    """Persistence model for events.

    Prerequisites live under the reserved "prerequisites" key of
    ``judging_criteria``. ``version`` is bumped on every conditional update.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    group = models.ForeignKey(Group, on_delete=models.CASCADE, related_name="events")
    title = models.CharField(max_length=200)
    description = models.TextField(blank=True)
    event_type = models.CharField(
        max_length=20, choices=[(t.value, t.name.title()) for t in EventType]
    )
    status = models.CharField(
        max_length=20,
        choices=[(s.value, s.name.title()) for s in EventStatus],
        default=EventStatus.DRAFT.value,
    )
    start_time = models.DateTimeField(blank=True, null=True)
    end_time = models.DateTimeField(blank=True, null=True)
    submission_deadline = models.DateTimeField(blank=True, null=True)
    eligible_team_ids = models.JSONField(blank=True, null=True)
    judging_criteria = models.JSONField(default=dict, blank=True)
    created_by = models.CharField(max_length=255)
    created_at = models.DateTimeField()
    updated_at = models.DateTimeField()
    version = models.PositiveIntegerField(default=0)

    class Meta:
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["group", "status"], name="event_group_status_idx"),
            models.Index(fields=["group", "-created_at"], name="event_group_created_idx"),
        ]

    def __str__(self) -> str:
        return self.title
