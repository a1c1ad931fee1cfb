"""Serializers for request input and for rendering domain models."""

from rest_framework import serializers

from competitions.domain import EventStatus, EventType


class EventSerializer(serializers.Serializer):
    """Serializer for the EventRecord domain model."""

    id = serializers.CharField()
    group_id = serializers.CharField()
    title = serializers.CharField()
    description = serializers.CharField()
    event_type = serializers.CharField(source="event_type.value")
    status = serializers.CharField(source="status.value")
    start_time = serializers.DateTimeField(allow_null=True)
    end_time = serializers.DateTimeField(allow_null=True)
    submission_deadline = serializers.DateTimeField(allow_null=True)
    eligible_team_ids = serializers.SerializerMethodField()
    prerequisite_event_ids = serializers.SerializerMethodField()
    judging_criteria = serializers.DictField()
    created_by = serializers.CharField()
    created_at = serializers.DateTimeField()
    updated_at = serializers.DateTimeField()
    version = serializers.IntegerField()

    def get_eligible_team_ids(self, event) -> list[str] | None:
        if event.is_open:
            return None
        return [str(team_id) for team_id in event.eligible_team_ids]

    def get_prerequisite_event_ids(self, event) -> list[str]:
        return [str(event_id) for event_id in event.prerequisite_event_ids]


class EligibilitySerializer(serializers.Serializer):
    """Serializer for an EligibilityDecision."""

    eligible = serializers.BooleanField()
    reason = serializers.SerializerMethodField()
    missing_prerequisite_ids = serializers.SerializerMethodField()

    def get_reason(self, decision) -> str | None:
        return decision.reason.value if decision.reason is not None else None

    def get_missing_prerequisite_ids(self, decision) -> list[str]:
        return [str(event_id) for event_id in decision.missing_prerequisite_ids]


class CreateEventInputSerializer(serializers.Serializer):
    title = serializers.CharField(max_length=200)
    description = serializers.CharField(allow_blank=True, max_length=2000)
    event_type = serializers.ChoiceField(choices=[t.value for t in EventType])
    created_by = serializers.CharField()
    judging_criteria = serializers.DictField(required=False)


class UpdateEventInputSerializer(serializers.Serializer):
    title = serializers.CharField(required=False, max_length=200)
    description = serializers.CharField(required=False, allow_blank=True, max_length=2000)
    judging_criteria = serializers.DictField(required=False)


class ScheduleInputSerializer(serializers.Serializer):
    start_time = serializers.DateTimeField()
    end_time = serializers.DateTimeField()
    submission_deadline = serializers.DateTimeField(required=False, allow_null=True)
    promote = serializers.BooleanField(default=False)


class ScheduleUpdateInputSerializer(serializers.Serializer):
    start_time = serializers.DateTimeField(allow_null=True)
    end_time = serializers.DateTimeField(allow_null=True)
    submission_deadline = serializers.DateTimeField(required=False, allow_null=True)


class TransitionInputSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=[s.value for s in EventStatus])


class AccessInputSerializer(serializers.Serializer):
    eligible_team_ids = serializers.ListField(
        child=serializers.CharField(), allow_null=True, allow_empty=True
    )


class PrerequisitesInputSerializer(serializers.Serializer):
    prerequisite_event_ids = serializers.ListField(
        child=serializers.CharField(), allow_empty=True
    )


class CloneInputSerializer(serializers.Serializer):
    created_by = serializers.CharField()
    title = serializers.CharField(required=False, max_length=200)
    description = serializers.CharField(required=False, allow_blank=True)
    preserve_schedule = serializers.BooleanField(default=False)
    preserve_access_control = serializers.BooleanField(default=True)


class DeadlinesQuerySerializer(serializers.Serializer):
    days = serializers.IntegerField(min_value=1, max_value=365, default=7)


class SubmissionWindowSerializer(serializers.Serializer):
    """Serializer for whether an event takes submissions and for how long."""

    open = serializers.BooleanField()
    time_until_deadline = serializers.DurationField(allow_null=True)
