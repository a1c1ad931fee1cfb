"""HTTP handlers (views) - handle HTTP concerns only.

Handlers:
- Parse requests and validate input format
- Call services for business logic
- Map domain errors to HTTP responses
- Never contain business logic
- Never expose internal error details
"""

from django.core.cache import cache
from rest_framework import status
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from competitions import conf
from competitions.cache import group_events_key
from competitions.domain import GroupId
from competitions.domain.errors import DomainError, ErrorCode, InvalidIdentifierError
from competitions.handlers.serializers import (
    AccessInputSerializer,
    CloneInputSerializer,
    CreateEventInputSerializer,
    DeadlinesQuerySerializer,
    EligibilitySerializer,
    EventSerializer,
    PrerequisitesInputSerializer,
    ScheduleInputSerializer,
    ScheduleUpdateInputSerializer,
    SubmissionWindowSerializer,
    TransitionInputSerializer,
    UpdateEventInputSerializer,
)
from competitions.services import get_event_service

HTTP_STATUS_BY_CODE = {
    ErrorCode.EVENT_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.GROUP_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.INVALID_EVENT_ID: status.HTTP_400_BAD_REQUEST,
    ErrorCode.INVALID_IDENTIFIER: status.HTTP_400_BAD_REQUEST,
    ErrorCode.INVALID_INPUT: status.HTTP_400_BAD_REQUEST,
    ErrorCode.SCHEDULE_INVALID: status.HTTP_400_BAD_REQUEST,
    ErrorCode.INVALID_TEAMS: status.HTTP_400_BAD_REQUEST,
    ErrorCode.INVALID_PREREQUISITE: status.HTTP_400_BAD_REQUEST,
    ErrorCode.CYCLIC_PREREQUISITE: status.HTTP_400_BAD_REQUEST,
    ErrorCode.INVALID_TRANSITION: status.HTTP_409_CONFLICT,
    ErrorCode.EVENT_OPERATION: status.HTTP_409_CONFLICT,
    ErrorCode.CONFLICT: status.HTTP_409_CONFLICT,
}


def error_response(error: DomainError) -> Response:
    return Response(
        {"code": error.code.value, "message": error.message},
        status=HTTP_STATUS_BY_CODE[error.code],
    )


class DomainAPIView(APIView):
    """APIView that renders domain errors as {code, message} responses."""

    def handle_exception(self, exc):
        if isinstance(exc, DomainError):
            return error_response(exc)
        return super().handle_exception(exc)


class GroupEventListView(DomainAPIView):
    """Handler for GET/POST /api/groups/{group_id}/events"""

    def get(self, request: Request, group_id: str) -> Response:
        status_filter = request.query_params.get("status")
        search = request.query_params.get("search")
        if status_filter or search:
            events = get_event_service().list_group_events(group_id, status_filter, search)
            return Response(EventSerializer(events, many=True).data)

        try:
            key = group_events_key(str(GroupId.from_string(group_id)))
        except ValueError:
            raise InvalidIdentifierError("group") from None
        data = cache.get(key)
        if data is None:
            events = get_event_service().list_group_events(group_id)
            data = EventSerializer(events, many=True).data
            cache.set(key, data, conf.get_setting("EVENT_LIST_CACHE_TIMEOUT"))
        return Response(data)

    def post(self, request: Request, group_id: str) -> Response:
        serializer = CreateEventInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        event = get_event_service().create_event(group_id, **serializer.validated_data)
        return Response(EventSerializer(event).data, status=status.HTTP_201_CREATED)


class GroupDeadlinesView(DomainAPIView):
    """Handler for GET /api/groups/{group_id}/deadlines"""

    def get(self, request: Request, group_id: str) -> Response:
        serializer = DeadlinesQuerySerializer(data=request.query_params)
        serializer.is_valid(raise_exception=True)
        events = get_event_service().events_with_upcoming_deadlines(
            group_id, serializer.validated_data["days"]
        )
        return Response(EventSerializer(events, many=True).data)


class TeamAccessibleEventsView(DomainAPIView):
    """Handler for GET /api/groups/{group_id}/teams/{team_id}/events"""

    def get(self, request: Request, group_id: str, team_id: str) -> Response:
        events = get_event_service().accessible_events_for_team(group_id, team_id)
        return Response(EventSerializer(events, many=True).data)


class EventDetailView(DomainAPIView):
    """Handler for GET/PATCH/DELETE /api/events/{event_id}"""

    def get(self, request: Request, event_id: str) -> Response:
        event = get_event_service().get_event(event_id)
        return Response(EventSerializer(event).data)

    def patch(self, request: Request, event_id: str) -> Response:
        serializer = UpdateEventInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        event = get_event_service().update_event(event_id, **serializer.validated_data)
        return Response(EventSerializer(event).data)

    def delete(self, request: Request, event_id: str) -> Response:
        get_event_service().delete_event(event_id)
        return Response(status=status.HTTP_204_NO_CONTENT)


class EventScheduleView(DomainAPIView):
    """Handler for POST/PUT /api/events/{event_id}/schedule

    POST schedules a draft (``promote`` also activates it when its start has
    passed); PUT retimes an event without changing its status.
    """

    def post(self, request: Request, event_id: str) -> Response:
        serializer = ScheduleInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        service = get_event_service()
        schedule = service.schedule_draft_event if data["promote"] else service.schedule_event
        event = schedule(
            event_id,
            data["start_time"],
            data["end_time"],
            data.get("submission_deadline"),
        )
        return Response(EventSerializer(event).data)

    def put(self, request: Request, event_id: str) -> Response:
        serializer = ScheduleUpdateInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        event = get_event_service().update_schedule(
            event_id,
            data["start_time"],
            data["end_time"],
            data.get("submission_deadline"),
        )
        return Response(EventSerializer(event).data)


class EventSubmissionWindowView(DomainAPIView):
    """Handler for GET /api/events/{event_id}/submissions"""

    def get(self, request: Request, event_id: str) -> Response:
        service = get_event_service()
        window = {
            "open": service.submissions_open(event_id),
            "time_until_deadline": service.time_until_deadline(event_id),
        }
        return Response(SubmissionWindowSerializer(window).data)


class EventEligibleTeamsView(DomainAPIView):
    """Handler for GET /api/events/{event_id}/eligible-teams"""

    def get(self, request: Request, event_id: str) -> Response:
        team_ids = get_event_service().eligible_team_ids(event_id)
        return Response({"eligible_team_ids": [str(team_id) for team_id in team_ids]})


class EventTransitionView(DomainAPIView):
    """Handler for POST /api/events/{event_id}/transition"""

    def post(self, request: Request, event_id: str) -> Response:
        serializer = TransitionInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        event = get_event_service().transition_event(
            event_id, serializer.validated_data["status"]
        )
        return Response(EventSerializer(event).data)


class EventAccessView(DomainAPIView):
    """Handler for PUT /api/events/{event_id}/access"""

    def put(self, request: Request, event_id: str) -> Response:
        serializer = AccessInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        event = get_event_service().set_access_control(
            event_id, serializer.validated_data["eligible_team_ids"]
        )
        return Response(EventSerializer(event).data)


class EventPrerequisitesView(DomainAPIView):
    """Handler for PUT /api/events/{event_id}/prerequisites"""

    def put(self, request: Request, event_id: str) -> Response:
        serializer = PrerequisitesInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        event = get_event_service().set_prerequisites(
            event_id, serializer.validated_data["prerequisite_event_ids"]
        )
        return Response(EventSerializer(event).data)


class EventEligibilityView(DomainAPIView):
    """Handler for GET /api/events/{event_id}/eligibility/{team_id}"""

    def get(self, request: Request, event_id: str, team_id: str) -> Response:
        decision = get_event_service().check_eligibility(event_id, team_id)
        return Response(EligibilitySerializer(decision).data)


class EventCloneView(DomainAPIView):
    """Handler for POST /api/events/{event_id}/clone"""

    def post(self, request: Request, event_id: str) -> Response:
        serializer = CloneInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        event = get_event_service().clone_event(event_id, **serializer.validated_data)
        return Response(EventSerializer(event).data, status=status.HTTP_201_CREATED)


class GroupAutoPromoteView(DomainAPIView):
    """Handler for POST /api/groups/{group_id}/auto-promote"""

    def post(self, request: Request, group_id: str) -> Response:
        promoted = get_event_service().auto_promote_group(group_id)
        return Response({"promoted": EventSerializer(promoted, many=True).data})
