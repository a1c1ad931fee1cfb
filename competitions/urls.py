from django.urls import path

from competitions.handlers import (
    EventAccessView,
    EventCloneView,
    EventDetailView,
    EventEligibilityView,
    EventEligibleTeamsView,
    EventPrerequisitesView,
    EventScheduleView,
    EventSubmissionWindowView,
    EventTransitionView,
    GroupAutoPromoteView,
    GroupDeadlinesView,
    GroupEventListView,
    TeamAccessibleEventsView,
)

urlpatterns = [
    path(
        "groups/<str:group_id>/events",
        GroupEventListView.as_view(),
        name="group-event-list",
    ),
    path(
        "groups/<str:group_id>/deadlines",
        GroupDeadlinesView.as_view(),
        name="group-deadlines",
    ),
    path(
        "groups/<str:group_id>/teams/<str:team_id>/events",
        TeamAccessibleEventsView.as_view(),
        name="team-accessible-events",
    ),
    path(
        "groups/<str:group_id>/auto-promote",
        GroupAutoPromoteView.as_view(),
        name="group-auto-promote",
    ),
    path("events/<str:event_id>", EventDetailView.as_view(), name="event-detail"),
    path(
        "events/<str:event_id>/schedule",
        EventScheduleView.as_view(),
        name="event-schedule",
    ),
    path(
        "events/<str:event_id>/transition",
        EventTransitionView.as_view(),
        name="event-transition",
    ),
    path(
        "events/<str:event_id>/submissions",
        EventSubmissionWindowView.as_view(),
        name="event-submissions",
    ),
    path("events/<str:event_id>/access", EventAccessView.as_view(), name="event-access"),
    path(
        "events/<str:event_id>/eligible-teams",
        EventEligibleTeamsView.as_view(),
        name="event-eligible-teams",
    ),
    path(
        "events/<str:event_id>/prerequisites",
        EventPrerequisitesView.as_view(),
        name="event-prerequisites",
    ),
    path(
        "events/<str:event_id>/eligibility/<str:team_id>",
        EventEligibilityView.as_view(),
        name="event-eligibility",
    ),
    path("events/<str:event_id>/clone", EventCloneView.as_view(), name="event-clone"),
]
