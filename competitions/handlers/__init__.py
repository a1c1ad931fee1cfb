from competitions.handlers.views import (
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

__all__ = [
    "EventAccessView",
    "EventCloneView",
    "EventDetailView",
    "EventEligibilityView",
    "EventEligibleTeamsView",
    "EventPrerequisitesView",
    "EventScheduleView",
    "EventSubmissionWindowView",
    "EventTransitionView",
    "GroupAutoPromoteView",
    "GroupDeadlinesView",
    "GroupEventListView",
    "TeamAccessibleEventsView",
]
