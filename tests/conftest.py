"""Pytest configuration and shared fixtures."""

from collections.abc import Callable, Iterable
from dataclasses import replace
from datetime import datetime, timezone
from uuid import UUID, uuid4

import pytest
from rest_framework.test import APIClient

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
from competitions.domain.schedule import SchedulingPolicy
from competitions.services.event_service import EventService
from competitions.stores.interfaces import EventStore, TeamStore

GROUP_ID = GroupId(UUID("11111111-1111-4111-8111-111111111111"))
OTHER_GROUP_ID = GroupId(UUID("22222222-2222-4222-8222-222222222222"))
TEAM_1 = TeamId(UUID("aaaaaaaa-0000-4000-8000-000000000001"))
TEAM_2 = TeamId(UUID("aaaaaaaa-0000-4000-8000-000000000002"))
FOREIGN_TEAM = TeamId(UUID("bbbbbbbb-0000-4000-8000-000000000001"))

NOW = datetime(2025, 3, 1, 9, 0, tzinfo=timezone.utc)


class InMemoryEventStore(EventStore):
    """Dict-backed EventStore honoring the version precondition.

    ``interleave`` queues changes that another writer applies just before the
    next conditional write, which makes that write conflict.
    """

    def __init__(self) -> None:
        self.events: dict[EventId, EventRecord] = {}
        self.writes = 0
        self._interleaved: list[Callable[[EventRecord], EventRecord]] = []

    def add(self, event: EventRecord) -> EventRecord:
        self.events[event.id] = event
        return event

    def interleave(self, change: Callable[[EventRecord], EventRecord]) -> None:
        self._interleaved.append(change)

    def _apply_interleaved(self, event_id: EventId) -> None:
        if self._interleaved and event_id in self.events:
            stored = self.events[event_id]
            change = self._interleaved.pop(0)
            self.events[event_id] = replace(change(stored), version=stored.version + 1)

    def create_event(self, event: EventRecord) -> EventRecord:
        self.events[event.id] = event
        self.writes += 1
        return event

    def get_event(self, event_id: EventId) -> EventRecord | None:
        return self.events.get(event_id)

    def get_events(self, event_ids: Iterable[EventId]) -> dict[EventId, EventRecord]:
        return {eid: self.events[eid] for eid in event_ids if eid in self.events}

    def list_group_events(self, group_id, statuses=None, search=None) -> list[EventRecord]:
        events = [e for e in self.events.values() if e.group_id == group_id]
        if statuses is not None:
            wanted = set(statuses)
            events = [e for e in events if e.status in wanted]
        if search:
            needle = search.strip().lower()
            events = [e for e in events if needle in e.title.lower()]
        return sorted(events, key=lambda e: e.created_at, reverse=True)

    def update_event(self, event: EventRecord, expected_version: int) -> EventRecord:
        self._apply_interleaved(event.id)
        stored = self.events.get(event.id)
        if stored is None:
            raise EventNotFoundError(str(event.id))
        if stored.version != expected_version:
            raise ConflictError(str(event.id))
        saved = replace(event, version=expected_version + 1)
        self.events[event.id] = saved
        self.writes += 1
        return saved

    def delete_event(self, event_id: EventId, expected_version: int) -> None:
        self._apply_interleaved(event_id)
        stored = self.events.get(event_id)
        if stored is None:
            raise EventNotFoundError(str(event_id))
        if stored.version != expected_version:
            raise ConflictError(str(event_id))
        del self.events[event_id]


class InMemoryTeamStore(TeamStore):
    """Team list; a group exists when it is listed in ``groups`` or owns a team."""

    def __init__(self, teams: Iterable[Team], groups: Iterable[GroupId] = ()) -> None:
        self.teams = list(teams)
        self.groups = set(groups)

    def group_exists(self, group_id: GroupId) -> bool:
        return group_id in self.groups or any(t.group_id == group_id for t in self.teams)

    def list_group_teams(self, group_id: GroupId) -> list[Team]:
        return sorted((t for t in self.teams if t.group_id == group_id), key=lambda t: t.name)


class FrozenClock:
    def __init__(self, now: datetime) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now


@pytest.fixture
def api_client() -> APIClient:
    return APIClient()


@pytest.fixture(autouse=True)
def clear_cache():
    from django.core.cache import cache
    cache.clear()
    yield
    cache.clear()


@pytest.fixture
def make_event() -> Callable[..., EventRecord]:
    def factory(**overrides) -> EventRecord:
        fields = {
            "id": EventId(uuid4()),
            "group_id": GROUP_ID,
            "title": "Spring Hackathon",
            "description": "Build something in a day",
            "event_type": EventType.COMPETITION,
            "status": EventStatus.DRAFT,
            "created_by": "member-1",
            "created_at": NOW,
            "updated_at": NOW,
        }
        fields.update(overrides)
        return EventRecord(**fields)

    return factory


@pytest.fixture
def event_store() -> InMemoryEventStore:
    return InMemoryEventStore()


@pytest.fixture
def team_store() -> InMemoryTeamStore:
    return InMemoryTeamStore(
        [
            Team(id=TEAM_1, group_id=GROUP_ID, name="Alpha"),
            Team(id=TEAM_2, group_id=GROUP_ID, name="Bravo"),
            Team(id=FOREIGN_TEAM, group_id=OTHER_GROUP_ID, name="Zulu"),
        ]
    )


@pytest.fixture
def clock() -> FrozenClock:
    return FrozenClock(NOW)


@pytest.fixture
def service(event_store, team_store, clock) -> EventService:
    return EventService(
        event_store,
        team_store,
        clock=clock,
        policy=SchedulingPolicy(),
        max_attempts=3,
    )
