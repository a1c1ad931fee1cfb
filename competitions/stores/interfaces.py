"""Store interfaces (repository pattern).

Stores must be swappable and return domain models.
"""

from abc import ABC, abstractmethod
from collections.abc import Iterable

from competitions.domain import EventId, EventRecord, EventStatus, GroupId, Team


class EventStore(ABC):
    """Interface for event persistence operations."""

    @abstractmethod
    def create_event(self, event: EventRecord) -> EventRecord:
        """Persist a new event and return it as stored."""
        ...

    @abstractmethod
    def get_event(self, event_id: EventId) -> EventRecord | None:
        """Return an event by ID, or None if not found."""
        ...

    @abstractmethod
    def get_events(self, event_ids: Iterable[EventId]) -> dict[EventId, EventRecord]:
        """Return the events that exist among ``event_ids``, keyed by ID."""
        ...

    @abstractmethod
    def list_group_events(
        self,
        group_id: GroupId,
        statuses: Iterable[EventStatus] | None = None,
        search: str | None = None,
    ) -> list[EventRecord]:
        """Return a group's events ordered by created_at descending.

        ``statuses`` restricts the result to those statuses; ``search`` is a
        case-insensitive title match.
        """
        ...

    @abstractmethod
    def update_event(self, event: EventRecord, expected_version: int) -> EventRecord:
        """Write ``event`` if the stored version still equals ``expected_version``.

        Returns the event with its new version.

        Raises:
            EventNotFoundError: If the event no longer exists.
            ConflictError: If the stored version moved on.
        """
        ...

    @abstractmethod
    def delete_event(self, event_id: EventId, expected_version: int) -> None:
        """Delete an event if its stored version equals ``expected_version``."""
        ...


class TeamStore(ABC):
    """Interface for the team lookups the engine needs."""

    @abstractmethod
    def list_group_teams(self, group_id: GroupId) -> list[Team]:
        """Return all teams of a group ordered by name."""
        ...

    @abstractmethod
    def group_exists(self, group_id: GroupId) -> bool:
        """Return whether the group exists."""
        ...
