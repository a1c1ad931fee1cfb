"""Domain error codes for the competitions module."""

from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum


class ErrorCode(Enum):
    """Domain error codes."""

    EVENT_NOT_FOUND = "EVENT_NOT_FOUND"
    GROUP_NOT_FOUND = "GROUP_NOT_FOUND"
    INVALID_EVENT_ID = "INVALID_EVENT_ID"
    INVALID_IDENTIFIER = "INVALID_IDENTIFIER"
    INVALID_INPUT = "INVALID_INPUT"
    SCHEDULE_INVALID = "SCHEDULE_INVALID"
    INVALID_TRANSITION = "INVALID_TRANSITION"
    EVENT_OPERATION = "EVENT_OPERATION"
    INVALID_TEAMS = "INVALID_TEAMS"
    INVALID_PREREQUISITE = "INVALID_PREREQUISITE"
    CYCLIC_PREREQUISITE = "CYCLIC_PREREQUISITE"
    CONFLICT = "CONFLICT"


@dataclass(frozen=True)
class DomainError(Exception):
    """Base domain error with code and user-safe message."""

    code: ErrorCode
    message: str

    def __str__(self) -> str:
        return f"{self.code.value}: {self.message}"


class EventNotFoundError(DomainError):
    """Raised when an event is not found."""

    def __init__(self, event_id: str) -> None:
        super().__init__(
            code=ErrorCode.EVENT_NOT_FOUND,
            message="Event not found",
        )
        self.event_id = event_id


class GroupNotFoundError(DomainError):
    """Raised when a group is not found."""

    def __init__(self, group_id: str) -> None:
        super().__init__(
            code=ErrorCode.GROUP_NOT_FOUND,
            message="Group not found",
        )
        self.group_id = group_id


class InvalidEventIdError(DomainError):
    """Raised when an event ID is invalid."""

    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.INVALID_EVENT_ID,
            message="Invalid event ID format",
        )


class InvalidIdentifierError(DomainError):
    """Raised when a group or team ID is invalid."""

    def __init__(self, kind: str) -> None:
        super().__init__(
            code=ErrorCode.INVALID_IDENTIFIER,
            message=f"Invalid {kind} ID format",
        )
        self.kind = kind


class InvalidInputError(DomainError):
    """Raised when a request value is well-typed but not acceptable."""

    def __init__(self, message: str) -> None:
        super().__init__(code=ErrorCode.INVALID_INPUT, message=message)


class ScheduleInvalidError(DomainError):
    """Raised when start, end and submission deadline are out of order."""

    def __init__(self, reason: str) -> None:
        super().__init__(code=ErrorCode.SCHEDULE_INVALID, message=reason)
        self.reason = reason


class InvalidTransitionError(DomainError):
    """Raised when a status change is not in the transition table."""

    def __init__(self, current: str, target: str) -> None:
        super().__init__(
            code=ErrorCode.INVALID_TRANSITION,
            message=f"Invalid status transition from {current} to {target}",
        )
        self.current = current
        self.target = target


class EventOperationError(DomainError):
    """Raised when an operation is not allowed in the event's current status."""

    def __init__(self, message: str) -> None:
        super().__init__(code=ErrorCode.EVENT_OPERATION, message=message)


class InvalidTeamsError(DomainError):
    """Raised when eligible team ids are duplicated or outside the event's group."""

    def __init__(self, message: str, team_ids: Iterable[str] = ()) -> None:
        super().__init__(code=ErrorCode.INVALID_TEAMS, message=message)
        self.team_ids = tuple(team_ids)


class InvalidPrerequisiteError(DomainError):
    """Raised when a prerequisite event is unknown or belongs to another group."""

    def __init__(self, message: str, event_id: str | None = None) -> None:
        super().__init__(code=ErrorCode.INVALID_PREREQUISITE, message=message)
        self.event_id = event_id


class CyclicPrerequisiteError(DomainError):
    """Raised when following prerequisites leads back to an event already on the path."""

    def __init__(self, path: Iterable[str]) -> None:
        path = tuple(path)
        super().__init__(
            code=ErrorCode.CYCLIC_PREREQUISITE,
            message="Prerequisite cycle: " + " -> ".join(path),
        )
        self.path = path


class ConflictError(DomainError):
    """Raised when an event changed between read and conditional write."""

    def __init__(self, event_id: str) -> None:
        super().__init__(
            code=ErrorCode.CONFLICT,
            message="Event was modified concurrently",
        )
        self.event_id = event_id
