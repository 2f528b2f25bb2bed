"""Publish component port definitions - protocols for dependencies."""

from typing import Protocol

from src.components.publish.models import StatusChange
from src.domain.entities import EventRecord, PublishRequest, WorkspaceRecord
from src.domain.policy import WorkspaceRole
from src.ports.clock import ClockPort

__all__ = [
    "ClockPort",
    "EventRepoPort",
    "PolicyPort",
    "PublishRequestRepoPort",
    "StatusHistoryPort",
    "WorkspaceRepoPort",
]


class EventRepoPort(Protocol):
    """Protocol for event repository operations."""

    def get_by_id(self, event_id: str) -> EventRecord | None:
        """Retrieve an event by ID."""
        ...

    def save(self, event: EventRecord) -> EventRecord:
        """Save an event."""
        ...


class WorkspaceRepoPort(Protocol):
    """Protocol for workspace lookups."""

    def get_by_id(self, workspace_id: str) -> WorkspaceRecord | None:
        ...

    def get_root_for_event(self, event_id: str) -> WorkspaceRecord | None:
        """Return the event's ROOT workspace, if one exists."""
        ...


class PublishRequestRepoPort(Protocol):
    """Protocol for publish approval request storage."""

    def get_by_id(self, request_id: str) -> PublishRequest | None:
        ...

    def get_latest_for_event(self, event_id: str) -> PublishRequest | None:
        """Most recent request for the event, any status."""
        ...

    def save(self, request: PublishRequest) -> PublishRequest:
        ...

    def delete(self, request_id: str) -> None:
        ...


class StatusHistoryPort(Protocol):
    """Protocol for recording event status transitions."""

    def append(self, change: StatusChange) -> None:
        ...


class PolicyPort(Protocol):
    """Protocol for permission checks."""

    def can_publish_event(self, role: WorkspaceRole | None) -> bool:
        """Check if the workspace role may publish or unpublish events."""
        ...
