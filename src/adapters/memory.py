"""
In-memory repositories for events, workspaces and publish requests.

Used by the API and CLI when the data comes from YAML snapshots, and by
tests as port fakes.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from src.adapters.snapshot import EventSnapshot
from src.components.publish.models import StatusChange
from src.components.readiness import EventSpaceConfig
from src.domain.entities import (
    EventRecord,
    PromoCode,
    PublishRequest,
    TicketTier,
    WorkspaceRecord,
)


class InMemoryEventRepo:
    """In-memory event repository for testing/dev."""

    def __init__(self, events: list[EventRecord] | None = None) -> None:
        self._events: dict[str, EventRecord] = {e.id: e for e in events or []}

    def get_by_id(self, event_id: str) -> EventRecord | None:
        return self._events.get(event_id)

    def save(self, event: EventRecord) -> EventRecord:
        self._events[event.id] = event
        return event

    def list_all(self) -> list[EventRecord]:
        return list(self._events.values())


class InMemoryWorkspaceRepo:
    """In-memory workspace repository for testing/dev."""

    def __init__(self, workspaces: list[WorkspaceRecord] | None = None) -> None:
        self._workspaces: dict[str, WorkspaceRecord] = {w.id: w for w in workspaces or []}

    def get_by_id(self, workspace_id: str) -> WorkspaceRecord | None:
        return self._workspaces.get(workspace_id)

    def get_root_for_event(self, event_id: str) -> WorkspaceRecord | None:
        for workspace in self._workspaces.values():
            if workspace.event_id == event_id and workspace.workspace_type == "ROOT":
                return workspace
        return None

    def save(self, workspace: WorkspaceRecord) -> WorkspaceRecord:
        self._workspaces[workspace.id] = workspace
        return workspace

    def parent_map(self) -> dict[str, str | None]:
        """Workspace id to parent id, for depth checks."""
        return {w.id: w.parent_workspace_id for w in self._workspaces.values()}


class InMemoryPublishRequestRepo:
    """In-memory publish request repository for testing/dev."""

    def __init__(self) -> None:
        self._requests: dict[str, PublishRequest] = {}

    def get_by_id(self, request_id: str) -> PublishRequest | None:
        return self._requests.get(request_id)

    def get_latest_for_event(self, event_id: str) -> PublishRequest | None:
        matches = [r for r in self._requests.values() if r.event_id == event_id]
        if not matches:
            return None
        return max(matches, key=lambda r: r.requested_at)

    def save(self, request: PublishRequest) -> PublishRequest:
        self._requests[request.id] = request
        return request

    def delete(self, request_id: str) -> None:
        self._requests.pop(request_id, None)


class InMemoryStatusHistory:
    """Append-only list of event status changes."""

    def __init__(self) -> None:
        self.entries: list[StatusChange] = []

    def append(self, change: StatusChange) -> None:
        self.entries.append(change)

    def for_event(self, event_id: str) -> list[StatusChange]:
        return [c for c in self.entries if c.event_id == event_id]


@dataclass
class EventStore:
    """All repositories the API serves from, keyed by event id where needed."""

    events: InMemoryEventRepo = field(default_factory=InMemoryEventRepo)
    workspaces: InMemoryWorkspaceRepo = field(default_factory=InMemoryWorkspaceRepo)
    requests: InMemoryPublishRequestRepo = field(default_factory=InMemoryPublishRequestRepo)
    history: InMemoryStatusHistory = field(default_factory=InMemoryStatusHistory)
    event_space: dict[str, EventSpaceConfig] = field(default_factory=dict)
    promo_codes: dict[str, list[PromoCode]] = field(default_factory=dict)
    tiers: dict[str, list[TicketTier]] = field(default_factory=dict)
    confirmed_registrations: dict[str, int] = field(default_factory=dict)

    @classmethod
    def from_snapshots(cls, snapshots: list[EventSnapshot]) -> EventStore:
        store = cls()
        for snapshot in snapshots:
            store.add_snapshot(snapshot)
        return store

    def add_snapshot(self, snapshot: EventSnapshot) -> None:
        event_id = snapshot.event.id
        self.events.save(snapshot.event)
        for workspace in snapshot.workspaces:
            self.workspaces.save(workspace)
        self.event_space[event_id] = snapshot.event_space
        self.promo_codes[event_id] = list(snapshot.promo_codes)
        self.tiers[event_id] = list(snapshot.ticket_tiers)
        self.confirmed_registrations[event_id] = snapshot.confirmed_registrations
