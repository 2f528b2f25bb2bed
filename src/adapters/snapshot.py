"""
Event snapshot files.

A snapshot is one YAML document describing an event as fetched from the
backend: the event row, its workspaces, the event-space settings, promo
codes and ticket tiers. The CLI evaluates single snapshots; the API seeds
its in-memory repositories from every snapshot in EVENTSPACE_DATA_DIR.
"""

from __future__ import annotations

import logging
from pathlib import Path

import yaml
from pydantic import BaseModel, Field, ValidationError

from src.components.readiness import EventSpaceConfig
from src.domain.entities import EventRecord, PromoCode, TicketTier, WorkspaceRecord

logger = logging.getLogger(__name__)


class EventSnapshot(BaseModel):
    event: EventRecord
    workspaces: list[WorkspaceRecord] = Field(default_factory=list)
    event_space: EventSpaceConfig = Field(default_factory=EventSpaceConfig)
    promo_codes: list[PromoCode] = Field(default_factory=list)
    ticket_tiers: list[TicketTier] = Field(default_factory=list)
    confirmed_registrations: int = 0

    def root_workspace(self) -> WorkspaceRecord | None:
        for workspace in self.workspaces:
            if workspace.workspace_type == "ROOT":
                return workspace
        return None


def load_snapshot(path: Path) -> EventSnapshot:
    """
    Load one snapshot file.
    Raises FileNotFoundError if file missing.
    Raises ValueError if the YAML or its shape is invalid.
    """
    if not path.exists():
        raise FileNotFoundError(f"Snapshot file not found at: {path}")

    try:
        data = yaml.safe_load(path.read_text())
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML syntax in snapshot {path.name}: {e}") from e

    if not isinstance(data, dict):
        raise ValueError(f"Snapshot {path.name} must contain a mapping at the top level")

    try:
        return EventSnapshot.model_validate(data)
    except ValidationError as e:
        raise ValueError(f"Snapshot {path.name} is invalid:\n{e}") from e


def load_snapshots(data_dir: Path) -> list[EventSnapshot]:
    """Load every *.yaml snapshot in a directory, in file name order."""
    if not data_dir.is_dir():
        logger.warning("Snapshot directory %s does not exist; starting empty", data_dir)
        return []

    snapshots = [load_snapshot(path) for path in sorted(data_dir.glob("*.yaml"))]
    logger.info("Loaded %d event snapshots from %s", len(snapshots), data_dir)
    return snapshots
