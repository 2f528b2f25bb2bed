from datetime import UTC, datetime
from pathlib import Path

import pytest

from src.adapters.clock import FrozenClock
from src.adapters.memory import EventStore
from src.adapters.snapshot import EventSnapshot, load_snapshot
from src.rules.loader import load_rules

PROJECT_ROOT = Path(__file__).resolve().parent.parent

# Before the summit and inside the LAUNCH20 window
NOW = datetime(2026, 10, 1, 0, 0, tzinfo=UTC)


@pytest.fixture
def project_root() -> Path:
    return PROJECT_ROOT


@pytest.fixture
def rules():
    """The real rules.yaml from the project root."""
    rules_path = PROJECT_ROOT / "rules.yaml"
    if not rules_path.exists():
        raise FileNotFoundError(f"Rules not found at {rules_path}")
    return load_rules(rules_path)


@pytest.fixture
def clock() -> FrozenClock:
    return FrozenClock(NOW)


@pytest.fixture
def summit_snapshot() -> EventSnapshot:
    """Sample event that requires publish approval."""
    return load_snapshot(PROJECT_ROOT / "data" / "summit-2026.yaml")


@pytest.fixture
def meetup_snapshot() -> EventSnapshot:
    """Free event whose ROOT workspace keeps the default publish settings."""
    return EventSnapshot.model_validate(
        {
            "event": {
                "id": "evt-meetup",
                "name": "Python Meetup",
                "description": "Monthly community meetup.",
                "start_date": "2026-10-15T18:00:00+00:00",
                "end_date": "2026-10-15T21:00:00+00:00",
                "mode": "OFFLINE",
                "visibility": "PUBLIC",
                "capacity": 50,
            },
            "workspaces": [
                {
                    "id": "ws-meetup-root",
                    "event_id": "evt-meetup",
                    "name": "Meetup Organizers",
                    "workspace_type": "ROOT",
                }
            ],
            "event_space": {
                "landing_page_content": "<p>Talks and pizza</p>",
                "slug": "python-meetup",
                "registration_type": "open",
                "is_free": True,
            },
        }
    )


@pytest.fixture
def store(summit_snapshot: EventSnapshot, meetup_snapshot: EventSnapshot) -> EventStore:
    return EventStore.from_snapshots([summit_snapshot, meetup_snapshot])
