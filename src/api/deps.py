import os
from functools import lru_cache
from pathlib import Path

from fastapi import Depends, Header, HTTPException, status

from src.adapters.clock import SystemClock
from src.adapters.memory import EventStore
from src.adapters.snapshot import load_snapshots
from src.components.promo_codes import PromoConfig
from src.components.promo_codes import load_config_from_rules as load_promo_config
from src.components.publish import PublishComponent, load_defaults_from_rules
from src.components.ticketing import TicketingConfig
from src.components.ticketing import load_config_from_rules as load_ticketing_config
from src.domain.policy import PolicyEngine, WorkspaceRole, parse_role
from src.ports.clock import ClockPort
from src.rules.loader import get_rules_path, load_rules
from src.rules.models import Rules


# --- Settings ---
class Settings:
    def __init__(self) -> None:
        self.base_dir = Path(os.getcwd())
        self.rules_path = get_rules_path(self.base_dir)
        self.data_dir = Path(os.environ.get("EVENTSPACE_DATA_DIR", "./data"))
        self.cors_origins = [
            origin.strip()
            for origin in os.environ.get(
                "EVENTSPACE_CORS_ORIGINS", "http://localhost:3000,http://127.0.0.1:3000"
            ).split(",")
            if origin.strip()
        ]


@lru_cache
def get_settings() -> Settings:
    return Settings()


# --- Rules ---
@lru_cache
def get_rules(settings: Settings = Depends(get_settings)) -> Rules:
    return load_rules(settings.rules_path)


# --- Store ---
@lru_cache
def get_store(settings: Settings = Depends(get_settings)) -> EventStore:
    """Process-wide store seeded from the snapshot directory."""
    return EventStore.from_snapshots(load_snapshots(settings.data_dir))


# --- Services ---
def get_clock() -> ClockPort:
    return SystemClock()


def get_policy(rules: Rules = Depends(get_rules)) -> PolicyEngine:
    return PolicyEngine(rules)


def get_promo_config(rules: Rules = Depends(get_rules)) -> PromoConfig:
    return load_promo_config(rules)


def get_ticketing_config(rules: Rules = Depends(get_rules)) -> TicketingConfig:
    return load_ticketing_config(rules)


def get_publish_component(
    rules: Rules = Depends(get_rules),
    store: EventStore = Depends(get_store),
    policy: PolicyEngine = Depends(get_policy),
    clock: ClockPort = Depends(get_clock),
) -> PublishComponent:
    return PublishComponent(
        event_repo=store.events,
        workspace_repo=store.workspaces,
        request_repo=store.requests,
        policy=policy,
        clock=clock,
        history_repo=store.history,
        defaults=load_defaults_from_rules(rules),
        settings_path_template=rules.publishing.settings_path_template,
        approver_roles=rules.publishing.approver_roles,
        priorities=rules.publishing.priorities,
    )


# --- Actor ---
class Actor:
    def __init__(self, user_id: str, role: WorkspaceRole | None) -> None:
        self.user_id = user_id
        self.role = role


def get_actor(
    x_user_id: str | None = Header(default=None),
    x_workspace_role: str | None = Header(default=None),
) -> Actor:
    """
    Identify the caller from gateway headers.

    The backend authenticates users; it forwards the user id and the
    caller's role in the event's ROOT workspace. Unknown roles carry no
    permissions.
    """
    if not x_user_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing X-User-Id header",
        )
    return Actor(user_id=x_user_id, role=parse_role(x_workspace_role))
