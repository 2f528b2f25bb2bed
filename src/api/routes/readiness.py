"""
Readiness API Routes.

Evaluate publish checklists from posted snapshots, or for an event held in
the store.
"""

from __future__ import annotations

from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field

from src.adapters.memory import EventStore
from src.api.deps import get_clock, get_publish_component, get_rules, get_store
from src.components.publish import PublishComponent
from src.components.readiness import (
    ChecklistItem,
    EnhancedPublishChecklist,
    EventSettingsReadiness,
    EventSpaceConfig,
    PublishRequirements,
    derive_settings_readiness,
    evaluate,
    load_requirements_from_rules,
)
from src.domain.entities import PromoCode, TicketTier, UtcDatetime
from src.ports.clock import ClockPort
from src.rules.models import Rules

router = APIRouter()


class EvaluateRequest(BaseModel):
    """Completion flags plus the camelCase requirement toggles of a workspace."""

    settings: EventSettingsReadiness = Field(default_factory=EventSettingsReadiness)
    requirements: dict[str, bool] | None = Field(
        None, description="e.g. {'requireSEO': true}; missing keys use defaults"
    )
    basic_items: list[ChecklistItem] = Field(default_factory=list)
    settings_base_url: str | None = None


class DeriveRequest(BaseModel):
    config: EventSpaceConfig = Field(default_factory=EventSpaceConfig)
    promo_codes: list[PromoCode] = Field(default_factory=list)
    tiers: list[TicketTier] = Field(default_factory=list)
    now: UtcDatetime | None = None


# --- Helpers ---


def readiness_for_event(store: EventStore, event_id: str, now: datetime) -> EventSettingsReadiness:
    """Completion flags for an event held in the store."""
    return derive_settings_readiness(
        store.event_space.get(event_id, EventSpaceConfig()),
        now,
        store.promo_codes.get(event_id, []),
        store.tiers.get(event_id, []),
    )


# --- Routes ---


@router.post("/evaluate", response_model=EnhancedPublishChecklist)
def evaluate_checklist(
    request: EvaluateRequest,
    rules: Rules = Depends(get_rules),
) -> EnhancedPublishChecklist:
    """Evaluate a checklist from posted completion flags."""
    requirements = PublishRequirements.from_settings(
        request.requirements, load_requirements_from_rules(rules)
    )
    return evaluate(
        request.settings,
        requirements,
        request.basic_items,
        request.settings_base_url,
    )


@router.post("/derive", response_model=EventSettingsReadiness)
def derive_readiness(
    request: DeriveRequest,
    clock: ClockPort = Depends(get_clock),
) -> EventSettingsReadiness:
    """Compute completion flags from a raw event-space settings snapshot."""
    return derive_settings_readiness(
        request.config,
        request.now or clock.now_utc(),
        request.promo_codes,
        request.tiers,
    )


@router.get(
    "/events/{event_id}/checklist",
    response_model=EnhancedPublishChecklist,
    responses={404: {"description": "Event not found"}},
)
def event_checklist(
    event_id: str,
    store: EventStore = Depends(get_store),
    component: PublishComponent = Depends(get_publish_component),
    clock: ClockPort = Depends(get_clock),
) -> EnhancedPublishChecklist:
    """Full publish checklist for a stored event."""
    if store.events.get_by_id(event_id) is None:
        raise HTTPException(status_code=404, detail="Event not found")

    readiness = readiness_for_event(store, event_id, clock.now_utc())
    return component.checklist(event_id, readiness)
