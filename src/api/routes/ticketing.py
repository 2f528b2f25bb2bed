"""
Ticketing API Routes.

Tier availability, cart quotes, sales stats and event countdowns for stored
events.
"""

from __future__ import annotations

from decimal import Decimal

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field

from src.adapters.memory import EventStore
from src.api.deps import get_clock, get_store, get_ticketing_config
from src.api.schemas import ValidationErrorResponse, raise_for_errors
from src.components.ticketing import (
    TIER_STATUS_LABELS,
    Countdown,
    QuoteInput,
    TicketingConfig,
    TicketStats,
    countdown,
    max_purchasable,
    quote_cart,
    remaining_quantity,
    ticket_stats,
    tier_status,
)
from src.domain.entities import TicketTier
from src.ports.clock import ClockPort

router = APIRouter()


class TierResponse(BaseModel):
    id: str
    name: str
    price: Decimal
    currency: str
    status: str
    label: str
    remaining: int | None
    max_per_order: int


class QuoteRequest(BaseModel):
    tier_id: str
    quantity: int
    promo_code: str | None = Field(None, description="Code typed at checkout")


class QuoteResponse(BaseModel):
    tier_id: str
    quantity: int
    unit_price: Decimal
    subtotal: Decimal
    discount: Decimal
    total: Decimal
    currency: str
    promo_code_id: str | None = None


# --- Helpers ---


def _event_tiers(store: EventStore, event_id: str) -> list[TicketTier]:
    if store.events.get_by_id(event_id) is None:
        raise HTTPException(status_code=404, detail="Event not found")
    return store.tiers.get(event_id, [])


# --- Routes ---


@router.get("/events/{event_id}/tiers", response_model=list[TierResponse])
def list_tiers(
    event_id: str,
    store: EventStore = Depends(get_store),
    clock: ClockPort = Depends(get_clock),
    config: TicketingConfig = Depends(get_ticketing_config),
) -> list[TierResponse]:
    """Every tier of an event in display order, with its sale status."""
    now = clock.now_utc()
    tiers = sorted(_event_tiers(store, event_id), key=lambda t: t.sort_order)
    responses = []
    for tier in tiers:
        status = tier_status(tier, now)
        responses.append(
            TierResponse(
                id=tier.id,
                name=tier.name,
                price=tier.price,
                currency=tier.currency or config.default_currency,
                status=status,
                label=TIER_STATUS_LABELS[status],
                remaining=remaining_quantity(tier),
                max_per_order=(
                    max_purchasable(tier, config.max_tickets_per_order)
                    if status == "on_sale"
                    else 0
                ),
            )
        )
    return responses


@router.post(
    "/events/{event_id}/quote",
    response_model=QuoteResponse,
    responses={400: {"model": ValidationErrorResponse}, 404: {"description": "Not found"}},
)
def quote(
    event_id: str,
    request: QuoteRequest,
    store: EventStore = Depends(get_store),
    clock: ClockPort = Depends(get_clock),
    config: TicketingConfig = Depends(get_ticketing_config),
) -> QuoteResponse:
    """Price a cart for one tier, optionally with a promo code."""
    tier = next((t for t in _event_tiers(store, event_id) if t.id == request.tier_id), None)
    if tier is None:
        raise HTTPException(status_code=404, detail="Ticket tier not found")

    result = quote_cart(
        QuoteInput(
            tier=tier,
            quantity=request.quantity,
            now=clock.now_utc(),
            promo_code=request.promo_code,
            promo_codes=store.promo_codes.get(event_id, []),
            max_per_order=config.max_tickets_per_order,
            default_currency=config.default_currency,
        )
    )
    raise_for_errors(result.errors)

    return QuoteResponse(
        tier_id=result.tier_id,
        quantity=result.quantity,
        unit_price=result.unit_price,
        subtotal=result.subtotal,
        discount=result.discount,
        total=result.total,
        currency=result.currency,
        promo_code_id=result.promo_code_id,
    )


@router.get("/events/{event_id}/stats", response_model=TicketStats)
def stats(event_id: str, store: EventStore = Depends(get_store)) -> TicketStats:
    """Sales summary over the event's active tiers."""
    tiers = _event_tiers(store, event_id)
    event = store.events.get_by_id(event_id)
    return ticket_stats(
        tiers,
        store.confirmed_registrations.get(event_id, 0),
        event.capacity if event else None,
    )


@router.get("/events/{event_id}/countdown", response_model=Countdown)
def event_countdown(
    event_id: str,
    store: EventStore = Depends(get_store),
    clock: ClockPort = Depends(get_clock),
) -> Countdown:
    """Time left until the event starts."""
    event = store.events.get_by_id(event_id)
    if event is None:
        raise HTTPException(status_code=404, detail="Event not found")
    if event.start_date is None:
        raise HTTPException(status_code=404, detail="Event has no start date")
    return countdown(event.start_date, clock.now_utc())
