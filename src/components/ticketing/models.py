"""
Ticketing component models.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Literal

from src.domain.entities import PromoCode, TicketTier

TierStatus = Literal["inactive", "upcoming", "ended", "sold_out", "on_sale"]

TIER_STATUS_LABELS: dict[TierStatus, str] = {
    "on_sale": "On Sale",
    "sold_out": "Sold Out",
    "upcoming": "Coming Soon",
    "ended": "Sale Ended",
    "inactive": "Unavailable",
}


@dataclass(frozen=True)
class TicketingValidationError:
    """Checkout error for a ticket cart."""

    code: str
    message: str
    field: str | None = None


@dataclass(frozen=True)
class TicketingConfig:
    max_tickets_per_order: int = 10
    default_currency: str = "INR"


# --- Tier status ---


@dataclass(frozen=True)
class TierStatusInput:
    tier: TicketTier
    now: datetime


@dataclass(frozen=True)
class TierStatusOutput:
    status: TierStatus
    label: str
    remaining: int | None  # None means unlimited


# --- Cart quote ---


@dataclass(frozen=True)
class QuoteInput:
    tier: TicketTier
    quantity: int
    now: datetime
    promo_code: str | None = None
    promo_codes: list[PromoCode] = field(default_factory=list)
    max_per_order: int = 10
    default_currency: str = "INR"


@dataclass(frozen=True)
class CartQuote:
    tier_id: str
    quantity: int
    unit_price: Decimal
    subtotal: Decimal
    discount: Decimal
    total: Decimal
    currency: str
    promo_code_id: str | None = None
    errors: list[TicketingValidationError] = field(default_factory=list)
    success: bool = True


# --- Stats ---


@dataclass(frozen=True)
class StatsInput:
    tiers: list[TicketTier]
    confirmed_registrations: int = 0
    event_capacity: int | None = None


@dataclass(frozen=True)
class TicketStats:
    total_capacity: int
    sold: int
    tiers_count: int
    confirmed_registrations: int
    capacity_used_percentage: int


@dataclass(frozen=True)
class Countdown:
    days: int
    hours: int
    minutes: int
    seconds: int
    is_past: bool
