"""
Ticketing component - tier availability and cart pricing.

Tier status follows the same first-match-wins shape as promo code status:
inactive > upcoming > ended > sold_out > on_sale.
"""

from __future__ import annotations

import logging
from datetime import datetime
from decimal import Decimal

from src.components.promo_codes import ApplyPromoInput, apply_promo_code
from src.domain.entities import TicketTier
from src.rules.models import Rules

from .models import (
    TIER_STATUS_LABELS,
    CartQuote,
    Countdown,
    QuoteInput,
    StatsInput,
    TicketingConfig,
    TicketingValidationError,
    TicketStats,
    TierStatus,
    TierStatusInput,
    TierStatusOutput,
)

logger = logging.getLogger(__name__)

_ZERO = Decimal("0")


# --- Pure Functions ---


def tier_status(tier: TicketTier, now: datetime) -> TierStatus:
    if not tier.is_active:
        return "inactive"
    if tier.sale_start is not None and now < tier.sale_start:
        return "upcoming"
    if tier.sale_end is not None and now > tier.sale_end:
        return "ended"
    if tier.quantity is not None and tier.sold_count >= tier.quantity:
        return "sold_out"
    return "on_sale"


def remaining_quantity(tier: TicketTier) -> int | None:
    """Tickets left in a tier, or None if unlimited."""
    if tier.quantity is None:
        return None
    return max(0, tier.quantity - tier.sold_count)


def max_purchasable(tier: TicketTier, max_per_order: int) -> int:
    """Largest quantity one order may hold for this tier."""
    remaining = remaining_quantity(tier)
    if remaining is None:
        return max_per_order
    return min(max_per_order, remaining)


def available_tiers(tiers: list[TicketTier], now: datetime) -> list[TicketTier]:
    """On-sale tiers in display order."""
    on_sale = [tier for tier in tiers if tier_status(tier, now) == "on_sale"]
    return sorted(on_sale, key=lambda tier: tier.sort_order)


def quote_cart(input_data: QuoteInput) -> CartQuote:
    """
    Price a single-tier cart, optionally applying a promo code.

    Quantity and availability problems are reported as errors and leave
    the discount at zero. A rejected promo code does the same, so the
    caller can show why while still displaying the undiscounted total.
    """
    tier = input_data.tier
    quantity = input_data.quantity
    subtotal = tier.price * max(quantity, 0)
    errors: list[TicketingValidationError] = []

    status = tier_status(tier, input_data.now)
    if status != "on_sale":
        errors.append(
            TicketingValidationError(
                "TIER_NOT_ON_SALE",
                f"{tier.name} is not on sale ({TIER_STATUS_LABELS[status].lower()})",
                "tier_id",
            )
        )

    if quantity < 1:
        errors.append(
            TicketingValidationError("QUANTITY_INVALID", "Select at least 1 ticket", "quantity")
        )
    else:
        limit = max_purchasable(tier, input_data.max_per_order)
        if quantity > limit:
            errors.append(
                TicketingValidationError(
                    "QUANTITY_EXCEEDS_LIMIT",
                    f"You can buy at most {limit} tickets for {tier.name}",
                    "quantity",
                )
            )

    def _quote(
        discount: Decimal = _ZERO,
        promo_code_id: str | None = None,
    ) -> CartQuote:
        return CartQuote(
            tier_id=tier.id,
            quantity=quantity,
            unit_price=tier.price,
            subtotal=subtotal,
            discount=discount,
            total=subtotal - discount,
            currency=tier.currency or input_data.default_currency,
            promo_code_id=promo_code_id,
            errors=errors,
            success=not errors,
        )

    if errors:
        logger.debug("Cart for tier %s rejected: %s", tier.id, [e.code for e in errors])
        return _quote()

    if not input_data.promo_code:
        return _quote()

    applied = apply_promo_code(
        ApplyPromoInput(
            code=input_data.promo_code,
            promo_codes=input_data.promo_codes,
            subtotal=subtotal,
            quantity=quantity,
            now=input_data.now,
            tier_id=tier.id,
            event_id=tier.event_id,
        )
    )
    if not applied.success:
        errors.extend(
            TicketingValidationError(e.code, e.message, e.field) for e in applied.errors
        )
        return _quote()

    return _quote(applied.discount, applied.promo_code_id)


def ticket_stats(
    tiers: list[TicketTier],
    confirmed_registrations: int = 0,
    event_capacity: int | None = None,
) -> TicketStats:
    """
    Sales summary over the active tiers.

    Capacity is the sum of tier quantities; events whose tiers are all
    unlimited fall back to the event capacity.
    """
    active = [tier for tier in tiers if tier.is_active]
    tier_capacity = sum(tier.quantity or 0 for tier in active)
    total_capacity = tier_capacity or event_capacity or 0

    used = 0
    if total_capacity > 0:
        used = (200 * confirmed_registrations + total_capacity) // (2 * total_capacity)

    return TicketStats(
        total_capacity=total_capacity,
        sold=sum(tier.sold_count for tier in active),
        tiers_count=len(active),
        confirmed_registrations=confirmed_registrations,
        capacity_used_percentage=used,
    )


def countdown(target: datetime, now: datetime) -> Countdown:
    """Time left until `target`, zeroed once it has passed."""
    if target <= now:
        return Countdown(days=0, hours=0, minutes=0, seconds=0, is_past=True)

    delta = target - now
    hours, rest = divmod(delta.seconds, 3600)
    minutes, seconds = divmod(rest, 60)
    return Countdown(
        days=delta.days,
        hours=hours,
        minutes=minutes,
        seconds=seconds,
        is_past=False,
    )


# --- Run Function (Atomic Component Pattern) ---


def run(
    input_data: TierStatusInput | QuoteInput | StatsInput,
) -> TierStatusOutput | CartQuote | TicketStats:
    """Run a ticketing operation based on input type."""
    if isinstance(input_data, TierStatusInput):
        status = tier_status(input_data.tier, input_data.now)
        return TierStatusOutput(
            status=status,
            label=TIER_STATUS_LABELS[status],
            remaining=remaining_quantity(input_data.tier),
        )

    if isinstance(input_data, QuoteInput):
        return quote_cart(input_data)

    if isinstance(input_data, StatsInput):
        return ticket_stats(
            input_data.tiers,
            input_data.confirmed_registrations,
            input_data.event_capacity,
        )

    raise TypeError(f"Unknown input type: {type(input_data)}")


# --- Configuration Loader ---


def load_config_from_rules(rules: Rules) -> TicketingConfig:
    return TicketingConfig(
        max_tickets_per_order=rules.ticketing.max_tickets_per_order,
        default_currency=rules.ticketing.default_currency,
    )
