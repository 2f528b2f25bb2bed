"""
Ticketing component.

Public API for ticket tier availability, cart quotes and sales stats.
"""

from .component import (
    available_tiers,
    countdown,
    load_config_from_rules,
    max_purchasable,
    quote_cart,
    remaining_quantity,
    run,
    ticket_stats,
    tier_status,
)
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

__all__ = [
    # Functions
    "available_tiers",
    "countdown",
    "load_config_from_rules",
    "max_purchasable",
    "quote_cart",
    "remaining_quantity",
    "run",
    "ticket_stats",
    "tier_status",
    # Models
    "CartQuote",
    "Countdown",
    "QuoteInput",
    "StatsInput",
    "TicketingConfig",
    "TicketingValidationError",
    "TicketStats",
    "TierStatus",
    "TierStatusInput",
    "TierStatusOutput",
    "TIER_STATUS_LABELS",
]
