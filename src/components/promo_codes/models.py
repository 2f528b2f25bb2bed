"""
Promo code component models.

Input/output records for promo code status, discount calculation and
checkout redemption checks.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Literal

from src.domain.entities import PromoCode

PromoCodeStatus = Literal["active", "expired", "exhausted", "upcoming", "inactive"]

STATUS_LABELS: dict[PromoCodeStatus, str] = {
    "active": "Active",
    "expired": "Expired",
    "exhausted": "Limit Reached",
    "upcoming": "Scheduled",
    "inactive": "Inactive",
}

# Error code reported by apply_promo_code for each non-active status
STATUS_ERROR_CODES: dict[PromoCodeStatus, str] = {
    "inactive": "PROMO_INACTIVE",
    "upcoming": "PROMO_UPCOMING",
    "expired": "PROMO_EXPIRED",
    "exhausted": "PROMO_EXHAUSTED",
}


@dataclass(frozen=True)
class PromoValidationError:
    """Validation error with actionable message."""

    code: str
    message: str
    field: str | None = None


# --- Status ---


@dataclass(frozen=True)
class StatusInput:
    promo_code: PromoCode
    now: datetime


@dataclass(frozen=True)
class StatusOutput:
    status: PromoCodeStatus
    label: str
    remaining_uses: int | None  # None means unlimited


# --- Discount ---


@dataclass(frozen=True)
class DiscountInput:
    promo_code: PromoCode
    subtotal: Decimal
    quantity: int
    tier_id: str | None = None


@dataclass(frozen=True)
class DiscountOutput:
    discount: Decimal
    total: Decimal


# --- Redemption ---


@dataclass(frozen=True)
class ApplyPromoInput:
    """Checkout request: the code the attendee typed plus the cart."""

    code: str
    promo_codes: list[PromoCode]
    subtotal: Decimal
    quantity: int
    now: datetime
    tier_id: str | None = None
    event_id: str | None = None


@dataclass(frozen=True)
class ApplyPromoOutput:
    discount: Decimal
    total: Decimal
    promo_code_id: str | None = None
    errors: list[PromoValidationError] = field(default_factory=list)
    success: bool = True


# --- Configuration ---


@dataclass(frozen=True)
class PromoConfig:
    """Promo code rules."""

    code_min_length: int = 1
    code_max_length: int = 50
    code_pattern: str = r"^[A-Z0-9_-]+$"
    generated_length: int = 8
    alphabet: str = "ABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789"
    currency_symbol: str = "₹"
    max_percentage: int = 100
