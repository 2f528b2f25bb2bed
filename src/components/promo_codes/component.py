"""
Promo code component.

Pure functions for promo code lifecycle status and discount calculation,
plus the checkout redemption check built on top of them.

Key behaviors:
- status_of precedence is inactive > upcoming > expired > exhausted > active
- calculate_discount never returns less than 0 or more than the subtotal
- tier and minimum quantity restrictions gate the discount to 0
"""

from __future__ import annotations

import logging
import re
import secrets
from datetime import datetime
from decimal import Decimal

from src.domain.entities import PromoCode
from src.rules.models import Rules

from .models import (
    STATUS_ERROR_CODES,
    STATUS_LABELS,
    ApplyPromoInput,
    ApplyPromoOutput,
    DiscountInput,
    DiscountOutput,
    PromoCodeStatus,
    PromoConfig,
    PromoValidationError,
    StatusInput,
    StatusOutput,
)

logger = logging.getLogger(__name__)

_ZERO = Decimal("0")
_HUNDRED = Decimal("100")


# --- Pure Functions ---


def status_of(code: PromoCode, now: datetime) -> PromoCodeStatus:
    """
    Lifecycle status of a promo code at `now`.

    Checks run in a fixed order and the first match wins, so an inactive
    code that has also expired reports "inactive".
    """
    if not code.is_active:
        return "inactive"
    if code.valid_from is not None and now < code.valid_from:
        return "upcoming"
    if code.valid_until is not None and now > code.valid_until:
        return "expired"
    if code.max_uses is not None and code.current_uses >= code.max_uses:
        return "exhausted"
    return "active"


def status_label(status: PromoCodeStatus) -> str:
    return STATUS_LABELS[status]


def remaining_uses(code: PromoCode) -> int | None:
    """Uses left before the code is exhausted, or None if unlimited."""
    if code.max_uses is None:
        return None
    return max(0, code.max_uses - code.current_uses)


def applies_to_tier(code: PromoCode, tier_id: str | None) -> bool:
    """A code without tier restrictions applies to every tier."""
    if not code.applicable_tier_ids:
        return True
    return tier_id is not None and tier_id in code.applicable_tier_ids


def meets_min_quantity(code: PromoCode, quantity: int) -> bool:
    return code.min_quantity is None or quantity >= code.min_quantity


def calculate_discount(
    code: PromoCode,
    subtotal: Decimal,
    quantity: int,
    tier_id: str | None = None,
) -> Decimal:
    """
    Discount for a cart, clamped to the subtotal.

    Percentage codes discount the whole subtotal. Fixed codes discount a
    flat amount per ticket, counting at most max_quantity tickets.

    Args:
        code: Promo code definition
        subtotal: Cart subtotal
        quantity: Number of tickets in the cart
        tier_id: Ticket tier being purchased

    Returns:
        Discount amount in [0, subtotal]
    """
    if not applies_to_tier(code, tier_id):
        return _ZERO

    if not meets_min_quantity(code, quantity):
        return _ZERO

    if code.discount_type == "percentage":
        discount = subtotal * code.discount_value / _HUNDRED
    else:
        effective_quantity = quantity
        if code.max_quantity is not None:
            effective_quantity = min(quantity, code.max_quantity)
        discount = code.discount_value * effective_quantity

    return min(discount, subtotal)


def format_discount(code: PromoCode, currency_symbol: str = "₹") -> str:
    """Human readable discount, e.g. '20%' or '₹50.00'."""
    if code.discount_type == "percentage":
        value = code.discount_value
        if value == value.to_integral_value():
            return f"{int(value)}%"
        return f"{value.normalize():f}%"
    return f"{currency_symbol}{code.discount_value:.2f}"


def normalize_code(raw: str) -> str:
    """Codes are stored upper-case; lookups ignore case and padding."""
    return raw.strip().upper()


def find_code(
    raw: str,
    promo_codes: list[PromoCode],
    event_id: str | None = None,
) -> PromoCode | None:
    wanted = normalize_code(raw)
    for candidate in promo_codes:
        if event_id is not None and candidate.event_id != event_id:
            continue
        if normalize_code(candidate.code) == wanted:
            return candidate
    return None


def generate_code(config: PromoConfig | None = None) -> str:
    """Random code drawn from the configured alphabet."""
    config = config or PromoConfig()
    return "".join(secrets.choice(config.alphabet) for _ in range(config.generated_length))


def validate_promo_code_definition(
    code: PromoCode,
    config: PromoConfig | None = None,
) -> list[PromoValidationError]:
    """
    Validate an organizer-entered promo code before it is saved.

    Returns:
        List of validation errors (empty if valid)
    """
    config = config or PromoConfig()
    errors: list[PromoValidationError] = []

    normalized = normalize_code(code.code)
    if len(normalized) < config.code_min_length:
        errors.append(PromoValidationError("required", "Code is required", "code"))
    elif len(normalized) > config.code_max_length:
        errors.append(
            PromoValidationError(
                "max_length",
                f"Code must not exceed {config.code_max_length} characters",
                "code",
            )
        )
    elif not re.match(config.code_pattern, normalized):
        errors.append(
            PromoValidationError(
                "invalid_format",
                "Code may only contain letters, digits, '-' and '_'",
                "code",
            )
        )

    if code.discount_value <= 0:
        errors.append(
            PromoValidationError("min_value", "Must be greater than 0", "discount_value")
        )
    elif code.discount_type == "percentage" and code.discount_value > config.max_percentage:
        errors.append(
            PromoValidationError(
                "max_value",
                f"Percentage discount cannot exceed {config.max_percentage}",
                "discount_value",
            )
        )

    if code.max_uses is not None and code.max_uses < 1:
        errors.append(PromoValidationError("min_value", "Max uses must be at least 1", "max_uses"))

    if code.min_quantity is not None and code.min_quantity < 1:
        errors.append(
            PromoValidationError("min_value", "Min tickets must be at least 1", "min_quantity")
        )

    if code.max_quantity is not None:
        if code.max_quantity < 1:
            errors.append(
                PromoValidationError(
                    "min_value", "Max tickets must be at least 1", "max_quantity"
                )
            )
        elif code.min_quantity is not None and code.max_quantity < code.min_quantity:
            errors.append(
                PromoValidationError(
                    "invalid_range",
                    "Max tickets cannot be lower than min tickets",
                    "max_quantity",
                )
            )

    if (
        code.valid_from is not None
        and code.valid_until is not None
        and code.valid_until <= code.valid_from
    ):
        errors.append(
            PromoValidationError(
                "invalid_range", "Valid until must be after valid from", "valid_until"
            )
        )

    return errors


def apply_promo_code(input_data: ApplyPromoInput) -> ApplyPromoOutput:
    """
    Check a code typed at checkout and price the discount.

    Unlike calculate_discount, which silently returns 0, this reports why
    a code was rejected so the attendee sees an actionable message.
    """
    subtotal = input_data.subtotal

    def _reject(error: PromoValidationError, promo_id: str | None = None) -> ApplyPromoOutput:
        logger.debug("Promo code %r rejected: %s", input_data.code, error.code)
        return ApplyPromoOutput(
            discount=_ZERO,
            total=subtotal,
            promo_code_id=promo_id,
            errors=[error],
            success=False,
        )

    code = find_code(input_data.code, input_data.promo_codes, input_data.event_id)
    if code is None:
        return _reject(PromoValidationError("PROMO_NOT_FOUND", "Invalid promo code", "code"))

    status = status_of(code, input_data.now)
    if status != "active":
        return _reject(
            PromoValidationError(
                STATUS_ERROR_CODES[status],
                f"Promo code is {status_label(status).lower()}",
                "code",
            ),
            code.id,
        )

    if not applies_to_tier(code, input_data.tier_id):
        return _reject(
            PromoValidationError(
                "PROMO_TIER_NOT_APPLICABLE",
                "Promo code does not apply to this ticket tier",
                "tier_id",
            ),
            code.id,
        )

    if not meets_min_quantity(code, input_data.quantity):
        return _reject(
            PromoValidationError(
                "PROMO_MIN_QUANTITY",
                f"Promo code requires at least {code.min_quantity} tickets",
                "quantity",
            ),
            code.id,
        )

    discount = calculate_discount(code, subtotal, input_data.quantity, input_data.tier_id)
    return ApplyPromoOutput(
        discount=discount,
        total=subtotal - discount,
        promo_code_id=code.id,
    )


# --- Run Function (Atomic Component Pattern) ---


def run(
    input_data: StatusInput | DiscountInput | ApplyPromoInput,
) -> StatusOutput | DiscountOutput | ApplyPromoOutput:
    """Run a promo code operation based on input type."""
    if isinstance(input_data, StatusInput):
        status = status_of(input_data.promo_code, input_data.now)
        return StatusOutput(
            status=status,
            label=status_label(status),
            remaining_uses=remaining_uses(input_data.promo_code),
        )

    if isinstance(input_data, DiscountInput):
        discount = calculate_discount(
            input_data.promo_code,
            input_data.subtotal,
            input_data.quantity,
            input_data.tier_id,
        )
        return DiscountOutput(discount=discount, total=input_data.subtotal - discount)

    if isinstance(input_data, ApplyPromoInput):
        return apply_promo_code(input_data)

    raise TypeError(f"Unknown input type: {type(input_data)}")


# --- Configuration Loader ---


def load_config_from_rules(rules: Rules) -> PromoConfig:
    promo = rules.promo_codes
    return PromoConfig(
        code_min_length=promo.code.min,
        code_max_length=promo.code.max,
        code_pattern=promo.code.pattern,
        generated_length=promo.generated_length,
        alphabet=promo.alphabet,
        currency_symbol=promo.currency_symbol,
        max_percentage=promo.max_percentage,
    )
