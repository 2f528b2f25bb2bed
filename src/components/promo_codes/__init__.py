"""
Promo code component.

Public API for promo code status, discount calculation and redemption.
"""

from .component import (
    applies_to_tier,
    apply_promo_code,
    calculate_discount,
    find_code,
    format_discount,
    generate_code,
    load_config_from_rules,
    meets_min_quantity,
    normalize_code,
    remaining_uses,
    run,
    status_label,
    status_of,
    validate_promo_code_definition,
)
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

__all__ = [
    # Functions
    "applies_to_tier",
    "apply_promo_code",
    "calculate_discount",
    "find_code",
    "format_discount",
    "generate_code",
    "load_config_from_rules",
    "meets_min_quantity",
    "normalize_code",
    "remaining_uses",
    "run",
    "status_label",
    "status_of",
    "validate_promo_code_definition",
    # Models
    "ApplyPromoInput",
    "ApplyPromoOutput",
    "DiscountInput",
    "DiscountOutput",
    "PromoCodeStatus",
    "PromoConfig",
    "PromoValidationError",
    "StatusInput",
    "StatusOutput",
    "STATUS_ERROR_CODES",
    "STATUS_LABELS",
]
