"""
Promo Code API Routes.

Status, discount preview, checkout redemption and organizer-side validation
for promo codes.
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field

from src.adapters.memory import EventStore
from src.api.deps import get_clock, get_promo_config, get_store
from src.api.schemas import ErrorModel, ValidationErrorResponse, serialize_errors
from src.components.promo_codes import (
    ApplyPromoInput,
    PromoConfig,
    apply_promo_code,
    calculate_discount,
    format_discount,
    generate_code,
    remaining_uses,
    status_label,
    status_of,
    validate_promo_code_definition,
)
from src.domain.entities import PromoCode, UtcDatetime
from src.ports.clock import ClockPort

router = APIRouter()


class StatusRequest(BaseModel):
    promo_code: PromoCode
    now: UtcDatetime | None = None


class StatusResponse(BaseModel):
    code: str
    status: str
    label: str
    remaining_uses: int | None
    discount_display: str


class DiscountRequest(BaseModel):
    promo_code: PromoCode
    subtotal: Decimal = Field(..., ge=0)
    quantity: int = Field(..., ge=0)
    tier_id: str | None = None


class DiscountResponse(BaseModel):
    discount: Decimal
    total: Decimal


class ApplyRequest(BaseModel):
    """Code typed at checkout for a stored event."""

    event_id: str
    code: str
    subtotal: Decimal = Field(..., ge=0)
    quantity: int = Field(..., ge=1)
    tier_id: str | None = None


class ApplyResponse(BaseModel):
    promo_code_id: str | None
    discount: Decimal
    total: Decimal


class ValidateResponse(BaseModel):
    valid: bool
    errors: list[ErrorModel]


class GenerateResponse(BaseModel):
    code: str


# --- Helpers ---


def _status_response(code: PromoCode, now: datetime, config: PromoConfig) -> StatusResponse:
    status = status_of(code, now)
    return StatusResponse(
        code=code.code,
        status=status,
        label=status_label(status),
        remaining_uses=remaining_uses(code),
        discount_display=format_discount(code, config.currency_symbol),
    )


# --- Routes ---


@router.post("/status", response_model=StatusResponse)
def promo_status(
    request: StatusRequest,
    clock: ClockPort = Depends(get_clock),
    config: PromoConfig = Depends(get_promo_config),
) -> StatusResponse:
    """Lifecycle status of a posted promo code."""
    return _status_response(request.promo_code, request.now or clock.now_utc(), config)


@router.post("/discount", response_model=DiscountResponse)
def preview_discount(request: DiscountRequest) -> DiscountResponse:
    """Discount a code would give a cart, ignoring its lifecycle status."""
    discount = calculate_discount(
        request.promo_code, request.subtotal, request.quantity, request.tier_id
    )
    return DiscountResponse(discount=discount, total=request.subtotal - discount)


@router.post(
    "/apply",
    response_model=ApplyResponse,
    responses={400: {"model": ValidationErrorResponse}},
)
def apply_code(
    request: ApplyRequest,
    store: EventStore = Depends(get_store),
    clock: ClockPort = Depends(get_clock),
) -> ApplyResponse:
    """Redeem a code at checkout."""
    result = apply_promo_code(
        ApplyPromoInput(
            code=request.code,
            promo_codes=store.promo_codes.get(request.event_id, []),
            subtotal=request.subtotal,
            quantity=request.quantity,
            now=clock.now_utc(),
            tier_id=request.tier_id,
            event_id=request.event_id,
        )
    )
    if not result.success:
        raise HTTPException(status_code=400, detail={"errors": serialize_errors(result.errors)})

    return ApplyResponse(
        promo_code_id=result.promo_code_id,
        discount=result.discount,
        total=result.total,
    )


@router.post("/validate", response_model=ValidateResponse)
def validate_definition(
    promo_code: PromoCode,
    config: PromoConfig = Depends(get_promo_config),
) -> ValidateResponse:
    """Validate an organizer-entered code before saving it."""
    errors = validate_promo_code_definition(promo_code, config)
    return ValidateResponse(
        valid=not errors,
        errors=[ErrorModel(**e) for e in serialize_errors(errors)],
    )


@router.post("/generate", response_model=GenerateResponse)
def generate(config: PromoConfig = Depends(get_promo_config)) -> GenerateResponse:
    """Random code for the organizer form."""
    return GenerateResponse(code=generate_code(config))


@router.get("/events/{event_id}", response_model=list[StatusResponse])
def list_event_codes(
    event_id: str,
    store: EventStore = Depends(get_store),
    clock: ClockPort = Depends(get_clock),
    config: PromoConfig = Depends(get_promo_config),
) -> list[StatusResponse]:
    """Promo codes of a stored event with their current status."""
    now = clock.now_utc()
    return [_status_response(code, now, config) for code in store.promo_codes.get(event_id, [])]
