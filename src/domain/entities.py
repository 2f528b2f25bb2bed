from datetime import UTC, datetime
from decimal import Decimal
from typing import Annotated, Any, Literal
from uuid import uuid4

from pydantic import AfterValidator, BaseModel, Field


def _now() -> datetime:
    return datetime.now(UTC)


def _new_id() -> str:
    return str(uuid4())


def as_utc(value: datetime) -> datetime:
    """Naive timestamps are taken as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


# Compared against the aware clock, so never naive
UtcDatetime = Annotated[datetime, AfterValidator(as_utc)]


# --- Enums / Literals ---
EventStatus = Literal["DRAFT", "PUBLISHED", "ONGOING", "COMPLETED", "CANCELLED"]
EventMode = Literal["OFFLINE", "ONLINE", "HYBRID"]
EventVisibility = Literal["PUBLIC", "PRIVATE", "UNLISTED"]
WorkspaceType = Literal["ROOT", "DEPARTMENT", "COMMITTEE", "TEAM"]
DiscountType = Literal["percentage", "fixed"]
RegistrationType = Literal["open", "approval", "invite"]
PublishRequestStatus = Literal["pending", "approved", "rejected"]
PublishPriority = Literal["low", "medium", "high", "urgent"]

# --- Events & Workspaces ---

class EventRecord(BaseModel):
    id: str = Field(default_factory=_new_id)
    name: str = ""
    description: str | None = None
    status: EventStatus = "DRAFT"
    start_date: UtcDatetime | None = None
    end_date: UtcDatetime | None = None
    mode: EventMode | None = None
    visibility: EventVisibility | None = None
    capacity: int | None = None

class WorkspaceRecord(BaseModel):
    id: str = Field(default_factory=_new_id)
    event_id: str | None = None
    name: str
    workspace_type: WorkspaceType = "ROOT"
    parent_workspace_id: str | None = None
    # Free-form JSON column; publish settings live under camelCase keys
    settings: dict[str, Any] = Field(default_factory=dict)

class PublishRequest(BaseModel):
    id: str = Field(default_factory=_new_id)
    event_id: str
    workspace_id: str
    requested_by: str
    status: PublishRequestStatus = "pending"
    priority: PublishPriority = "medium"
    reviewer_id: str | None = None
    review_notes: str | None = None
    checklist_snapshot: dict[str, Any] | None = None
    requested_at: UtcDatetime = Field(default_factory=_now)
    reviewed_at: UtcDatetime | None = None

# --- Ticketing ---

class TicketTier(BaseModel):
    id: str = Field(default_factory=_new_id)
    event_id: str
    name: str
    description: str | None = None
    price: Decimal = Decimal("0")
    currency: str | None = None  # None = configured default currency
    quantity: int | None = None  # None = unlimited
    sold_count: int = 0
    sale_start: UtcDatetime | None = None
    sale_end: UtcDatetime | None = None
    is_active: bool = True
    sort_order: int = 0

class PromoCode(BaseModel):
    id: str = Field(default_factory=_new_id)
    event_id: str
    code: str
    name: str | None = None
    discount_type: DiscountType = "percentage"
    discount_value: Decimal
    max_uses: int | None = None  # None = unlimited
    current_uses: int = 0
    valid_from: UtcDatetime | None = None
    valid_until: UtcDatetime | None = None
    min_quantity: int | None = 1
    max_quantity: int | None = None
    applicable_tier_ids: list[str] | None = None  # None/empty = all tiers
    is_active: bool = True
    created_at: UtcDatetime = Field(default_factory=_now)
