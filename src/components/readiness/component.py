"""
Readiness component - publish checklist evaluation.

Turns event/workspace configuration into a pass/warning/fail checklist and
an aggregate publish permission. All functions are pure and total: an empty
configuration yields worst-case statuses, never an exception.

Key behaviors:
- Unconfigured categories fail only when the workspace requires them
- Promo codes are informational and never block publishing
- can_publish is true iff no required item fails
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from datetime import datetime
from typing import Any

from src.components.promo_codes import status_of
from src.domain.entities import EventRecord, PromoCode, TicketTier
from src.rules.models import Rules

from .models import (
    AccessibilityReadiness,
    ChecklistCategories,
    ChecklistItem,
    CheckStatus,
    DeriveInput,
    EnhancedPublishChecklist,
    EvaluateInput,
    EventSettingsReadiness,
    EventSpaceConfig,
    LandingPageReadiness,
    PromoCodesReadiness,
    PublishRequirements,
    SeoReadiness,
    TicketingReadiness,
)


@dataclass(frozen=True)
class _EventSpaceCheck:
    id: str
    label: str
    settings_tab: str
    configured_description: str
    missing_description: str


_LANDING_PAGE = _EventSpaceCheck(
    id="landing-page",
    label="Landing Page",
    settings_tab="landing-page",
    configured_description="Landing page has content and a URL slug",
    missing_description="Add landing page content and a URL slug",
)
_TICKETING = _EventSpaceCheck(
    id="ticketing",
    label="Ticketing",
    settings_tab="ticketing",
    configured_description="Registration type and tickets are configured",
    missing_description="Choose a registration type and add ticket tiers or mark the event free",
)
_SEO = _EventSpaceCheck(
    id="seo",
    label="SEO Settings",
    settings_tab="seo",
    configured_description="Meta description and URL slug are set",
    missing_description="Add a meta description and URL slug",
)
_ACCESSIBILITY = _EventSpaceCheck(
    id="accessibility",
    label="Accessibility",
    settings_tab="accessibility",
    configured_description="Event language and accessibility features are set",
    missing_description="Set the event language and accessibility features",
)
_PROMO_CODES = _EventSpaceCheck(
    id="promo-codes",
    label="Promo Codes",
    settings_tab="promo-codes",
    configured_description="Active promo codes are available",
    missing_description="No active promo codes (optional)",
)


def _status_for(configured: bool, required: bool) -> CheckStatus:
    if configured:
        return "pass"
    return "fail" if required else "warning"


def _event_space_item(
    check: _EventSpaceCheck,
    status: CheckStatus,
    required: bool,
    settings_base_url: str | None,
) -> ChecklistItem:
    return ChecklistItem(
        id=check.id,
        label=check.label,
        description=(
            check.configured_description if status == "pass" else check.missing_description
        ),
        status=status,
        required=required,
        category="event-space",
        settings_tab=check.settings_tab,
        settings_link=(
            f"{settings_base_url}?tab={check.settings_tab}" if settings_base_url else None
        ),
    )


def build_event_space_items(
    settings: EventSettingsReadiness,
    requirements: PublishRequirements,
    settings_base_url: str | None = None,
) -> list[ChecklistItem]:
    """Event-space items in display order."""
    gated = [
        (_LANDING_PAGE, settings.landing_page.configured, requirements.require_landing_page),
        (_TICKETING, settings.ticketing.configured, requirements.require_ticketing_config),
        (_SEO, settings.seo.configured, requirements.require_seo),
        (_ACCESSIBILITY, settings.accessibility.configured, requirements.require_accessibility),
    ]
    items = [
        _event_space_item(check, _status_for(configured, required), required, settings_base_url)
        for check, configured, required in gated
    ]

    promo_status: CheckStatus = "pass" if settings.promo_codes.has_active_codes else "warning"
    items.append(_event_space_item(_PROMO_CODES, promo_status, False, settings_base_url))
    return items


def _round_half_up_percentage(part: int, total: int) -> int:
    if total <= 0:
        return 0
    return (200 * part + total) // (2 * total)


def evaluate(
    settings: EventSettingsReadiness,
    requirements: PublishRequirements,
    basic_items: list[ChecklistItem] | tuple[ChecklistItem, ...] = (),
    settings_base_url: str | None = None,
) -> EnhancedPublishChecklist:
    """
    Evaluate publish readiness.

    Args:
        settings: Completion flags per event-space category
        requirements: Which categories the ROOT workspace requires
        basic_items: Basic event checks, listed first and kept in order
        settings_base_url: Optional base for per-item settings links

    Returns:
        EnhancedPublishChecklist with counts and the publish decision
    """
    basic = list(basic_items)
    event_space = build_event_space_items(settings, requirements, settings_base_url)
    items = basic + event_space

    pass_count = sum(1 for item in items if item.status == "pass")
    warning_count = sum(1 for item in items if item.status == "warning")
    fail_count = sum(1 for item in items if item.status == "fail")
    blocking_count = sum(1 for item in items if item.required and item.status == "fail")

    return EnhancedPublishChecklist(
        items=items,
        categories=ChecklistCategories(basic=basic, event_space=event_space),
        can_publish=blocking_count == 0,
        pass_count=pass_count,
        warning_count=warning_count,
        fail_count=fail_count,
        blocking_count=blocking_count,
        completion_percentage=_round_half_up_percentage(pass_count, len(items)),
    )


def build_basic_items(
    event: EventRecord | None,
    has_root_workspace: bool,
    now: datetime,
) -> list[ChecklistItem]:
    """Basic event checks shown above the event-space items."""

    def item(
        item_id: str, label: str, description: str, ok: bool, required: bool
    ) -> ChecklistItem:
        return ChecklistItem(
            id=item_id,
            label=label,
            description=description,
            status=_status_for(ok, required),
            required=required,
            category="basic",
        )

    has_info = bool(event and event.name and event.description)
    has_dates = bool(event and event.start_date and event.end_date)
    is_past = bool(event and event.start_date and event.start_date < now)

    return [
        item(
            "basic-info",
            "Basic Information",
            "Event name and description are configured",
            has_info,
            True,
        ),
        item("dates", "Event Dates", "Start and end dates are set", has_dates, True),
        item(
            "future-date",
            "Event Date Valid",
            "Event start date is in the future",
            not is_past,
            False,
        ),
        item(
            "root-workspace",
            "ROOT Workspace",
            "A ROOT workspace exists for the event",
            has_root_workspace,
            True,
        ),
        item(
            "visibility",
            "Event Visibility",
            "Event visibility is configured",
            bool(event and event.visibility),
            False,
        ),
        item(
            "capacity",
            "Capacity Limit",
            "Event capacity is defined",
            bool(event and event.capacity),
            False,
        ),
    ]


def derive_settings_readiness(
    config: EventSpaceConfig,
    now: datetime,
    promo_codes: list[PromoCode] | None = None,
    tiers: list[TicketTier] | None = None,
) -> EventSettingsReadiness:
    """Compute completion flags from a raw event-space settings snapshot."""
    promo_codes = promo_codes or []
    tiers = tiers or []

    has_content = bool(config.landing_page_content and config.landing_page_content.strip())
    has_slug = bool(config.slug)
    has_tiers = any(tier.is_active for tier in tiers)
    has_meta = bool(config.meta_description and config.meta_description.strip())
    has_language = bool(config.language)

    return EventSettingsReadiness(
        landing_page=LandingPageReadiness(
            configured=has_content and has_slug,
            has_content=has_content,
            has_slug=has_slug,
        ),
        ticketing=TicketingReadiness(
            configured=config.registration_type is not None and (config.is_free or has_tiers),
            registration_type=config.registration_type,
            is_free=config.is_free,
            has_ticket_tiers=has_tiers,
        ),
        seo=SeoReadiness(
            configured=has_meta and has_slug,
            has_meta_description=has_meta,
            has_slug=has_slug,
            has_og_image=bool(config.og_image_url),
        ),
        accessibility=AccessibilityReadiness(
            configured=has_language,
            has_language=has_language,
            features_count=len(config.accessibility_features),
        ),
        promo_codes=PromoCodesReadiness(
            has_active_codes=any(status_of(code, now) == "active" for code in promo_codes),
            code_count=len(promo_codes),
        ),
    )


def checklist_snapshot(checklist: EnhancedPublishChecklist) -> dict[str, Any]:
    """JSON-ready snapshot stored alongside a publish approval request."""
    return {
        "items": [asdict(item) for item in checklist.items],
        "canPublish": checklist.can_publish,
        "completionPercentage": checklist.completion_percentage,
    }


# --- Run Function (Atomic Component Pattern) ---


def run(
    input_data: EvaluateInput | DeriveInput,
) -> EnhancedPublishChecklist | EventSettingsReadiness:
    """Run a readiness operation based on input type."""
    if isinstance(input_data, EvaluateInput):
        return evaluate(
            input_data.settings,
            input_data.requirements,
            input_data.basic_items,
            input_data.settings_base_url,
        )

    if isinstance(input_data, DeriveInput):
        return derive_settings_readiness(
            input_data.config,
            input_data.now,
            input_data.promo_codes,
            input_data.tiers,
        )

    raise TypeError(f"Unknown input type: {type(input_data)}")


# --- Configuration Loader ---


def load_requirements_from_rules(rules: Rules) -> PublishRequirements:
    defaults = rules.publishing.default_requirements
    return PublishRequirements(
        require_landing_page=defaults.require_landing_page,
        require_ticketing_config=defaults.require_ticketing_config,
        require_seo=defaults.require_seo,
        require_accessibility=defaults.require_accessibility,
    )
