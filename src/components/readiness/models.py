"""
Readiness component models.

Per-category completion flags, workspace publish requirements and the
publish checklist produced from them.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Literal

from src.domain.entities import PromoCode, RegistrationType, TicketTier

CheckStatus = Literal["pass", "warning", "fail"]
ChecklistCategory = Literal["basic", "event-space"]

# --- Derived completion flags ---


@dataclass(frozen=True)
class LandingPageReadiness:
    configured: bool = False
    has_content: bool = False
    has_slug: bool = False


@dataclass(frozen=True)
class TicketingReadiness:
    configured: bool = False
    registration_type: RegistrationType | None = None
    is_free: bool = False
    has_ticket_tiers: bool = False


@dataclass(frozen=True)
class SeoReadiness:
    configured: bool = False
    has_meta_description: bool = False
    has_slug: bool = False
    has_og_image: bool = False


@dataclass(frozen=True)
class AccessibilityReadiness:
    configured: bool = False
    has_language: bool = False
    features_count: int = 0


@dataclass(frozen=True)
class PromoCodesReadiness:
    has_active_codes: bool = False
    code_count: int = 0


@dataclass(frozen=True)
class EventSettingsReadiness:
    """Completion flags for every event-space settings category."""

    landing_page: LandingPageReadiness = field(default_factory=LandingPageReadiness)
    ticketing: TicketingReadiness = field(default_factory=TicketingReadiness)
    seo: SeoReadiness = field(default_factory=SeoReadiness)
    accessibility: AccessibilityReadiness = field(default_factory=AccessibilityReadiness)
    promo_codes: PromoCodesReadiness = field(default_factory=PromoCodesReadiness)


# --- Requirements ---

# Workspace settings JSON uses camelCase keys
_REQUIREMENT_KEYS = {
    "require_landing_page": "requireLandingPage",
    "require_ticketing_config": "requireTicketingConfig",
    "require_seo": "requireSEO",
    "require_accessibility": "requireAccessibility",
}


@dataclass(frozen=True)
class PublishRequirements:
    """Which event-space categories block publishing."""

    require_landing_page: bool = True
    require_ticketing_config: bool = True
    require_seo: bool = False
    require_accessibility: bool = False

    @classmethod
    def from_settings(
        cls,
        raw: dict[str, Any] | None,
        defaults: PublishRequirements | None = None,
    ) -> PublishRequirements:
        """Read camelCase workspace settings; missing keys fall back to defaults."""
        defaults = defaults or cls()
        raw = raw or {}
        values = {
            attr: bool(raw.get(key, getattr(defaults, attr)))
            for attr, key in _REQUIREMENT_KEYS.items()
        }
        return cls(**values)

    def to_settings(self) -> dict[str, bool]:
        return {key: getattr(self, attr) for attr, key in _REQUIREMENT_KEYS.items()}


DEFAULT_PUBLISH_REQUIREMENTS = PublishRequirements()


# --- Checklist ---


@dataclass(frozen=True)
class ChecklistItem:
    id: str
    label: str
    description: str
    status: CheckStatus
    required: bool
    category: ChecklistCategory
    settings_link: str | None = None
    settings_tab: str | None = None


@dataclass(frozen=True)
class ChecklistCategories:
    basic: list[ChecklistItem]
    event_space: list[ChecklistItem]


@dataclass(frozen=True)
class EnhancedPublishChecklist:
    items: list[ChecklistItem]
    categories: ChecklistCategories
    can_publish: bool
    pass_count: int
    warning_count: int
    fail_count: int
    blocking_count: int  # required items that fail
    completion_percentage: int


# --- Raw configuration snapshot ---


@dataclass(frozen=True)
class EventSpaceConfig:
    """Event-space settings as fetched from the backend."""

    landing_page_content: str | None = None
    slug: str | None = None
    registration_type: RegistrationType | None = None
    is_free: bool = False
    meta_description: str | None = None
    og_image_url: str | None = None
    language: str | None = None
    accessibility_features: list[str] = field(default_factory=list)


# --- Run inputs ---


@dataclass(frozen=True)
class EvaluateInput:
    settings: EventSettingsReadiness
    requirements: PublishRequirements = DEFAULT_PUBLISH_REQUIREMENTS
    basic_items: list[ChecklistItem] = field(default_factory=list)
    settings_base_url: str | None = None


@dataclass(frozen=True)
class DeriveInput:
    config: EventSpaceConfig
    now: datetime
    promo_codes: list[PromoCode] = field(default_factory=list)
    tiers: list[TicketTier] = field(default_factory=list)
