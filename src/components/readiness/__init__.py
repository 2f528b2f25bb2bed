"""
Readiness component.

Public API for publish-readiness checklist evaluation.
"""

from .component import (
    build_basic_items,
    build_event_space_items,
    checklist_snapshot,
    derive_settings_readiness,
    evaluate,
    load_requirements_from_rules,
    run,
)
from .models import (
    DEFAULT_PUBLISH_REQUIREMENTS,
    AccessibilityReadiness,
    ChecklistCategories,
    ChecklistCategory,
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

__all__ = [
    # Functions
    "build_basic_items",
    "build_event_space_items",
    "checklist_snapshot",
    "derive_settings_readiness",
    "evaluate",
    "load_requirements_from_rules",
    "run",
    # Models
    "AccessibilityReadiness",
    "ChecklistCategories",
    "ChecklistCategory",
    "ChecklistItem",
    "CheckStatus",
    "DeriveInput",
    "EnhancedPublishChecklist",
    "EvaluateInput",
    "EventSettingsReadiness",
    "EventSpaceConfig",
    "LandingPageReadiness",
    "PromoCodesReadiness",
    "PublishRequirements",
    "SeoReadiness",
    "TicketingReadiness",
    # Constants
    "DEFAULT_PUBLISH_REQUIREMENTS",
]
