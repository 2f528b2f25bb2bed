"""Publish component models - frozen dataclass inputs and outputs."""

from __future__ import annotations

from collections.abc import Collection
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from src.components.readiness import (
    DEFAULT_PUBLISH_REQUIREMENTS,
    EventSettingsReadiness,
    PublishRequirements,
)
from src.domain.entities import EventStatus, PublishPriority, PublishRequest
from src.domain.policy import WorkspaceRole

DEFAULT_APPROVAL_ROLES: tuple[str, ...] = (WorkspaceRole.WORKSPACE_OWNER.value,)


@dataclass(frozen=True)
class PublishValidationError:
    """Validation error details for publish operations."""

    code: str
    message: str
    field: str


@dataclass(frozen=True)
class PublishSettings:
    """Publish configuration stored on the ROOT workspace."""

    require_approval: bool = False
    approval_roles: tuple[str, ...] = DEFAULT_APPROVAL_ROLES
    requirements: PublishRequirements = DEFAULT_PUBLISH_REQUIREMENTS

    @classmethod
    def from_workspace_settings(
        cls,
        raw: dict[str, Any] | None,
        defaults: PublishSettings | None = None,
        allowed_roles: Collection[str] | None = None,
    ) -> PublishSettings:
        """
        Read the camelCase settings JSON of a workspace.

        Saved approval roles outside `allowed_roles` are dropped. An empty
        approval role list falls back to the defaults so there is always
        someone who can approve.
        """
        defaults = defaults or cls()
        raw = raw or {}

        roles = tuple(raw.get("publishApprovalRoles") or ())
        if allowed_roles is not None:
            roles = tuple(role for role in roles if role in allowed_roles)
        roles = roles or defaults.approval_roles
        return cls(
            require_approval=bool(
                raw.get("requireEventPublishApproval", defaults.require_approval)
            ),
            approval_roles=roles,
            requirements=PublishRequirements.from_settings(
                raw.get("publishRequirements"), defaults.requirements
            ),
        )

    def to_workspace_settings(self) -> dict[str, Any]:
        return {
            "requireEventPublishApproval": self.require_approval,
            "publishApprovalRoles": list(self.approval_roles),
            "publishRequirements": self.requirements.to_settings(),
        }


@dataclass(frozen=True)
class PublishNowInput:
    """Input for immediate publish operation."""

    user_id: str
    role: WorkspaceRole | None
    event_id: str
    readiness: EventSettingsReadiness


@dataclass(frozen=True)
class PublishNowOutput:
    errors: list[PublishValidationError]
    success: bool


@dataclass(frozen=True)
class RequestApprovalInput:
    """Input for submitting an event for publish approval."""

    user_id: str
    role: WorkspaceRole | None
    event_id: str
    readiness: EventSettingsReadiness
    priority: PublishPriority = "medium"
    notes: str | None = None


@dataclass(frozen=True)
class RequestApprovalOutput:
    errors: list[PublishValidationError]
    success: bool
    request: PublishRequest | None = None


@dataclass(frozen=True)
class ReviewRequestInput:
    """Input for approving or rejecting a pending publish request."""

    user_id: str
    role: WorkspaceRole | None
    request_id: str
    approve: bool
    notes: str | None = None


@dataclass(frozen=True)
class ReviewRequestOutput:
    errors: list[PublishValidationError]
    success: bool
    request: PublishRequest | None = None


@dataclass(frozen=True)
class CancelRequestInput:
    user_id: str
    role: WorkspaceRole | None
    request_id: str


@dataclass(frozen=True)
class CancelRequestOutput:
    errors: list[PublishValidationError]
    success: bool


@dataclass(frozen=True)
class UnpublishInput:
    """Input for unpublish operation."""

    user_id: str
    role: WorkspaceRole | None
    event_id: str


@dataclass(frozen=True)
class UnpublishOutput:
    errors: list[PublishValidationError]
    success: bool


@dataclass(frozen=True)
class ChangeStatusInput:
    """Input for a manual lifecycle change (ongoing, completed, cancelled)."""

    user_id: str
    role: WorkspaceRole | None
    event_id: str
    new_status: EventStatus
    reason: str | None = None


@dataclass(frozen=True)
class ChangeStatusOutput:
    errors: list[PublishValidationError]
    success: bool
    previous_status: EventStatus | None = None


@dataclass(frozen=True)
class StatusChange:
    """Audit entry for an event status transition."""

    event_id: str
    previous_status: EventStatus
    new_status: EventStatus
    changed_by: str
    changed_at: datetime
    reason: str | None = None
