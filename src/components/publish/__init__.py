"""Publish component - manages the event go-live workflow."""

from src.components.publish.component import (
    PublishComponent,
    PublishInput,
    PublishOutput,
    load_defaults_from_rules,
)
from src.components.publish.models import (
    DEFAULT_APPROVAL_ROLES,
    CancelRequestInput,
    CancelRequestOutput,
    ChangeStatusInput,
    ChangeStatusOutput,
    PublishNowInput,
    PublishNowOutput,
    PublishSettings,
    PublishValidationError,
    RequestApprovalInput,
    RequestApprovalOutput,
    ReviewRequestInput,
    ReviewRequestOutput,
    StatusChange,
    UnpublishInput,
    UnpublishOutput,
)
from src.components.publish.ports import (
    ClockPort,
    EventRepoPort,
    PolicyPort,
    PublishRequestRepoPort,
    StatusHistoryPort,
    WorkspaceRepoPort,
)

__all__ = [
    # Component
    "PublishComponent",
    "PublishInput",
    "PublishOutput",
    "load_defaults_from_rules",
    # Models
    "DEFAULT_APPROVAL_ROLES",
    "CancelRequestInput",
    "CancelRequestOutput",
    "ChangeStatusInput",
    "ChangeStatusOutput",
    "PublishNowInput",
    "PublishNowOutput",
    "PublishSettings",
    "PublishValidationError",
    "RequestApprovalInput",
    "RequestApprovalOutput",
    "ReviewRequestInput",
    "ReviewRequestOutput",
    "StatusChange",
    "UnpublishInput",
    "UnpublishOutput",
    # Ports
    "ClockPort",
    "EventRepoPort",
    "PolicyPort",
    "PublishRequestRepoPort",
    "StatusHistoryPort",
    "WorkspaceRepoPort",
]
