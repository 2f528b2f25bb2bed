"""Publish component - handles the event go-live workflow."""

import logging
from collections.abc import Collection

from src.components.publish.models import (
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
from src.components.readiness import (
    EnhancedPublishChecklist,
    EventSettingsReadiness,
    build_basic_items,
    checklist_snapshot,
    evaluate,
    load_requirements_from_rules,
)
from src.domain.entities import EventRecord, EventStatus, PublishRequest, WorkspaceRecord
from src.domain.policy import can_approve_publish
from src.rules.models import Rules

logger = logging.getLogger(__name__)

# Type alias for all supported inputs
PublishInput = (
    PublishNowInput
    | RequestApprovalInput
    | ReviewRequestInput
    | CancelRequestInput
    | UnpublishInput
    | ChangeStatusInput
)
PublishOutput = (
    PublishNowOutput
    | RequestApprovalOutput
    | ReviewRequestOutput
    | CancelRequestOutput
    | UnpublishOutput
    | ChangeStatusOutput
)


def _error(code: str, message: str, field: str) -> PublishValidationError:
    return PublishValidationError(code=code, message=message, field=field)


def _event_not_found() -> PublishValidationError:
    return _error("EVENT_NOT_FOUND", "Event not found", "event_id")


def _permission_denied(message: str) -> PublishValidationError:
    return _error("PERMISSION_DENIED", message, "role")


def load_defaults_from_rules(rules: Rules) -> PublishSettings:
    """Publish settings applied when a ROOT workspace has saved none."""
    return PublishSettings(
        require_approval=False,
        approval_roles=tuple(rules.publishing.default_approval_roles),
        requirements=load_requirements_from_rules(rules),
    )


class PublishComponent:
    """Component for managing the event publishing lifecycle."""

    def __init__(
        self,
        event_repo: EventRepoPort,
        workspace_repo: WorkspaceRepoPort,
        request_repo: PublishRequestRepoPort,
        policy: PolicyPort,
        clock: ClockPort,
        history_repo: StatusHistoryPort | None = None,
        defaults: PublishSettings | None = None,
        settings_path_template: str | None = None,
        approver_roles: Collection[str] | None = None,
        priorities: Collection[str] | None = None,
    ) -> None:
        self._event_repo = event_repo
        self._workspace_repo = workspace_repo
        self._request_repo = request_repo
        self._policy = policy
        self._clock = clock
        self._history_repo = history_repo
        self._defaults = defaults or PublishSettings()
        self._settings_path_template = settings_path_template
        # None leaves saved roles and request priorities unrestricted
        self._approver_roles = frozenset(approver_roles) if approver_roles is not None else None
        self._priorities = tuple(priorities) if priorities is not None else None

    def run(self, input_data: PublishInput) -> PublishOutput:
        """Main dispatcher - routes to appropriate handler based on input type."""
        if isinstance(input_data, PublishNowInput):
            return self.run_publish_now(input_data)
        elif isinstance(input_data, RequestApprovalInput):
            return self.run_request_approval(input_data)
        elif isinstance(input_data, ReviewRequestInput):
            return self.run_review_request(input_data)
        elif isinstance(input_data, CancelRequestInput):
            return self.run_cancel_request(input_data)
        elif isinstance(input_data, UnpublishInput):
            return self.run_unpublish(input_data)
        elif isinstance(input_data, ChangeStatusInput):
            return self.run_change_status(input_data)
        else:
            raise TypeError(f"Unknown input type: {type(input_data)}")

    # --- Queries ---

    def publish_settings(self, event_id: str) -> PublishSettings:
        """Settings of the event's ROOT workspace, or the defaults."""
        return self._settings_for(self._workspace_repo.get_root_for_event(event_id))

    def checklist(
        self,
        event_id: str,
        readiness: EventSettingsReadiness,
    ) -> EnhancedPublishChecklist:
        """Full publish checklist for an event, gated by ROOT workspace requirements."""
        event = self._event_repo.get_by_id(event_id)
        root = self._workspace_repo.get_root_for_event(event_id)
        settings = self._settings_for(root)

        base_url = None
        if self._settings_path_template:
            base_url = self._settings_path_template.format(event_id=event_id)

        basic_items = build_basic_items(event, root is not None, self._clock.now_utc())
        return evaluate(readiness, settings.requirements, basic_items, base_url)

    # --- Commands ---

    def run_publish_now(self, input_data: PublishNowInput) -> PublishNowOutput:
        """Publish an event immediately when no approval is required."""
        event = self._event_repo.get_by_id(input_data.event_id)
        if not event:
            return PublishNowOutput(errors=[_event_not_found()], success=False)

        if not self._policy.can_publish_event(input_data.role):
            return PublishNowOutput(
                errors=[_permission_denied("Role not allowed to publish this event")],
                success=False,
            )

        if event.status == "PUBLISHED":
            return PublishNowOutput(
                errors=[_error("ALREADY_PUBLISHED", "Event is already published", "status")],
                success=False,
            )

        if self.publish_settings(event.id).require_approval:
            return PublishNowOutput(
                errors=[
                    _error(
                        "APPROVAL_REQUIRED",
                        "This workspace requires approval before publishing",
                        "event_id",
                    )
                ],
                success=False,
            )

        checklist = self.checklist(event.id, input_data.readiness)
        if not checklist.can_publish:
            errors = [
                _error("CHECKLIST_BLOCKING", f"{item.label}: {item.description}", item.id)
                for item in checklist.items
                if item.required and item.status == "fail"
            ]
            logger.debug("Publish of %s blocked by %d items", event.id, len(errors))
            return PublishNowOutput(errors=errors, success=False)

        self._transition(event, "PUBLISHED", input_data.user_id)
        return PublishNowOutput(errors=[], success=True)

    def run_request_approval(self, input_data: RequestApprovalInput) -> RequestApprovalOutput:
        """Submit the event for review by the ROOT workspace approvers."""
        event = self._event_repo.get_by_id(input_data.event_id)
        if not event:
            return RequestApprovalOutput(errors=[_event_not_found()], success=False)

        if input_data.role is None:
            return RequestApprovalOutput(
                errors=[_permission_denied("Only workspace members can request approval")],
                success=False,
            )

        if self._priorities is not None and input_data.priority not in self._priorities:
            return RequestApprovalOutput(
                errors=[
                    _error(
                        "INVALID_PRIORITY",
                        f"Priority must be one of: {', '.join(self._priorities)}",
                        "priority",
                    )
                ],
                success=False,
            )

        root = self._workspace_repo.get_root_for_event(event.id)
        if root is None:
            return RequestApprovalOutput(
                errors=[
                    _error(
                        "ROOT_WORKSPACE_MISSING",
                        "No ROOT workspace found for this event",
                        "event_id",
                    )
                ],
                success=False,
            )

        if event.status == "PUBLISHED":
            return RequestApprovalOutput(
                errors=[_error("ALREADY_PUBLISHED", "Event is already published", "status")],
                success=False,
            )

        latest = self._request_repo.get_latest_for_event(event.id)
        if latest is not None and latest.status == "pending":
            return RequestApprovalOutput(
                errors=[
                    _error(
                        "REQUEST_PENDING",
                        "A publish request is already awaiting review",
                        "event_id",
                    )
                ],
                success=False,
            )

        snapshot = checklist_snapshot(self.checklist(event.id, input_data.readiness))
        if input_data.notes:
            snapshot["notes"] = input_data.notes

        request = self._request_repo.save(
            PublishRequest(
                event_id=event.id,
                workspace_id=root.id,
                requested_by=input_data.user_id,
                priority=input_data.priority,
                checklist_snapshot=snapshot,
                requested_at=self._clock.now_utc(),
            )
        )
        logger.info(
            "Publish approval requested for event %s by %s (priority=%s)",
            event.id,
            input_data.user_id,
            request.priority,
        )
        return RequestApprovalOutput(errors=[], success=True, request=request)

    def run_review_request(self, input_data: ReviewRequestInput) -> ReviewRequestOutput:
        """Approve (and publish) or reject a pending request."""
        request = self._request_repo.get_by_id(input_data.request_id)
        if not request:
            return ReviewRequestOutput(
                errors=[_error("REQUEST_NOT_FOUND", "Publish request not found", "request_id")],
                success=False,
            )

        if request.status != "pending":
            return ReviewRequestOutput(
                errors=[
                    _error(
                        "REQUEST_NOT_PENDING",
                        f"Request was already {request.status}",
                        "request_id",
                    )
                ],
                success=False,
            )

        settings = self._settings_for(self._workspace_repo.get_by_id(request.workspace_id))
        if not can_approve_publish(input_data.role, settings.approval_roles):
            return ReviewRequestOutput(
                errors=[_permission_denied("Role not allowed to review publish requests")],
                success=False,
            )

        if not input_data.approve and not (input_data.notes or "").strip():
            return ReviewRequestOutput(
                errors=[
                    _error(
                        "REVIEW_NOTES_REQUIRED",
                        "Provide a reason for rejecting this request",
                        "notes",
                    )
                ],
                success=False,
            )

        event = self._event_repo.get_by_id(request.event_id)
        if input_data.approve and not event:
            return ReviewRequestOutput(errors=[_event_not_found()], success=False)

        reviewed = self._request_repo.save(
            request.model_copy(
                update={
                    "status": "approved" if input_data.approve else "rejected",
                    "reviewer_id": input_data.user_id,
                    "review_notes": input_data.notes,
                    "reviewed_at": self._clock.now_utc(),
                }
            )
        )
        logger.info(
            "Publish request %s %s by %s", reviewed.id, reviewed.status, input_data.user_id
        )

        if input_data.approve and event is not None and event.status != "PUBLISHED":
            self._transition(event, "PUBLISHED", input_data.user_id, "Publish request approved")

        return ReviewRequestOutput(errors=[], success=True, request=reviewed)

    def run_cancel_request(self, input_data: CancelRequestInput) -> CancelRequestOutput:
        """Withdraw a pending request; only the requester or a publisher may cancel."""
        request = self._request_repo.get_by_id(input_data.request_id)
        if not request:
            return CancelRequestOutput(
                errors=[_error("REQUEST_NOT_FOUND", "Publish request not found", "request_id")],
                success=False,
            )

        if request.status != "pending":
            return CancelRequestOutput(
                errors=[
                    _error(
                        "REQUEST_NOT_PENDING",
                        "Only pending requests can be cancelled",
                        "request_id",
                    )
                ],
                success=False,
            )

        is_requester = request.requested_by == input_data.user_id
        if not is_requester and not self._policy.can_publish_event(input_data.role):
            return CancelRequestOutput(
                errors=[_permission_denied("Not allowed to cancel this request")],
                success=False,
            )

        self._request_repo.delete(request.id)
        logger.info("Publish request %s cancelled by %s", request.id, input_data.user_id)
        return CancelRequestOutput(errors=[], success=True)

    def run_unpublish(self, input_data: UnpublishInput) -> UnpublishOutput:
        """Unpublish an event (return to draft)."""
        event = self._event_repo.get_by_id(input_data.event_id)
        if not event:
            return UnpublishOutput(errors=[_event_not_found()], success=False)

        if not self._policy.can_publish_event(input_data.role):
            return UnpublishOutput(
                errors=[_permission_denied("Role not allowed to unpublish")],
                success=False,
            )

        if event.status != "PUBLISHED":
            return UnpublishOutput(
                errors=[_error("NOT_PUBLISHED", "Event is not published", "status")],
                success=False,
            )

        self._transition(event, "DRAFT", input_data.user_id)
        return UnpublishOutput(errors=[], success=True)

    def run_change_status(self, input_data: ChangeStatusInput) -> ChangeStatusOutput:
        """Move an event through its lifecycle outside the publish flow."""
        event = self._event_repo.get_by_id(input_data.event_id)
        if not event:
            return ChangeStatusOutput(errors=[_event_not_found()], success=False)

        if not self._policy.can_publish_event(input_data.role):
            return ChangeStatusOutput(
                errors=[_permission_denied("Role not allowed to change event status")],
                success=False,
            )

        previous = event.status
        if input_data.new_status == previous:
            return ChangeStatusOutput(
                errors=[_error("STATUS_UNCHANGED", f"Event is already {previous}", "new_status")],
                success=False,
                previous_status=previous,
            )

        # Going live must pass the checklist and approval gates
        if input_data.new_status == "PUBLISHED":
            return ChangeStatusOutput(
                errors=[
                    _error(
                        "USE_PUBLISH_WORKFLOW",
                        "Use publish or request approval to publish an event",
                        "new_status",
                    )
                ],
                success=False,
                previous_status=previous,
            )

        self._transition(event, input_data.new_status, input_data.user_id, input_data.reason)
        return ChangeStatusOutput(errors=[], success=True, previous_status=previous)

    # --- Helpers ---

    def _settings_for(self, workspace: WorkspaceRecord | None) -> PublishSettings:
        if workspace is None:
            return self._defaults
        return PublishSettings.from_workspace_settings(
            workspace.settings, self._defaults, self._approver_roles
        )

    def _transition(
        self,
        event: EventRecord,
        new_status: EventStatus,
        user_id: str,
        reason: str | None = None,
    ) -> EventRecord:
        previous = event.status
        updated = self._event_repo.save(event.model_copy(update={"status": new_status}))

        if self._history_repo is not None:
            self._history_repo.append(
                StatusChange(
                    event_id=event.id,
                    previous_status=previous,
                    new_status=new_status,
                    changed_by=user_id,
                    changed_at=self._clock.now_utc(),
                    reason=reason,
                )
            )

        logger.info("Event %s status %s -> %s by %s", event.id, previous, new_status, user_id)
        return updated
