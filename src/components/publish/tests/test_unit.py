"""
Publish component unit tests.

Tests for direct publishing, the approval workflow, unpublishing and
manual status changes.
"""

from __future__ import annotations

from datetime import UTC, datetime, timedelta
from pathlib import Path

import pytest

from src.adapters.clock import FrozenClock
from src.adapters.memory import (
    InMemoryEventRepo,
    InMemoryPublishRequestRepo,
    InMemoryStatusHistory,
    InMemoryWorkspaceRepo,
)
from src.components.publish import (
    CancelRequestInput,
    ChangeStatusInput,
    PublishComponent,
    PublishNowInput,
    PublishSettings,
    RequestApprovalInput,
    ReviewRequestInput,
    UnpublishInput,
    load_defaults_from_rules,
)
from src.components.readiness import (
    EventSettingsReadiness,
    LandingPageReadiness,
    TicketingReadiness,
)
from src.domain.entities import EventRecord, WorkspaceRecord
from src.domain.policy import PolicyEngine, WorkspaceRole
from src.rules.loader import load_rules

NOW = datetime(2026, 3, 1, 12, 0, tzinfo=UTC)
RULES_PATH = Path(__file__).resolve().parents[4] / "rules.yaml"

OWNER = WorkspaceRole.WORKSPACE_OWNER
OPS_MANAGER = WorkspaceRole.OPERATIONS_MANAGER
EVENT_LEAD = WorkspaceRole.EVENT_LEAD

READY = EventSettingsReadiness(
    landing_page=LandingPageReadiness(configured=True, has_content=True, has_slug=True),
    ticketing=TicketingReadiness(configured=True, registration_type="open", is_free=True),
)


# --- Fixtures ---


@pytest.fixture
def rules():
    return load_rules(RULES_PATH)


@pytest.fixture
def event_repo() -> InMemoryEventRepo:
    return InMemoryEventRepo(
        [
            EventRecord(
                id="evt-1",
                name="Summit",
                description="Annual summit",
                start_date=NOW + timedelta(days=30),
                end_date=NOW + timedelta(days=31),
                visibility="PUBLIC",
                capacity=300,
            )
        ]
    )


@pytest.fixture
def workspace_repo() -> InMemoryWorkspaceRepo:
    return InMemoryWorkspaceRepo([WorkspaceRecord(id="ws-root", event_id="evt-1", name="Summit")])


@pytest.fixture
def request_repo() -> InMemoryPublishRequestRepo:
    return InMemoryPublishRequestRepo()


@pytest.fixture
def history() -> InMemoryStatusHistory:
    return InMemoryStatusHistory()


@pytest.fixture
def clock() -> FrozenClock:
    return FrozenClock(NOW)


@pytest.fixture
def component(
    rules,
    event_repo: InMemoryEventRepo,
    workspace_repo: InMemoryWorkspaceRepo,
    request_repo: InMemoryPublishRequestRepo,
    history: InMemoryStatusHistory,
    clock: FrozenClock,
) -> PublishComponent:
    return PublishComponent(
        event_repo=event_repo,
        workspace_repo=workspace_repo,
        request_repo=request_repo,
        policy=PolicyEngine(rules),
        clock=clock,
        history_repo=history,
        defaults=load_defaults_from_rules(rules),
        settings_path_template=rules.publishing.settings_path_template,
        approver_roles=rules.publishing.approver_roles,
        priorities=rules.publishing.priorities,
    )


def require_approval(workspace_repo: InMemoryWorkspaceRepo, roles: list[str]) -> None:
    root = workspace_repo.get_by_id("ws-root")
    assert root is not None
    workspace_repo.save(
        root.model_copy(
            update={
                "settings": {
                    "requireEventPublishApproval": True,
                    "publishApprovalRoles": roles,
                }
            }
        )
    )


# --- Settings Tests ---


class TestPublishSettings:
    def test_defaults(self) -> None:
        settings = PublishSettings.from_workspace_settings({})
        assert settings.require_approval is False
        assert settings.approval_roles == ("WORKSPACE_OWNER",)
        assert settings.requirements.require_landing_page is True

    def test_empty_roles_fall_back(self) -> None:
        settings = PublishSettings.from_workspace_settings({"publishApprovalRoles": []})
        assert settings.approval_roles == ("WORKSPACE_OWNER",)

    def test_reads_nested_requirements(self) -> None:
        settings = PublishSettings.from_workspace_settings(
            {
                "requireEventPublishApproval": True,
                "publishApprovalRoles": ["OPERATIONS_MANAGER"],
                "publishRequirements": {"requireSEO": True},
            }
        )
        assert settings.require_approval is True
        assert settings.approval_roles == ("OPERATIONS_MANAGER",)
        assert settings.requirements.require_seo is True

    def test_roles_outside_allowed_set_are_dropped(self) -> None:
        settings = PublishSettings.from_workspace_settings(
            {"publishApprovalRoles": ["EVENT_LEAD", "OPERATIONS_MANAGER"]},
            allowed_roles={"WORKSPACE_OWNER", "OPERATIONS_MANAGER"},
        )
        assert settings.approval_roles == ("OPERATIONS_MANAGER",)

    def test_no_allowed_roles_left_falls_back(self) -> None:
        settings = PublishSettings.from_workspace_settings(
            {"publishApprovalRoles": ["VOLUNTEER_COORDINATOR"]},
            allowed_roles={"WORKSPACE_OWNER"},
        )
        assert settings.approval_roles == ("WORKSPACE_OWNER",)

    def test_round_trip_keys(self) -> None:
        raw = PublishSettings(require_approval=True).to_workspace_settings()
        assert set(raw) == {
            "requireEventPublishApproval",
            "publishApprovalRoles",
            "publishRequirements",
        }


# --- Checklist Tests ---


class TestChecklist:
    def test_ready_event_can_publish(self, component: PublishComponent) -> None:
        checklist = component.checklist("evt-1", READY)
        assert checklist.can_publish is True
        assert len(checklist.categories.basic) == 6
        assert len(checklist.categories.event_space) == 5

    def test_links_use_event_settings_path(self, component: PublishComponent) -> None:
        checklist = component.checklist("evt-1", READY)
        seo = next(item for item in checklist.items if item.id == "seo")
        assert seo.settings_link == "/events/evt-1/settings?tab=seo"

    def test_root_requirements_apply(
        self, component: PublishComponent, workspace_repo: InMemoryWorkspaceRepo
    ) -> None:
        root = workspace_repo.get_by_id("ws-root")
        assert root is not None
        workspace_repo.save(
            root.model_copy(update={"settings": {"publishRequirements": {"requireSEO": True}}})
        )
        checklist = component.checklist("evt-1", READY)
        assert checklist.can_publish is False
        seo = next(item for item in checklist.items if item.id == "seo")
        assert seo.status == "fail"

    def test_missing_root_workspace_blocks(self, component: PublishComponent) -> None:
        checklist = component.checklist("evt-2", READY)
        assert checklist.can_publish is False


# --- Publish Now Tests ---


class TestPublishNow:
    """Test immediate publish functionality."""

    def test_publish_success(
        self,
        component: PublishComponent,
        event_repo: InMemoryEventRepo,
        history: InMemoryStatusHistory,
    ) -> None:
        result = component.run(
            PublishNowInput(user_id="u1", role=OWNER, event_id="evt-1", readiness=READY)
        )
        assert result.success is True
        event = event_repo.get_by_id("evt-1")
        assert event is not None and event.status == "PUBLISHED"
        assert [(c.previous_status, c.new_status) for c in history.entries] == [
            ("DRAFT", "PUBLISHED")
        ]

    def test_event_not_found(self, component: PublishComponent) -> None:
        result = component.run_publish_now(
            PublishNowInput(user_id="u1", role=OWNER, event_id="missing", readiness=READY)
        )
        assert result.errors[0].code == "EVENT_NOT_FOUND"

    def test_lead_cannot_publish(self, component: PublishComponent) -> None:
        result = component.run_publish_now(
            PublishNowInput(user_id="u1", role=EVENT_LEAD, event_id="evt-1", readiness=READY)
        )
        assert result.success is False
        assert result.errors[0].code == "PERMISSION_DENIED"

    def test_blocking_items_reported(self, component: PublishComponent) -> None:
        result = component.run_publish_now(
            PublishNowInput(
                user_id="u1",
                role=OWNER,
                event_id="evt-1",
                readiness=EventSettingsReadiness(),
            )
        )
        assert result.success is False
        assert {e.field for e in result.errors} == {"landing-page", "ticketing"}
        assert all(e.code == "CHECKLIST_BLOCKING" for e in result.errors)

    def test_approval_required_rejects_direct_publish(
        self, component: PublishComponent, workspace_repo: InMemoryWorkspaceRepo
    ) -> None:
        require_approval(workspace_repo, ["WORKSPACE_OWNER"])
        result = component.run_publish_now(
            PublishNowInput(user_id="u1", role=OWNER, event_id="evt-1", readiness=READY)
        )
        assert result.errors[0].code == "APPROVAL_REQUIRED"

    def test_already_published(
        self, component: PublishComponent, event_repo: InMemoryEventRepo
    ) -> None:
        event = event_repo.get_by_id("evt-1")
        assert event is not None
        event_repo.save(event.model_copy(update={"status": "PUBLISHED"}))
        result = component.run_publish_now(
            PublishNowInput(user_id="u1", role=OWNER, event_id="evt-1", readiness=READY)
        )
        assert result.errors[0].code == "ALREADY_PUBLISHED"


# --- Approval Workflow Tests ---


class TestApprovalWorkflow:
    def _request(self, component: PublishComponent, **overrides: object):
        data: dict[str, object] = {
            "user_id": "u-lead",
            "role": EVENT_LEAD,
            "event_id": "evt-1",
            "readiness": READY,
            "priority": "high",
            "notes": "Ready for launch",
        }
        data.update(overrides)
        return component.run(RequestApprovalInput(**data))  # type: ignore[arg-type]

    def test_request_stores_snapshot(self, component: PublishComponent) -> None:
        result = self._request(component)
        assert result.success is True
        request = result.request
        assert request.status == "pending"
        assert request.workspace_id == "ws-root"
        assert request.priority == "high"
        assert request.requested_at == NOW
        assert request.checklist_snapshot["canPublish"] is True
        assert request.checklist_snapshot["notes"] == "Ready for launch"

    def test_duplicate_pending_rejected(self, component: PublishComponent) -> None:
        self._request(component)
        result = self._request(component)
        assert result.errors[0].code == "REQUEST_PENDING"

    def test_requires_root_workspace(
        self, component: PublishComponent, event_repo: InMemoryEventRepo
    ) -> None:
        event_repo.save(EventRecord(id="evt-2", name="Orphan"))
        result = self._request(component, event_id="evt-2")
        assert result.errors[0].code == "ROOT_WORKSPACE_MISSING"

    def test_non_member_cannot_request(self, component: PublishComponent) -> None:
        result = self._request(component, role=None)
        assert result.errors[0].code == "PERMISSION_DENIED"

    def test_priority_must_be_configured(
        self,
        rules,
        event_repo: InMemoryEventRepo,
        workspace_repo: InMemoryWorkspaceRepo,
        request_repo: InMemoryPublishRequestRepo,
        clock: FrozenClock,
    ) -> None:
        component = PublishComponent(
            event_repo=event_repo,
            workspace_repo=workspace_repo,
            request_repo=request_repo,
            policy=PolicyEngine(rules),
            clock=clock,
            priorities=("low", "medium"),
        )
        result = self._request(component, priority="urgent")
        assert result.success is False
        assert result.errors[0].code == "INVALID_PRIORITY"
        assert result.errors[0].field == "priority"
        assert request_repo.get_latest_for_event("evt-1") is None

    def test_saved_non_approver_role_cannot_review(
        self, component: PublishComponent, workspace_repo: InMemoryWorkspaceRepo
    ) -> None:
        # EVENT_LEAD is not an approver role, so the owner default applies
        require_approval(workspace_repo, ["EVENT_LEAD"])
        request = self._request(component).request

        denied = component.run_review_request(
            ReviewRequestInput(
                user_id="u-lead2", role=EVENT_LEAD, request_id=request.id, approve=True
            )
        )
        approved = component.run_review_request(
            ReviewRequestInput(user_id="u-owner", role=OWNER, request_id=request.id, approve=True)
        )

        assert denied.errors[0].code == "PERMISSION_DENIED"
        assert approved.request.status == "approved"

    def test_approve_publishes_event(
        self,
        component: PublishComponent,
        event_repo: InMemoryEventRepo,
        workspace_repo: InMemoryWorkspaceRepo,
        clock: FrozenClock,
    ) -> None:
        require_approval(workspace_repo, ["OPERATIONS_MANAGER"])
        request = self._request(component).request
        clock.advance(3600)

        result = component.run(
            ReviewRequestInput(
                user_id="u-ops", role=OPS_MANAGER, request_id=request.id, approve=True
            )
        )
        assert result.success is True
        assert result.request.status == "approved"
        assert result.request.reviewer_id == "u-ops"
        assert result.request.reviewed_at == NOW + timedelta(hours=1)
        event = event_repo.get_by_id("evt-1")
        assert event is not None and event.status == "PUBLISHED"

    def test_reject_keeps_draft(
        self, component: PublishComponent, event_repo: InMemoryEventRepo
    ) -> None:
        request = self._request(component).request
        result = component.run_review_request(
            ReviewRequestInput(
                user_id="u-owner",
                role=OWNER,
                request_id=request.id,
                approve=False,
                notes="Add a landing page hero",
            )
        )
        assert result.request.status == "rejected"
        assert result.request.review_notes == "Add a landing page hero"
        event = event_repo.get_by_id("evt-1")
        assert event is not None and event.status == "DRAFT"

    @pytest.mark.parametrize("notes", [None, "", "   "])
    def test_reject_needs_a_reason(self, component: PublishComponent, notes: str | None) -> None:
        request = self._request(component).request
        result = component.run_review_request(
            ReviewRequestInput(
                user_id="u-owner", role=OWNER, request_id=request.id, approve=False, notes=notes
            )
        )
        assert result.success is False
        assert result.errors[0].code == "REVIEW_NOTES_REQUIRED"
        assert result.errors[0].field == "notes"
        # Still pending, so it can be reviewed again
        retry = component.run_review_request(
            ReviewRequestInput(
                user_id="u-owner", role=OWNER, request_id=request.id, approve=False, notes="Why"
            )
        )
        assert retry.request.status == "rejected"

    def test_reviewer_must_hold_approval_role(self, component: PublishComponent) -> None:
        request = self._request(component).request
        # Default approval roles are owner only
        result = component.run_review_request(
            ReviewRequestInput(
                user_id="u-ops", role=OPS_MANAGER, request_id=request.id, approve=True
            )
        )
        assert result.errors[0].code == "PERMISSION_DENIED"

    def test_cannot_review_twice(self, component: PublishComponent) -> None:
        request = self._request(component).request
        review = ReviewRequestInput(
            user_id="u-owner", role=OWNER, request_id=request.id, approve=False, notes="Not yet"
        )
        component.run_review_request(review)
        result = component.run_review_request(review)
        assert result.errors[0].code == "REQUEST_NOT_PENDING"

    def test_requester_can_cancel(
        self, component: PublishComponent, request_repo: InMemoryPublishRequestRepo
    ) -> None:
        request = self._request(component).request
        result = component.run(
            CancelRequestInput(user_id="u-lead", role=EVENT_LEAD, request_id=request.id)
        )
        assert result.success is True
        assert request_repo.get_by_id(request.id) is None

    def test_other_lead_cannot_cancel(self, component: PublishComponent) -> None:
        request = self._request(component).request
        result = component.run_cancel_request(
            CancelRequestInput(
                user_id="u-other", role=WorkspaceRole.MARKETING_LEAD, request_id=request.id
            )
        )
        assert result.errors[0].code == "PERMISSION_DENIED"

    def test_cancel_unknown_request(self, component: PublishComponent) -> None:
        result = component.run_cancel_request(
            CancelRequestInput(user_id="u1", role=OWNER, request_id="nope")
        )
        assert result.errors[0].code == "REQUEST_NOT_FOUND"


# --- Unpublish / Status Tests ---


class TestUnpublishAndStatus:
    def _publish(self, component: PublishComponent) -> None:
        component.run_publish_now(
            PublishNowInput(user_id="u1", role=OWNER, event_id="evt-1", readiness=READY)
        )

    def test_unpublish_returns_to_draft(
        self, component: PublishComponent, event_repo: InMemoryEventRepo
    ) -> None:
        self._publish(component)
        result = component.run(UnpublishInput(user_id="u1", role=OPS_MANAGER, event_id="evt-1"))
        assert result.success is True
        event = event_repo.get_by_id("evt-1")
        assert event is not None and event.status == "DRAFT"

    def test_unpublish_draft_rejected(self, component: PublishComponent) -> None:
        result = component.run_unpublish(UnpublishInput(user_id="u1", role=OWNER, event_id="evt-1"))
        assert result.errors[0].code == "NOT_PUBLISHED"

    def test_change_status_records_reason(
        self, component: PublishComponent, history: InMemoryStatusHistory
    ) -> None:
        self._publish(component)
        result = component.run(
            ChangeStatusInput(
                user_id="u1",
                role=OWNER,
                event_id="evt-1",
                new_status="CANCELLED",
                reason="Venue unavailable",
            )
        )
        assert result.success is True
        assert result.previous_status == "PUBLISHED"
        assert history.for_event("evt-1")[-1].reason == "Venue unavailable"

    def test_change_to_same_status(self, component: PublishComponent) -> None:
        result = component.run_change_status(
            ChangeStatusInput(user_id="u1", role=OWNER, event_id="evt-1", new_status="DRAFT")
        )
        assert result.errors[0].code == "STATUS_UNCHANGED"

    def test_change_status_cannot_bypass_publish(self, component: PublishComponent) -> None:
        result = component.run_change_status(
            ChangeStatusInput(user_id="u1", role=OWNER, event_id="evt-1", new_status="PUBLISHED")
        )
        assert result.errors[0].code == "USE_PUBLISH_WORKFLOW"

    def test_coordinator_cannot_change_status(self, component: PublishComponent) -> None:
        result = component.run_change_status(
            ChangeStatusInput(
                user_id="u1",
                role=WorkspaceRole.EVENT_COORDINATOR,
                event_id="evt-1",
                new_status="ONGOING",
            )
        )
        assert result.errors[0].code == "PERMISSION_DENIED"


class TestRunDispatch:
    def test_unknown_input(self, component: PublishComponent) -> None:
        with pytest.raises(TypeError):
            component.run("publish")  # type: ignore[arg-type]
