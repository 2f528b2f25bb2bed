"""
Publish API Routes.

Direct publishing, the approval workflow and manual status changes for
stored events. The caller is identified by the X-User-Id and
X-Workspace-Role headers.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel

from src.adapters.memory import EventStore
from src.api.deps import Actor, get_actor, get_clock, get_publish_component, get_store
from src.api.routes.readiness import readiness_for_event
from src.api.schemas import ValidationErrorResponse, serialize_errors
from src.components.publish import (
    CancelRequestInput,
    ChangeStatusInput,
    PublishComponent,
    PublishNowInput,
    PublishValidationError,
    RequestApprovalInput,
    ReviewRequestInput,
    UnpublishInput,
)
from src.domain.entities import EventStatus, PublishPriority, PublishRequest
from src.ports.clock import ClockPort

router = APIRouter()

_NOT_FOUND_CODES = {"EVENT_NOT_FOUND", "REQUEST_NOT_FOUND"}


class PublishSettingsResponse(BaseModel):
    require_approval: bool
    approval_roles: list[str]
    requirements: dict[str, bool]


class ApprovalRequestBody(BaseModel):
    priority: PublishPriority = "medium"
    notes: str | None = None


class ReviewBody(BaseModel):
    approve: bool
    notes: str | None = None


class StatusChangeBody(BaseModel):
    new_status: EventStatus
    reason: str | None = None


class PublishRequestResponse(BaseModel):
    id: str
    event_id: str
    workspace_id: str
    requested_by: str
    status: str
    priority: str
    reviewer_id: str | None = None
    review_notes: str | None = None
    checklist_snapshot: dict[str, Any] | None = None
    requested_at: datetime
    reviewed_at: datetime | None = None


class StatusResponse(BaseModel):
    event_id: str
    status: str


# --- Helpers ---


def _raise_for_errors(errors: list[PublishValidationError]) -> None:
    """Map component errors to 404 / 403 / 400."""
    if not errors:
        return
    codes = {e.code for e in errors}
    if codes & _NOT_FOUND_CODES:
        status_code = status.HTTP_404_NOT_FOUND
    elif "PERMISSION_DENIED" in codes:
        status_code = status.HTTP_403_FORBIDDEN
    else:
        status_code = status.HTTP_400_BAD_REQUEST
    raise HTTPException(status_code=status_code, detail={"errors": serialize_errors(errors)})


def _request_response(request: PublishRequest) -> PublishRequestResponse:
    return PublishRequestResponse(**request.model_dump())


def _status_response(store: EventStore, event_id: str) -> StatusResponse:
    event = store.events.get_by_id(event_id)
    assert event is not None
    return StatusResponse(event_id=event.id, status=event.status)


_ERROR_RESPONSES: dict[int | str, dict[str, Any]] = {
    400: {"model": ValidationErrorResponse},
    403: {"model": ValidationErrorResponse},
    404: {"model": ValidationErrorResponse},
}


# --- Routes ---


@router.get("/{event_id}/publish-settings", response_model=PublishSettingsResponse)
def publish_settings(
    event_id: str,
    component: PublishComponent = Depends(get_publish_component),
) -> PublishSettingsResponse:
    """Publish settings of the event's ROOT workspace."""
    settings = component.publish_settings(event_id)
    return PublishSettingsResponse(
        require_approval=settings.require_approval,
        approval_roles=list(settings.approval_roles),
        requirements=settings.requirements.to_settings(),
    )


@router.post("/{event_id}/publish", response_model=StatusResponse, responses=_ERROR_RESPONSES)
def publish_now(
    event_id: str,
    actor: Actor = Depends(get_actor),
    store: EventStore = Depends(get_store),
    component: PublishComponent = Depends(get_publish_component),
    clock: ClockPort = Depends(get_clock),
) -> StatusResponse:
    result = component.run_publish_now(
        PublishNowInput(
            user_id=actor.user_id,
            role=actor.role,
            event_id=event_id,
            readiness=readiness_for_event(store, event_id, clock.now_utc()),
        )
    )
    _raise_for_errors(result.errors)
    return _status_response(store, event_id)


@router.post(
    "/{event_id}/publish-requests",
    response_model=PublishRequestResponse,
    status_code=201,
    responses=_ERROR_RESPONSES,
)
def request_approval(
    event_id: str,
    body: ApprovalRequestBody,
    actor: Actor = Depends(get_actor),
    store: EventStore = Depends(get_store),
    component: PublishComponent = Depends(get_publish_component),
    clock: ClockPort = Depends(get_clock),
) -> PublishRequestResponse:
    result = component.run_request_approval(
        RequestApprovalInput(
            user_id=actor.user_id,
            role=actor.role,
            event_id=event_id,
            readiness=readiness_for_event(store, event_id, clock.now_utc()),
            priority=body.priority,
            notes=body.notes,
        )
    )
    _raise_for_errors(result.errors)
    assert result.request is not None
    return _request_response(result.request)


@router.get(
    "/{event_id}/publish-requests/latest",
    response_model=PublishRequestResponse,
    responses={404: {"description": "No publish request"}},
)
def latest_request(
    event_id: str,
    store: EventStore = Depends(get_store),
) -> PublishRequestResponse:
    request = store.requests.get_latest_for_event(event_id)
    if request is None:
        raise HTTPException(status_code=404, detail="No publish request for this event")
    return _request_response(request)


@router.post(
    "/publish-requests/{request_id}/review",
    response_model=PublishRequestResponse,
    responses=_ERROR_RESPONSES,
)
def review_request(
    request_id: str,
    body: ReviewBody,
    actor: Actor = Depends(get_actor),
    component: PublishComponent = Depends(get_publish_component),
) -> PublishRequestResponse:
    result = component.run_review_request(
        ReviewRequestInput(
            user_id=actor.user_id,
            role=actor.role,
            request_id=request_id,
            approve=body.approve,
            notes=body.notes,
        )
    )
    _raise_for_errors(result.errors)
    assert result.request is not None
    return _request_response(result.request)


@router.delete("/publish-requests/{request_id}", status_code=204, responses=_ERROR_RESPONSES)
def cancel_request(
    request_id: str,
    actor: Actor = Depends(get_actor),
    component: PublishComponent = Depends(get_publish_component),
) -> None:
    result = component.run_cancel_request(
        CancelRequestInput(user_id=actor.user_id, role=actor.role, request_id=request_id)
    )
    _raise_for_errors(result.errors)


@router.post("/{event_id}/unpublish", response_model=StatusResponse, responses=_ERROR_RESPONSES)
def unpublish(
    event_id: str,
    actor: Actor = Depends(get_actor),
    store: EventStore = Depends(get_store),
    component: PublishComponent = Depends(get_publish_component),
) -> StatusResponse:
    result = component.run_unpublish(
        UnpublishInput(user_id=actor.user_id, role=actor.role, event_id=event_id)
    )
    _raise_for_errors(result.errors)
    return _status_response(store, event_id)


@router.post("/{event_id}/status", response_model=StatusResponse, responses=_ERROR_RESPONSES)
def change_status(
    event_id: str,
    body: StatusChangeBody,
    actor: Actor = Depends(get_actor),
    store: EventStore = Depends(get_store),
    component: PublishComponent = Depends(get_publish_component),
) -> StatusResponse:
    result = component.run_change_status(
        ChangeStatusInput(
            user_id=actor.user_id,
            role=actor.role,
            event_id=event_id,
            new_status=body.new_status,
            reason=body.reason,
        )
    )
    _raise_for_errors(result.errors)
    return _status_response(store, event_id)
