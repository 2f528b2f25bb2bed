"""
Workspace API Routes.

Role hierarchy lookups and permission checks.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from src.adapters.memory import EventStore
from src.api.deps import get_policy, get_store
from src.domain.policy import (
    PolicyEngine,
    WorkspaceRole,
    assignable_roles,
    is_global_workspace_manager,
    parse_role,
    role_level,
    workspace_depth,
)

router = APIRouter()


class RoleResponse(BaseModel):
    role: str
    label: str
    level: int
    level_name: str
    is_global_manager: bool


class PermissionCheckRequest(BaseModel):
    role: str | None
    action: str


class PermissionCheckResponse(BaseModel):
    role: str | None
    action: str
    allowed: bool


class SubWorkspaceCheckRequest(BaseModel):
    role: str | None
    parent_workspace_id: str | None = None


class SubWorkspaceCheckResponse(BaseModel):
    depth: int
    max_depth: int
    allowed: bool


def _role_response(role: WorkspaceRole) -> RoleResponse:
    level = role_level(role)
    return RoleResponse(
        role=role.value,
        label=role.label,
        level=int(level),
        level_name=level.name,
        is_global_manager=is_global_workspace_manager(role),
    )


def _require_role(value: str) -> WorkspaceRole:
    role = parse_role(value)
    if role is None:
        raise HTTPException(status_code=404, detail=f"Unknown role: {value}")
    return role


@router.get("/roles", response_model=list[RoleResponse])
def list_roles() -> list[RoleResponse]:
    return [_role_response(role) for role in WorkspaceRole]


@router.get("/roles/{role}", response_model=RoleResponse)
def get_role(role: str) -> RoleResponse:
    return _role_response(_require_role(role))


@router.get("/roles/{role}/assignable", response_model=list[RoleResponse])
def list_assignable(role: str) -> list[RoleResponse]:
    """Roles this role may assign to others (strictly lower levels)."""
    return [_role_response(r) for r in assignable_roles(_require_role(role))]


@router.post("/permissions/check", response_model=PermissionCheckResponse)
def check_permission(
    request: PermissionCheckRequest,
    policy: PolicyEngine = Depends(get_policy),
) -> PermissionCheckResponse:
    return PermissionCheckResponse(
        role=request.role,
        action=request.action,
        allowed=policy.can(parse_role(request.role), request.action),
    )


@router.post("/sub-workspaces/check", response_model=SubWorkspaceCheckResponse)
def check_sub_workspace(
    request: SubWorkspaceCheckRequest,
    policy: PolicyEngine = Depends(get_policy),
    store: EventStore = Depends(get_store),
) -> SubWorkspaceCheckResponse:
    """Whether the role may nest a new workspace under the given parent."""
    parent_map = store.workspaces.parent_map()
    return SubWorkspaceCheckResponse(
        depth=workspace_depth(request.parent_workspace_id, parent_map, policy.max_depth),
        max_depth=policy.max_depth,
        allowed=policy.can_create_sub_workspace(
            parse_role(request.role), request.parent_workspace_id, parent_map
        ),
    )
