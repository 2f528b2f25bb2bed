"""
Workspace role hierarchy and permission allow-lists.

Four levels, lower number = more authority:
1. WORKSPACE_OWNER
2. department managers
3. committee leads
4. coordinators
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from enum import Enum, IntEnum

from src.rules.models import Rules

MAX_WORKSPACE_DEPTH = 4


class WorkspaceRole(str, Enum):
    # Level 1
    WORKSPACE_OWNER = "WORKSPACE_OWNER"

    # Level 2
    OPERATIONS_MANAGER = "OPERATIONS_MANAGER"
    GROWTH_MANAGER = "GROWTH_MANAGER"
    CONTENT_MANAGER = "CONTENT_MANAGER"
    TECH_FINANCE_MANAGER = "TECH_FINANCE_MANAGER"
    VOLUNTEERS_MANAGER = "VOLUNTEERS_MANAGER"

    # Level 3
    EVENT_LEAD = "EVENT_LEAD"
    CATERING_LEAD = "CATERING_LEAD"
    LOGISTICS_LEAD = "LOGISTICS_LEAD"
    FACILITY_LEAD = "FACILITY_LEAD"
    MARKETING_LEAD = "MARKETING_LEAD"
    COMMUNICATION_LEAD = "COMMUNICATION_LEAD"
    SPONSORSHIP_LEAD = "SPONSORSHIP_LEAD"
    SOCIAL_MEDIA_LEAD = "SOCIAL_MEDIA_LEAD"
    CONTENT_LEAD = "CONTENT_LEAD"
    SPEAKER_LIAISON_LEAD = "SPEAKER_LIAISON_LEAD"
    JUDGE_LEAD = "JUDGE_LEAD"
    MEDIA_LEAD = "MEDIA_LEAD"
    FINANCE_LEAD = "FINANCE_LEAD"
    REGISTRATION_LEAD = "REGISTRATION_LEAD"
    TECHNICAL_LEAD = "TECHNICAL_LEAD"
    IT_LEAD = "IT_LEAD"
    VOLUNTEERS_LEAD = "VOLUNTEERS_LEAD"

    # Level 4
    EVENT_COORDINATOR = "EVENT_COORDINATOR"
    CATERING_COORDINATOR = "CATERING_COORDINATOR"
    LOGISTICS_COORDINATOR = "LOGISTICS_COORDINATOR"
    FACILITY_COORDINATOR = "FACILITY_COORDINATOR"
    MARKETING_COORDINATOR = "MARKETING_COORDINATOR"
    COMMUNICATION_COORDINATOR = "COMMUNICATION_COORDINATOR"
    SPONSORSHIP_COORDINATOR = "SPONSORSHIP_COORDINATOR"
    SOCIAL_MEDIA_COORDINATOR = "SOCIAL_MEDIA_COORDINATOR"
    CONTENT_COORDINATOR = "CONTENT_COORDINATOR"
    SPEAKER_LIAISON_COORDINATOR = "SPEAKER_LIAISON_COORDINATOR"
    JUDGE_COORDINATOR = "JUDGE_COORDINATOR"
    MEDIA_COORDINATOR = "MEDIA_COORDINATOR"
    FINANCE_COORDINATOR = "FINANCE_COORDINATOR"
    REGISTRATION_COORDINATOR = "REGISTRATION_COORDINATOR"
    TECHNICAL_COORDINATOR = "TECHNICAL_COORDINATOR"
    IT_COORDINATOR = "IT_COORDINATOR"
    VOLUNTEER_COORDINATOR = "VOLUNTEER_COORDINATOR"

    @property
    def label(self) -> str:
        return ROLE_LABEL_OVERRIDES.get(self, self.value.replace("_", " ").title())


class HierarchyLevel(IntEnum):
    OWNER = 1
    MANAGER = 2
    LEAD = 3
    COORDINATOR = 4


ROLE_LABEL_OVERRIDES: dict[WorkspaceRole, str] = {
    WorkspaceRole.TECH_FINANCE_MANAGER: "Tech & Finance Manager",
    WorkspaceRole.IT_LEAD: "IT Lead",
    WorkspaceRole.IT_COORDINATOR: "IT Coordinator",
}


def role_level(role: WorkspaceRole) -> HierarchyLevel:
    """Map a role to its hierarchy level."""
    if role is WorkspaceRole.WORKSPACE_OWNER:
        return HierarchyLevel.OWNER
    if role.value.endswith("_MANAGER"):
        return HierarchyLevel.MANAGER
    if role.value.endswith("_LEAD"):
        return HierarchyLevel.LEAD
    return HierarchyLevel.COORDINATOR


def can_manage_role(manager: WorkspaceRole, target: WorkspaceRole) -> bool:
    """A role manages only roles strictly below its own level."""
    return role_level(manager) < role_level(target)


def assignable_roles(role: WorkspaceRole) -> list[WorkspaceRole]:
    level = role_level(role)
    return [r for r in WorkspaceRole if role_level(r) > level]


def roles_by_level() -> dict[HierarchyLevel, list[WorkspaceRole]]:
    result: dict[HierarchyLevel, list[WorkspaceRole]] = {level: [] for level in HierarchyLevel}
    for role in WorkspaceRole:
        result[role_level(role)].append(role)
    return result


def is_global_workspace_manager(role: WorkspaceRole | None) -> bool:
    """Owners and department managers manage workspace-wide settings."""
    if role is None:
        return False
    return role_level(role) <= HierarchyLevel.MANAGER


def can_approve_publish(role: WorkspaceRole | None, approval_roles: Iterable[str]) -> bool:
    if role is None:
        return False
    return role.value in set(approval_roles)


def parse_role(value: str | None) -> WorkspaceRole | None:
    """Parse a stored role string; unknown values map to None (no access)."""
    if not value:
        return None
    try:
        return WorkspaceRole(value)
    except ValueError:
        return None


# --- Workspace nesting ---


def workspace_depth(
    parent_workspace_id: str | None,
    parent_map: Mapping[str, str | None],
    max_depth: int = MAX_WORKSPACE_DEPTH,
) -> int:
    """
    Depth a new workspace would have under the given parent.

    A workspace without a parent is at depth 1. Walking stops one past
    max_depth so a cyclic parent map cannot loop forever.
    """
    depth = 1
    current = parent_workspace_id
    while current and depth <= max_depth:
        depth += 1
        current = parent_map.get(current)

    return depth


def can_create_sub_workspace(
    parent_workspace_id: str | None,
    parent_map: Mapping[str, str | None],
    max_depth: int = MAX_WORKSPACE_DEPTH,
) -> bool:
    return workspace_depth(parent_workspace_id, parent_map, max_depth) <= max_depth


# --- Rules-driven allow-list ---


class PolicyEngine:
    def __init__(self, rules: Rules):
        self.rules = rules

    @property
    def max_depth(self) -> int:
        return self.rules.workspaces.max_depth

    def can(self, role: WorkspaceRole | None, action: str) -> bool:
        """
        Check if the role may perform the action.

        Permissions are listed per hierarchy level in rules.yaml. "*" allows
        everything and "scope:*" allows every action in that scope.
        """
        if role is None:
            return False

        level_name = role_level(role).name.lower()
        allowed = self.rules.workspaces.level_permissions.get(level_name, [])

        if "*" in allowed or action in allowed:
            return True

        if ":" in action:
            scope = action.split(":")[0]
            if f"{scope}:*" in allowed:
                return True

        return False

    def can_publish_event(self, role: WorkspaceRole | None) -> bool:
        return self.can(role, "event:publish")

    def can_manage_settings(self, role: WorkspaceRole | None) -> bool:
        return self.can(role, "settings:manage")

    def can_create_sub_workspace(
        self,
        role: WorkspaceRole | None,
        parent_workspace_id: str | None,
        parent_map: Mapping[str, str | None],
    ) -> bool:
        if not self.can(role, "workspaces:create"):
            return False
        return can_create_sub_workspace(parent_workspace_id, parent_map, self.max_depth)
