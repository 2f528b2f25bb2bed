import pytest

from src.domain.policy import (
    HierarchyLevel,
    PolicyEngine,
    WorkspaceRole,
    assignable_roles,
    can_approve_publish,
    can_create_sub_workspace,
    can_manage_role,
    is_global_workspace_manager,
    parse_role,
    role_level,
    roles_by_level,
    workspace_depth,
)

OWNER = WorkspaceRole.WORKSPACE_OWNER
OPS_MANAGER = WorkspaceRole.OPERATIONS_MANAGER
EVENT_LEAD = WorkspaceRole.EVENT_LEAD
IT_COORDINATOR = WorkspaceRole.IT_COORDINATOR


@pytest.fixture
def engine(rules):
    return PolicyEngine(rules)


# --- Hierarchy ---


@pytest.mark.parametrize(
    "role,level",
    [
        (OWNER, HierarchyLevel.OWNER),
        (OPS_MANAGER, HierarchyLevel.MANAGER),
        (WorkspaceRole.TECH_FINANCE_MANAGER, HierarchyLevel.MANAGER),
        (EVENT_LEAD, HierarchyLevel.LEAD),
        (WorkspaceRole.SPEAKER_LIAISON_LEAD, HierarchyLevel.LEAD),
        (IT_COORDINATOR, HierarchyLevel.COORDINATOR),
        (WorkspaceRole.VOLUNTEER_COORDINATOR, HierarchyLevel.COORDINATOR),
    ],
)
def test_role_level(role, level):
    assert role_level(role) is level


def test_every_level_has_roles():
    grouped = roles_by_level()
    assert grouped[HierarchyLevel.OWNER] == [OWNER]
    assert len(grouped[HierarchyLevel.MANAGER]) == 5
    assert sum(len(roles) for roles in grouped.values()) == len(WorkspaceRole)


def test_manage_only_strictly_lower_levels():
    assert can_manage_role(OWNER, OPS_MANAGER) is True
    assert can_manage_role(OPS_MANAGER, EVENT_LEAD) is True
    assert can_manage_role(OPS_MANAGER, WorkspaceRole.GROWTH_MANAGER) is False
    assert can_manage_role(IT_COORDINATOR, OWNER) is False
    assert can_manage_role(OWNER, OWNER) is False


def test_assignable_roles_excludes_own_level():
    assignable = assignable_roles(EVENT_LEAD)
    assert IT_COORDINATOR in assignable
    assert EVENT_LEAD not in assignable
    assert all(role_level(r) is HierarchyLevel.COORDINATOR for r in assignable)
    assert assignable_roles(IT_COORDINATOR) == []


def test_global_workspace_managers():
    assert is_global_workspace_manager(OWNER) is True
    assert is_global_workspace_manager(OPS_MANAGER) is True
    assert is_global_workspace_manager(EVENT_LEAD) is False
    assert is_global_workspace_manager(None) is False


def test_labels():
    assert OPS_MANAGER.label == "Operations Manager"
    assert WorkspaceRole.TECH_FINANCE_MANAGER.label == "Tech & Finance Manager"
    assert WorkspaceRole.IT_LEAD.label == "IT Lead"


def test_parse_role_unknown_is_none():
    assert parse_role("EVENT_LEAD") is EVENT_LEAD
    assert parse_role("SUPREME_LEADER") is None
    assert parse_role("") is None
    assert parse_role(None) is None


def test_can_approve_publish():
    approvers = ["WORKSPACE_OWNER", "OPERATIONS_MANAGER"]
    assert can_approve_publish(OPS_MANAGER, approvers) is True
    assert can_approve_publish(EVENT_LEAD, approvers) is False
    assert can_approve_publish(None, approvers) is False


# --- Workspace nesting ---


PARENTS = {
    "root": None,
    "dept": "root",
    "committee": "dept",
    "team": "committee",
}


def test_depth_without_parent_is_one():
    assert workspace_depth(None, PARENTS) == 1


def test_depth_counts_ancestors():
    assert workspace_depth("root", PARENTS) == 2
    assert workspace_depth("dept", PARENTS) == 3
    assert workspace_depth("committee", PARENTS) == 4
    assert workspace_depth("team", PARENTS) == 5


def test_sub_workspace_allowed_up_to_max_depth():
    assert can_create_sub_workspace("committee", PARENTS) is True
    assert can_create_sub_workspace("team", PARENTS) is False


def test_cyclic_parent_map_terminates():
    cyclic = {"a": "b", "b": "a"}
    assert workspace_depth("a", cyclic, max_depth=4) == 5
    assert can_create_sub_workspace("a", cyclic, max_depth=4) is False


# --- Rules-driven allow-list ---


def test_owner_wildcard(engine):
    assert engine.can(OWNER, "anything:really") is True


def test_scope_wildcard(engine):
    assert engine.can(EVENT_LEAD, "tasks:delete") is True
    assert engine.can(EVENT_LEAD, "event:publish") is False


def test_coordinator_exact_actions(engine):
    assert engine.can(IT_COORDINATOR, "tasks:view") is True
    assert engine.can(IT_COORDINATOR, "tasks:delete") is False


def test_no_role_no_access(engine):
    assert engine.can(None, "tasks:view") is False
    assert engine.can_publish_event(None) is False


def test_publish_and_settings_permissions(engine):
    assert engine.can_publish_event(OPS_MANAGER) is True
    assert engine.can_manage_settings(OPS_MANAGER) is True
    assert engine.can_publish_event(EVENT_LEAD) is False
    assert engine.can_manage_settings(IT_COORDINATOR) is False


def test_engine_sub_workspace_needs_permission_and_depth(engine):
    assert engine.max_depth == 4
    assert engine.can_create_sub_workspace(EVENT_LEAD, "dept", PARENTS) is True
    assert engine.can_create_sub_workspace(EVENT_LEAD, "team", PARENTS) is False
    assert engine.can_create_sub_workspace(IT_COORDINATOR, "root", PARENTS) is False
