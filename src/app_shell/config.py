import logging
import re
from typing import get_args

from src.domain.entities import PublishPriority
from src.domain.policy import HierarchyLevel, WorkspaceRole
from src.rules.models import Rules

logger = logging.getLogger(__name__)


def validate_startup_rules(rules: Rules) -> None:
    """
    Cross-section checks the pydantic schema cannot express.

    Raises ValueError listing every problem found.
    """
    problems: list[str] = []
    known_roles = {role.value for role in WorkspaceRole}

    # 1. Approver roles must be real workspace roles
    publishing = rules.publishing
    for role in publishing.approver_roles:
        if role not in known_roles:
            problems.append(f"publishing.approver_roles: unknown role {role!r}")

    # 2. Default approvers must be allowed to approve at all
    for role in publishing.default_approval_roles:
        if role not in publishing.approver_roles:
            problems.append(
                f"publishing.default_approval_roles: {role!r} is not in approver_roles"
            )

    # 3. Request priorities must be ones a publish request can carry
    known_priorities = set(get_args(PublishPriority))
    for priority in publishing.priorities:
        if priority not in known_priorities:
            problems.append(f"publishing.priorities: unknown priority {priority!r}")

    # 4. Permission levels must match the hierarchy
    level_names = {level.name.lower() for level in HierarchyLevel}
    for level in rules.workspaces.level_permissions:
        if level not in level_names:
            problems.append(f"workspaces.level_permissions: unknown level {level!r}")

    # 5. Promo code pattern must compile
    try:
        re.compile(rules.promo_codes.code.pattern)
    except re.error as e:
        problems.append(f"promo_codes.code.pattern: {e}")

    if rules.promo_codes.code.min > rules.promo_codes.code.max:
        problems.append("promo_codes.code: min is greater than max")

    if problems:
        raise ValueError("Rules configuration invalid:\n" + "\n".join(problems))

    logger.info("Rules configuration validated (version %s)", rules.project.rules_version)
