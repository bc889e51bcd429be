"""Per-event access policy."""
from dataclasses import dataclass, field
from enum import Enum
from typing import FrozenSet, Optional

from .models import PERM_ADD_NOTES, PERM_ADD_VERSION, PERM_UPDATE_STATUS


class Action(str, Enum):
    UPDATE_STATUS = "update_status"
    ADD_VERSION = "add_version"
    ADD_COLLABORATOR = "add_collaborator"
    ADD_NOTE = "add_note"


@dataclass(frozen=True)
class AccessRule:
    """Who may perform an action on an event besides its owner."""

    permission: Optional[str] = None  # collaborator token that grants the action
    admin: bool = False


RULES = {
    Action.UPDATE_STATUS: AccessRule(permission=PERM_UPDATE_STATUS, admin=True),
    Action.ADD_VERSION: AccessRule(permission=PERM_ADD_VERSION),
    Action.ADD_COLLABORATOR: AccessRule(),
    Action.ADD_NOTE: AccessRule(permission=PERM_ADD_NOTES, admin=True),
}


@dataclass
class PolicyContext:
    subject_id: str
    is_admin: bool = False
    permissions: FrozenSet[str] = field(default_factory=frozenset)  # held on this event


def is_allowed(context: PolicyContext, action: Action, resource_owner: str) -> bool:
    if context.subject_id == resource_owner:
        return True
    rule = RULES[action]
    if rule.permission is not None and rule.permission in context.permissions:
        return True
    return rule.admin and context.is_admin
