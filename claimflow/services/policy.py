"""Authorization policy for claims, companies and users.

All role and ownership decisions go through :func:`is_allowed`, a pure
function of ``(role, action, is_owner)``. Views call :func:`authorize`,
which raises :class:`~claimflow.errors.Forbidden` on denial. Which approver
role may move a claim along which edge of the workflow is decided by the
transition table in :mod:`claimflow.services.workflow`; this module only
gates who may ask for a transition at all.
"""
from __future__ import annotations

import enum
import logging
from typing import FrozenSet, Optional

from claimflow.errors import Forbidden
from claimflow.models import ExpenseStatus, User, UserRole

logger = logging.getLogger(__name__)


class Action(enum.Enum):
    LIST_CLAIMS = "list_claims"
    VIEW_CLAIM = "view_claim"
    CREATE_CLAIM = "create_claim"
    EDIT_CLAIM = "edit_claim"
    TRANSITION_CLAIM = "transition_claim"
    VIEW_APPROVAL_QUEUE = "view_approval_queue"
    LIST_COMPANIES = "list_companies"
    MANAGE_COMPANIES = "manage_companies"
    MANAGE_USERS = "manage_users"
    REQUEST_UPLOAD = "request_upload"
    VIEW_REPORTS = "view_reports"


ALL_ROLES: FrozenSet[UserRole] = frozenset(UserRole)
PRIVILEGED_ROLES: FrozenSet[UserRole] = frozenset(
    {UserRole.MANAGER, UserRole.FINANCE, UserRole.ADMIN}
)
ADMIN_ONLY: FrozenSet[UserRole] = frozenset({UserRole.ADMIN})

# Roles allowed regardless of ownership.
_ROLE_RULES = {
    Action.LIST_CLAIMS: ALL_ROLES,
    Action.VIEW_CLAIM: PRIVILEGED_ROLES,
    Action.CREATE_CLAIM: ALL_ROLES,
    Action.EDIT_CLAIM: frozenset(),
    Action.TRANSITION_CLAIM: PRIVILEGED_ROLES,
    Action.VIEW_APPROVAL_QUEUE: PRIVILEGED_ROLES,
    Action.LIST_COMPANIES: ALL_ROLES,
    Action.MANAGE_COMPANIES: ADMIN_ONLY,
    Action.MANAGE_USERS: ADMIN_ONLY,
    Action.REQUEST_UPLOAD: ALL_ROLES,
    Action.VIEW_REPORTS: ALL_ROLES,
}

# Actions the owner of the resource may always perform.
_OWNER_ACTIONS = frozenset({Action.VIEW_CLAIM, Action.EDIT_CLAIM})

# Gates each approver role works in the approval queue.
QUEUE_STATUSES = {
    UserRole.MANAGER: (ExpenseStatus.PENDING,),
    UserRole.FINANCE: (ExpenseStatus.APPROVED_MANAGER,),
    UserRole.ADMIN: (ExpenseStatus.PENDING, ExpenseStatus.APPROVED_MANAGER),
}


def is_allowed(role: UserRole, action: Action, is_owner: bool = False) -> bool:
    """Return whether ``role`` may perform ``action``."""
    if is_owner and action in _OWNER_ACTIONS:
        return True
    return role in _ROLE_RULES.get(action, frozenset())


def authorize(user: User, action: Action, owner_id: Optional[str] = None) -> None:
    """Raise :class:`Forbidden` unless ``user`` may perform ``action``."""
    is_owner = owner_id is not None and owner_id == user.id
    if is_allowed(user.role, action, is_owner=is_owner):
        return
    logger.warning(
        "Denied %s for user %s (role=%s, owner=%s)",
        action.value,
        user.id,
        user.role.value,
        is_owner,
    )
    if action is Action.EDIT_CLAIM:
        raise Forbidden("Only the owner can edit this expense.")
    if action is Action.VIEW_CLAIM:
        raise Forbidden("You can only view your own expenses.")
    raise Forbidden(f"Role '{user.role.value}' is not allowed to {action.value.replace('_', ' ')}.")


def sees_all_claims(role: UserRole) -> bool:
    """Employees see their own claims; every other role sees all of them."""
    return role in PRIVILEGED_ROLES


def queue_statuses(role: UserRole):
    """Statuses making up the approval queue for ``role``."""
    if role not in QUEUE_STATUSES:
        raise Forbidden("Only approvers have an approval queue.")
    return QUEUE_STATUSES[role]
