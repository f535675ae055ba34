"""Expense claim approval state machine.

Claims move through two sequential gates::

    pending --manager/admin--> approved_manager --finance/admin--> approved_finance
       |                             |
       +--manager/admin--> rejected <+--finance/admin

``approved_finance`` and ``rejected`` are terminal for approvers. The only
way out of ``rejected`` is an edit by the claim's owner, which sends the
claim back to ``pending`` (see :func:`resubmit`).

Every write is conditioned on the claim still being in the status it was
read in, so two approvers acting on the same claim at once cannot both
succeed.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, FrozenSet, Mapping, Optional

from claimflow import db
from claimflow.errors import Forbidden, InvalidTransition, NotFound, ValidationError
from claimflow.models import Expense, ExpenseStatus, User, UserRole
from claimflow.services.policy import Action, authorize

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Transition:
    source: ExpenseStatus
    target: ExpenseStatus
    roles: FrozenSet[UserRole]

    @property
    def is_approval(self) -> bool:
        return self.target in APPROVED_STATUSES


MANAGER_GATE = frozenset({UserRole.MANAGER, UserRole.ADMIN})
FINANCE_GATE = frozenset({UserRole.FINANCE, UserRole.ADMIN})

APPROVED_STATUSES = frozenset({ExpenseStatus.APPROVED_MANAGER, ExpenseStatus.APPROVED_FINANCE})
EDITABLE_STATUSES = frozenset({ExpenseStatus.PENDING, ExpenseStatus.REJECTED})

TRANSITIONS: Dict[tuple, Transition] = {
    (t.source, t.target): t
    for t in (
        Transition(ExpenseStatus.PENDING, ExpenseStatus.APPROVED_MANAGER, MANAGER_GATE),
        Transition(ExpenseStatus.PENDING, ExpenseStatus.REJECTED, MANAGER_GATE),
        Transition(ExpenseStatus.APPROVED_MANAGER, ExpenseStatus.APPROVED_FINANCE, FINANCE_GATE),
        Transition(ExpenseStatus.APPROVED_MANAGER, ExpenseStatus.REJECTED, FINANCE_GATE),
    )
}


def find_transition(source: ExpenseStatus, target: ExpenseStatus) -> Optional[Transition]:
    return TRANSITIONS.get((source, target))


def allowed_targets(source: ExpenseStatus, role: UserRole) -> FrozenSet[ExpenseStatus]:
    """Statuses ``role`` may move a claim to from ``source``."""
    return frozenset(
        transition.target
        for transition in TRANSITIONS.values()
        if transition.source is source and role in transition.roles
    )


def parse_status(value: Any, field: str = "status") -> ExpenseStatus:
    if value is None or (isinstance(value, str) and not value.strip()):
        raise ValidationError.for_field(field, "This field is required.")
    try:
        return ExpenseStatus.parse(value)
    except (KeyError, ValueError):
        raise ValidationError.for_field(field, f"Unknown status '{value}'.") from None


def _clean_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def get_claim(claim_id: int) -> Expense:
    claim = db.session.get(Expense, claim_id)
    if claim is None:
        raise NotFound("Expense not found.")
    return claim


def conditional_update(claim: Expense, expected: ExpenseStatus, values: Mapping[str, Any]) -> Expense:
    """Write ``values`` only if the claim is still in ``expected`` status.

    Raises :class:`InvalidTransition` when another request changed the
    claim's status after it was read; nothing is written in that case.
    """
    updated = (
        Expense.query.filter(Expense.id == claim.id, Expense.status == expected)
        .update(dict(values, updated_at=db.func.now()), synchronize_session=False)
    )
    if updated != 1:
        db.session.rollback()
        logger.warning(
            "Conditional write on expense %s lost: expected status %s", claim.id, expected.value
        )
        raise InvalidTransition(
            f"Expense {claim.id} is no longer {expected.value}; reload and try again."
        )
    db.session.commit()
    db.session.refresh(claim)
    return claim


def submit_transition(
    claim_id: int,
    actor: User,
    target_status: Any,
    rejection_reason: Optional[str] = None,
    billable: Optional[bool] = None,
    comment: Optional[str] = None,
) -> Expense:
    """Move a claim through an approval gate on behalf of ``actor``."""
    claim = get_claim(claim_id)
    target = parse_status(target_status)
    authorize(actor, Action.TRANSITION_CLAIM)

    source = claim.status
    transition = find_transition(source, target)
    if transition is None:
        raise InvalidTransition(
            f"Cannot move an expense from '{source.value}' to '{target.value}'."
        )
    if actor.role not in transition.roles:
        logger.warning(
            "User %s (%s) denied %s -> %s on expense %s",
            actor.id,
            actor.role.value,
            source.value,
            target.value,
            claim.id,
        )
        raise Forbidden(
            f"Role '{actor.role.value}' cannot move an expense from '{source.value}' to '{target.value}'."
        )

    values: Dict[str, Any] = {
        "status": target,
        "approved_by": actor.id,
        "decided_at": db.func.now(),
        "approval_comment": _clean_text(comment),
    }
    if transition.is_approval:
        values["billable"] = claim.billable if billable is None else bool(billable)
        values["rejection_reason"] = None
    else:
        reason = _clean_text(rejection_reason)
        if not reason:
            raise ValidationError.for_field(
                "rejection_reason", "A reason is required to reject an expense."
            )
        values["rejection_reason"] = reason

    claim = conditional_update(claim, source, values)
    logger.info(
        "Expense %s moved %s -> %s by %s (%s)",
        claim.id,
        source.value,
        target.value,
        actor.id,
        actor.role.value,
    )
    return claim


def resubmit(claim: Expense, actor: User, values: Mapping[str, Any]) -> Expense:
    """Apply an owner edit and send the claim back to ``pending``.

    ``values`` must already be validated. The approver reference is kept;
    the rejection reason is always cleared, even when nothing changed.
    """
    authorize(actor, Action.EDIT_CLAIM, owner_id=claim.user_id)
    source = claim.status
    if source not in EDITABLE_STATUSES:
        raise InvalidTransition(f"Cannot edit an expense that is {source.value}.")

    updates = dict(values)
    updates.update(status=ExpenseStatus.PENDING, rejection_reason=None)
    claim = conditional_update(claim, source, updates)
    logger.info("Expense %s edited by owner %s (%s -> pending)", claim.id, actor.id, source.value)
    return claim
