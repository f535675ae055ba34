"""Claim creation, lookup and listing."""
from __future__ import annotations

import logging
from typing import Any, Dict, List, Mapping, Optional

from claimflow import db
from claimflow.errors import InvalidTransition, NotFound, ValidationError
from claimflow.forms import ExpenseForm, normalize_payload, validated_form
from claimflow.models import Company, Expense, ExpenseStatus, User
from claimflow.services import policy, workflow
from claimflow.services.policy import Action, authorize

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = ("description", "amount", "date", "company_id", "billable", "receipt_url")


def _claim_values(form: ExpenseForm) -> Dict[str, Any]:
    company_id = form.company_id.data
    if db.session.get(Company, company_id) is None:
        raise NotFound(f"Company {company_id} not found.")
    return {
        "description": form.description.data.strip(),
        "amount": form.amount.data,
        "date": form.date.data,
        "company_id": company_id,
        "billable": bool(form.billable.data),
        "receipt_url": (form.receipt_url.data or "").strip() or None,
    }


def create_claim(owner: User, payload: Mapping[str, Any]) -> Expense:
    """Create a new claim owned by ``owner`` in ``pending`` status."""
    authorize(owner, Action.CREATE_CLAIM)
    values = _claim_values(validated_form(ExpenseForm, payload))

    claim = Expense(user_id=owner.id, status=ExpenseStatus.PENDING, **values)
    db.session.add(claim)
    db.session.commit()
    logger.info("Expense %s created by %s for company %s", claim.id, owner.id, claim.company_id)
    return claim


def edit_claim(claim_id: int, actor: User, payload: Mapping[str, Any]) -> Expense:
    """Owner edit: merge ``payload`` over the stored claim and resubmit it."""
    claim = workflow.get_claim(claim_id)
    authorize(actor, Action.EDIT_CLAIM, owner_id=claim.user_id)
    if claim.status not in workflow.EDITABLE_STATUSES:
        raise InvalidTransition(f"Cannot edit an expense that is {claim.status.value}.")

    merged: Dict[str, Any] = {
        "description": claim.description,
        "amount": claim.amount,
        "date": claim.date.isoformat() if claim.date else None,
        "company_id": claim.company_id,
        "billable": claim.billable,
        "receipt_url": claim.receipt_url,
    }
    for key, value in normalize_payload(payload).items():
        if key in EDITABLE_FIELDS:
            merged[key] = value
    values = _claim_values(validated_form(ExpenseForm, merged))
    return workflow.resubmit(claim, actor, values)


def get_visible_claim(claim_id: int, viewer: User) -> Expense:
    claim = workflow.get_claim(claim_id)
    authorize(viewer, Action.VIEW_CLAIM, owner_id=claim.user_id)
    return claim


def visible_claims_query(viewer: User):
    """Base query of the claims ``viewer`` is allowed to see."""
    authorize(viewer, Action.LIST_CLAIMS)
    query = Expense.query
    if not policy.sees_all_claims(viewer.role):
        query = query.filter(Expense.user_id == viewer.id)
    return query


def list_claims(
    viewer: User,
    status: Optional[str] = None,
    company_id: Optional[Any] = None,
    user_id: Optional[str] = None,
) -> List[Expense]:
    """Claims visible to ``viewer``, newest expense date first."""
    query = visible_claims_query(viewer)

    if status:
        query = query.filter(Expense.status == workflow.parse_status(status))
    if company_id not in (None, ""):
        try:
            query = query.filter(Expense.company_id == int(company_id))
        except (TypeError, ValueError):
            raise ValidationError.for_field("company_id", "Not a valid integer value.") from None
    if user_id:
        query = query.filter(Expense.user_id == user_id)

    return query.order_by(Expense.date.desc(), Expense.created_at.desc(), Expense.id.desc()).all()


def approval_queue(approver: User) -> List[Expense]:
    """Claims waiting at the gate(s) ``approver`` works."""
    authorize(approver, Action.VIEW_APPROVAL_QUEUE)
    statuses = policy.queue_statuses(approver.role)
    return (
        Expense.query.filter(Expense.status.in_(statuses))
        .order_by(Expense.date.desc(), Expense.created_at.desc(), Expense.id.desc())
        .all()
    )
