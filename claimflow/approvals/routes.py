"""Approval queue and status transition routes."""
from __future__ import annotations

from typing import Any

from flask_login import current_user, login_required

from claimflow.forms import normalize_payload
from claimflow.services import expense_service, workflow
from claimflow.services.policy import Action
from claimflow.utils.helpers import json_payload, json_response, permission_required

from . import approvals_bp


@approvals_bp.route("/approvals", methods=["GET"])
@login_required
@permission_required(Action.VIEW_APPROVAL_QUEUE)
def pending_approvals() -> Any:
    """Return the claims waiting at the caller's approval gate."""
    claims = expense_service.approval_queue(current_user)
    return json_response([claim.to_dict(expand=True) for claim in claims])


@approvals_bp.route("/expenses/<int:expense_id>/status", methods=["PATCH"])
@login_required
def update_status(expense_id: int) -> Any:
    """Approve or reject a claim at the current gate."""
    payload = normalize_payload(json_payload())
    billable = payload.get("billable")
    claim = workflow.submit_transition(
        expense_id,
        current_user,
        payload.get("status"),
        rejection_reason=payload.get("rejection_reason"),
        billable=_parse_flag(billable) if billable is not None else None,
        comment=payload.get("comment"),
    )
    return json_response(claim.to_dict(expand=True))


def _parse_flag(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in {"1", "true", "yes", "on"}
    return bool(value)
