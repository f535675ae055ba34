"""Expense claim routes."""
from __future__ import annotations

from typing import Any

from flask import request
from flask_login import current_user, login_required

from claimflow.services import expense_service, workflow
from claimflow.utils.helpers import json_payload, json_response

from . import expenses_bp


@expenses_bp.route("", methods=["GET"])
@login_required
def list_expenses() -> Any:
    """List claims visible to the caller, newest first."""
    claims = expense_service.list_claims(
        current_user,
        status=request.args.get("status"),
        company_id=request.args.get("company_id") or request.args.get("companyId"),
        user_id=request.args.get("user_id") or request.args.get("userId"),
    )
    return json_response([claim.to_dict(expand=True) for claim in claims])


@expenses_bp.route("", methods=["POST"])
@login_required
def create_expense() -> Any:
    """Submit a new claim."""
    claim = expense_service.create_claim(current_user, json_payload())
    return json_response(claim.to_dict(), status=201)


@expenses_bp.route("/<int:expense_id>", methods=["GET"])
@login_required
def expense_detail(expense_id: int) -> Any:
    claim = expense_service.get_visible_claim(expense_id, current_user)
    payload = claim.to_dict(expand=True)
    payload["available_transitions"] = sorted(
        status.value for status in workflow.allowed_targets(claim.status, current_user.role)
    )
    return json_response(payload)


@expenses_bp.route("/<int:expense_id>", methods=["PATCH"])
@login_required
def edit_expense(expense_id: int) -> Any:
    """Owner edit; the claim goes back to pending."""
    claim = expense_service.edit_claim(expense_id, current_user, json_payload())
    return json_response(claim.to_dict(expand=True))
