"""Company routes."""
from __future__ import annotations

from typing import Any

from flask_login import current_user, login_required

from claimflow.services import admin_service
from claimflow.services.policy import Action
from claimflow.utils.helpers import json_payload, json_response, permission_required

from . import companies_bp


@companies_bp.route("", methods=["GET"])
@login_required
def list_companies() -> Any:
    companies = admin_service.list_companies(current_user)
    return json_response([company.to_dict() for company in companies])


@companies_bp.route("", methods=["POST"])
@login_required
@permission_required(Action.MANAGE_COMPANIES)
def create_company() -> Any:
    company = admin_service.create_company(current_user, json_payload())
    return json_response(company.to_dict(), status=201)


@companies_bp.route("/<int:company_id>", methods=["DELETE"])
@login_required
@permission_required(Action.MANAGE_COMPANIES)
def delete_company(company_id: int) -> Any:
    """Delete a company no claim refers to."""
    admin_service.delete_company(current_user, company_id)
    return "", 204
