"""Administrative routes."""
from __future__ import annotations

from typing import Any

from flask_login import current_user, login_required

from claimflow.services import admin_service
from claimflow.services.policy import Action
from claimflow.utils.helpers import json_payload, json_response, permission_required

from . import admin_bp


@admin_bp.route("", methods=["GET"])
@login_required
@permission_required(Action.MANAGE_USERS)
def users() -> Any:
    """Display all users."""
    return json_response([user.to_dict() for user in admin_service.list_users(current_user)])


@admin_bp.route("/<string:user_id>/role", methods=["PATCH"])
@login_required
@permission_required(Action.MANAGE_USERS)
def update_role(user_id: str) -> Any:
    """Change a user's role."""
    user = admin_service.update_user_role(current_user, user_id, json_payload())
    return json_response(user.to_dict())
