"""Authentication routes."""
from __future__ import annotations

from typing import Any

from flask_login import current_user, login_required, logout_user

from claimflow.utils.helpers import json_response

from . import auth_bp


@auth_bp.route("/auth/user", methods=["GET"])
@login_required
def me() -> Any:
    """Return the authenticated caller."""
    return json_response(current_user.to_dict())


@auth_bp.route("/logout", methods=["POST"])
def logout() -> Any:
    """Drop any local session; the provider owns the real sign-out."""
    logout_user()
    return json_response({"message": "Logged out."})
