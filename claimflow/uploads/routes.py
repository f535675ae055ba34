"""Receipt upload handshake routes."""
from __future__ import annotations

from typing import Any

from flask import request
from flask_login import current_user, login_required

from claimflow.services import receipt_storage
from claimflow.utils.helpers import json_payload, json_response

from . import uploads_bp


@uploads_bp.route("/request-url", methods=["POST"])
@login_required
def request_upload_url() -> Any:
    """Hand out a signed upload target for a receipt file."""
    target = receipt_storage.request_upload_target(current_user, json_payload())
    return json_response(target)


@uploads_bp.route("/verify", methods=["GET"])
def verify_upload() -> Any:
    """Called by the object store to check an upload token."""
    claims = receipt_storage.verify_upload_token(request.args.get("token", ""))
    return json_response(claims)
