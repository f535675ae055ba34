"""Dashboard and report routes."""
from __future__ import annotations

from typing import Any

from flask_login import current_user, login_required

from claimflow.services import report_service
from claimflow.utils.helpers import json_response

from . import reports_bp


@reports_bp.route("/summary", methods=["GET"])
@login_required
def summary() -> Any:
    """Totals and breakdowns over the claims the caller can see."""
    return json_response(report_service.summary(current_user))
