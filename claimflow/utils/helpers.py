"""General helper utilities."""
from __future__ import annotations

from functools import wraps
from typing import Any, Callable, Dict

from flask import jsonify, request
from flask_login import current_user

from claimflow.errors import Unauthenticated, ValidationError

JsonView = Callable[..., Any]


def json_response(payload: Any, status: int = 200):
    """Return a JSON response with status code."""
    return jsonify(payload), status


def json_payload() -> Dict[str, Any]:
    """Return the request's JSON object body, or an empty dict if absent."""
    payload = request.get_json(silent=True)
    if payload is None:
        return {}
    if not isinstance(payload, dict):
        raise ValidationError("Request body must be a JSON object.")
    return payload


def permission_required(action):
    """Restrict a route to callers the policy allows to perform ``action``."""
    from claimflow.services.policy import authorize

    def decorator(view_func: JsonView) -> JsonView:
        @wraps(view_func)
        def wrapped(*args, **kwargs):
            if not current_user.is_authenticated:
                raise Unauthenticated()
            authorize(current_user, action)
            return view_func(*args, **kwargs)

        return wrapped

    return decorator
