"""Error taxonomy for the claim workflow and its JSON rendering.

Every failure the API reports is one of the exceptions below. Each carries a
machine-readable ``code`` and the HTTP status it maps to, so views and
services raise by type and the handlers registered in
:func:`register_error_handlers` render a uniform envelope::

    {"error": {"code": "forbidden", "message": "..."}}

``ValidationError`` additionally carries per-field messages under
``fields``. ``InternalError`` never exposes detail to the caller.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, List, Mapping, Optional

from flask import Flask
from sqlalchemy.exc import SQLAlchemyError
from werkzeug.exceptions import HTTPException

logger = logging.getLogger(__name__)


class ClaimFlowError(Exception):
    """Base class for errors reported to API callers."""

    code = "error"
    status = 500
    default_message = "Request failed."

    def __init__(self, message: Optional[str] = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        return {"code": self.code, "message": self.message}


class Unauthenticated(ClaimFlowError):
    code = "unauthenticated"
    status = 401
    default_message = "Authentication required."


class Forbidden(ClaimFlowError):
    code = "forbidden"
    status = 403
    default_message = "Insufficient permissions."


class NotFound(ClaimFlowError):
    code = "not_found"
    status = 404
    default_message = "Not found."


class ValidationError(ClaimFlowError):
    code = "validation_failed"
    status = 400
    default_message = "Validation failed."

    def __init__(
        self,
        message: Optional[str] = None,
        fields: Optional[Mapping[str, Any]] = None,
    ) -> None:
        super().__init__(message)
        self.fields: Dict[str, List[str]] = {}
        for name, errors in (fields or {}).items():
            self.fields[name] = [errors] if isinstance(errors, str) else list(errors)

    @classmethod
    def for_field(cls, field: str, message: str) -> "ValidationError":
        return cls(message, fields={field: message})

    def to_dict(self) -> Dict[str, Any]:
        payload = super().to_dict()
        if self.fields:
            payload["fields"] = self.fields
        return payload


class InvalidTransition(ClaimFlowError):
    code = "invalid_transition"
    status = 409
    default_message = "Status transition not allowed."


class Conflict(ClaimFlowError):
    code = "conflict"
    status = 409
    default_message = "Request conflicts with the current state."


class InternalError(ClaimFlowError):
    code = "internal_error"
    status = 500
    default_message = "An internal error occurred."


def error_response(error: ClaimFlowError):
    from claimflow.utils.helpers import json_response

    return json_response({"error": error.to_dict()}, status=error.status)


def register_error_handlers(app: Flask) -> None:
    """Render the taxonomy, HTTP errors and unexpected failures as JSON."""
    from claimflow import db

    @app.errorhandler(ClaimFlowError)
    def handle_claimflow_error(error: ClaimFlowError):
        if error.status >= 500:
            db.session.rollback()
            logger.error("Internal error: %s", error.message)
            return error_response(InternalError())
        return error_response(error)

    @app.errorhandler(HTTPException)
    def handle_http_exception(error: HTTPException):
        mapped: ClaimFlowError
        if error.code == 401:
            mapped = Unauthenticated()
        elif error.code == 403:
            mapped = Forbidden()
        elif error.code == 404:
            mapped = NotFound("Resource not found.")
        elif error.code is not None and error.code < 500:
            mapped = ValidationError(error.description)
            mapped.code = error.name.lower().replace(" ", "_")
            mapped.status = error.code
        else:
            mapped = InternalError()
        return error_response(mapped)

    @app.errorhandler(SQLAlchemyError)
    def handle_database_error(error: SQLAlchemyError):
        db.session.rollback()
        logger.exception("Database error while handling request")
        return error_response(InternalError())

    @app.errorhandler(Exception)
    def handle_unexpected_error(error: Exception):
        db.session.rollback()
        logger.exception("Unhandled error while handling request")
        return error_response(InternalError())
