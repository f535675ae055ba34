"""Receipt upload targets on the external object store.

The service never sees receipt bytes. A client asks for an upload target,
PUTs the file straight to the store using the signed URL, then saves the
returned ``object_path`` as the claim's ``receipt_url``.
"""
from __future__ import annotations

import logging
import uuid
from typing import Any, Dict, Mapping
from urllib.parse import quote

from flask import current_app
from itsdangerous import BadSignature, SignatureExpired, URLSafeTimedSerializer

from claimflow.errors import ValidationError
from claimflow.forms import UploadRequestForm, validated_form
from claimflow.models import User
from claimflow.services.policy import Action, authorize

logger = logging.getLogger(__name__)

SIGNING_SALT = "claimflow.receipt-upload"


def _serializer() -> URLSafeTimedSerializer:
    return URLSafeTimedSerializer(current_app.config["SECRET_KEY"], salt=SIGNING_SALT)


def request_upload_target(requester: User, file_meta: Mapping[str, Any]) -> Dict[str, Any]:
    """Return a signed upload URL and the object path it writes to."""
    authorize(requester, Action.REQUEST_UPLOAD)
    form = validated_form(UploadRequestForm, file_meta)
    config = current_app.config

    content_type = form.content_type.data.strip().lower()
    if content_type not in config["RECEIPT_ALLOWED_CONTENT_TYPES"]:
        raise ValidationError.for_field("content_type", f"Unsupported content type '{content_type}'.")
    if form.size.data > config["RECEIPT_MAX_BYTES"]:
        raise ValidationError.for_field(
            "size", f"Receipts are limited to {config['RECEIPT_MAX_BYTES']} bytes."
        )

    object_path = f"receipts/{requester.id}/{uuid.uuid4().hex}"
    token = _serializer().dumps(
        {
            "object_path": object_path,
            "content_type": content_type,
            "size": form.size.data,
            "user_id": requester.id,
        }
    )
    base_url = config["RECEIPT_UPLOAD_BASE_URL"].rstrip("/")
    upload_url = f"{base_url}/{quote(object_path)}?token={token}"

    logger.info("Issued receipt upload target %s for user %s", object_path, requester.id)
    return {
        "upload_url": upload_url,
        "object_path": object_path,
        "expires_in": config["RECEIPT_UPLOAD_TTL_SECONDS"],
        "name": form.name.data,
    }


def verify_upload_token(token: str) -> Dict[str, Any]:
    """Decode a token issued by :func:`request_upload_target`.

    The object store (or a proxy in front of it) calls this to accept or
    refuse an upload.
    """
    try:
        return _serializer().loads(token, max_age=current_app.config["RECEIPT_UPLOAD_TTL_SECONDS"])
    except SignatureExpired:
        raise ValidationError.for_field("token", "Upload link has expired.") from None
    except BadSignature:
        raise ValidationError.for_field("token", "Upload link is not valid.") from None
