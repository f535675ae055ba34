"""Caller identity asserted by the upstream identity provider.

Login and logout happen at the provider. It forwards the authenticated
caller on every request in trusted headers (names are configurable, see
``IDENTITY_*_HEADER`` in ``config.py``). The first request from a new
identity creates its user record with the ``employee`` role; later requests
refresh the profile fields. Roles are only ever changed by an admin, never
taken from headers.
"""
from __future__ import annotations

import logging
from typing import Optional

from flask import Request, current_app
from flask_login import LoginManager

from claimflow import db
from claimflow.errors import Unauthenticated
from claimflow.models import User, UserRole

logger = logging.getLogger(__name__)


def _header(request: Request, key: str) -> Optional[str]:
    value = request.headers.get(current_app.config[key])
    if value is None:
        return None
    value = value.strip()
    return value or None


def upsert_user(
    user_id: str,
    email: Optional[str] = None,
    first_name: Optional[str] = None,
    last_name: Optional[str] = None,
    profile_image_url: Optional[str] = None,
) -> User:
    """Create or refresh the user record for an authenticated identity."""
    user = db.session.get(User, user_id)
    if user is None:
        user = User(id=user_id, role=UserRole.EMPLOYEE)
        db.session.add(user)
        logger.info("Registered new user %s from identity provider", user_id)

    changed = user in db.session.new
    for attr, value in (
        ("email", email),
        ("first_name", first_name),
        ("last_name", last_name),
        ("profile_image_url", profile_image_url),
    ):
        if value is not None and getattr(user, attr) != value:
            setattr(user, attr, value)
            changed = True

    if changed:
        db.session.commit()
    return user


def load_user_from_request(request: Request) -> Optional[User]:
    user_id = _header(request, "IDENTITY_USER_ID_HEADER")
    if not user_id:
        return None
    return upsert_user(
        user_id,
        email=_header(request, "IDENTITY_EMAIL_HEADER"),
        first_name=_header(request, "IDENTITY_FIRST_NAME_HEADER"),
        last_name=_header(request, "IDENTITY_LAST_NAME_HEADER"),
        profile_image_url=_header(request, "IDENTITY_IMAGE_HEADER"),
    )


def init_identity(login_manager: LoginManager) -> None:
    """Wire the provider headers into Flask-Login."""

    @login_manager.request_loader
    def request_loader(request: Request) -> Optional[User]:
        return load_user_from_request(request)

    @login_manager.user_loader
    def load_user(user_id: str) -> Optional[User]:
        return db.session.get(User, user_id)

    @login_manager.unauthorized_handler
    def unauthorized():
        raise Unauthenticated()
