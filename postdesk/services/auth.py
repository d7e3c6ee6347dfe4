from __future__ import annotations

from typing import Tuple

import structlog
from flask import g

from postdesk.errors import Unauthenticated
from postdesk.extensions import tokens
from postdesk.models.user import User
from postdesk.repositories.user import (
    create_user,
    get_user_by_email,
    get_user_by_hex_id,
)
from postdesk.schemas.auth import RegisterRequest
from postdesk.utils.crypto import hash_password, verify_password

log = structlog.get_logger(__name__)

INVALID_CREDENTIALS = "Invalid email or password"


def register_user(payload: RegisterRequest) -> Tuple[User, str]:
    """Create an account and return it with a freshly issued token."""
    user = create_user(
        username=payload.username,
        email=payload.email,
        password_hash=hash_password(payload.password),
    )
    log.info("user_registered", user=user.hex_id)
    return user, tokens.issue(user)


def authenticate(email: str, password: str) -> Tuple[User | None, str | None]:
    """
    Check credentials.
    Returns (user, error_message) tuple.
    """
    user = get_user_by_email(email.strip())
    if not user or not verify_password(password, user.password_hash):
        log.warning("login_failed", email=email)
        return None, INVALID_CREDENTIALS
    return user, None


def current_user() -> User:
    """The account behind the request's verified token."""
    identity = getattr(g, "current_user", None)
    if not identity:
        raise Unauthenticated()
    user = get_user_by_hex_id(identity["id"])
    if user is None:
        raise Unauthenticated("User no longer exists")
    return user
