from __future__ import annotations

from functools import wraps
from typing import Callable, Any

import jwt
import structlog
from flask import g, request

from postdesk.errors import InvalidToken, NoToken
from postdesk.extensions import tokens


def bearer_token() -> str | None:
    """Return the token from an ``Authorization: Bearer <token>`` header, if present."""
    header = request.headers.get("Authorization", "")
    if not header.startswith("Bearer "):
        return None
    token = header[len("Bearer "):].strip()
    return token or None


def token_required(fn: Callable[..., Any]) -> Callable[..., Any]:
    @wraps(fn)
    def wrapper(*args, **kwargs):
        token = bearer_token()
        if token is None:
            raise NoToken()
        try:
            payload = tokens.verify(token)
        except jwt.PyJWTError as e:
            raise InvalidToken() from e
        g.current_user = payload
        structlog.contextvars.bind_contextvars(user_id=payload["id"])
        return fn(*args, **kwargs)

    return wrapper
