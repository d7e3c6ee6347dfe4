"""Bearer token issuing and verification backed by PyJWT."""
from __future__ import annotations

import re
from datetime import datetime, timedelta, timezone
from typing import Any

import jwt
import structlog
from flask import Flask

log = structlog.get_logger(__name__)

DEV_SECRET = "dev-secret-change-in-production"

_LIFETIME_RE = re.compile(r"^\s*(\d+)\s*([smhd]?)\s*$")
_LIFETIME_UNITS = {"": 1, "s": 1, "m": 60, "h": 60 * 60, "d": 24 * 60 * 60}


def parse_lifetime(value: int | str | timedelta) -> timedelta:
    """
    Convert a token lifetime setting into a timedelta.

    Accepts a timedelta, a number of seconds, or a string such as
    ``"45s"``, ``"30m"``, ``"12h"`` or ``"7d"``.
    """
    if isinstance(value, timedelta):
        return value
    if isinstance(value, bool):
        raise ValueError(f"Invalid token lifetime: {value!r}")
    if isinstance(value, int):
        seconds = value
    else:
        match = _LIFETIME_RE.match(str(value))
        if not match:
            raise ValueError(f"Invalid token lifetime: {value!r}")
        seconds = int(match.group(1)) * _LIFETIME_UNITS[match.group(2)]
    if seconds <= 0:
        raise ValueError(f"Token lifetime must be positive: {value!r}")
    return timedelta(seconds=seconds)


class TokenIssuer:
    """Mints and verifies signed, time-limited identity tokens.

    Can be constructed directly with a secret, or left empty and bound to an
    application later with :meth:`init_app`, like the other extensions.
    """

    def __init__(
        self,
        secret: str | None = None,
        expires_in: int | str | timedelta = "7d",
        algorithm: str = "HS256",
    ) -> None:
        self.secret = secret
        self.expires_in = parse_lifetime(expires_in)
        self.algorithm = algorithm

    def init_app(self, app: Flask) -> None:
        secret = app.config.get("JWT_SECRET")
        if not secret:
            if app.config.get("ENV", "production") == "production" and not app.testing:
                raise RuntimeError("JWT_SECRET must be set in production")
            log.warning("jwt_secret_missing", detail="using development signing secret")
            secret = DEV_SECRET
        self.secret = secret
        self.expires_in = parse_lifetime(app.config.get("JWT_EXPIRE", "7d"))
        self.algorithm = app.config.get("JWT_ALGORITHM", "HS256")
        app.extensions["postdesk.tokens"] = self

    def issue(self, user: Any, expires_in: timedelta | None = None) -> str:
        """Return a token embedding the user's public id, username and email."""
        if not self.secret:
            raise RuntimeError("TokenIssuer has no signing secret")
        now = datetime.now(timezone.utc)
        payload = {
            "id": user.hex_id,
            "username": user.username,
            "email": user.email,
            "iat": now,
            "exp": now + (expires_in if expires_in is not None else self.expires_in),
        }
        return jwt.encode(payload, self.secret, algorithm=self.algorithm)

    def verify(self, token: str) -> dict[str, Any]:
        """
        Decode a token and return its payload.

        Raises:
            jwt.ExpiredSignatureError: the token is past its expiry.
            jwt.InvalidSignatureError: the signature does not match.
            jwt.DecodeError: the token is not a well-formed JWT.
            jwt.InvalidTokenError: the payload carries no identity.
        """
        if not self.secret:
            raise RuntimeError("TokenIssuer has no signing secret")
        payload = jwt.decode(
            token,
            self.secret,
            algorithms=[self.algorithm],
            options={"require": ["exp"]},
        )
        if not payload.get("id"):
            raise jwt.InvalidTokenError("Token payload has no identity")
        return payload
