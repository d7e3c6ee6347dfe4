"""Application error taxonomy.

Handlers raise these directly when they can tell the cause themselves
(identifier shape, missing field, ownership). Everything else propagates
and is classified by :mod:`postdesk.error_handlers`.
"""
from __future__ import annotations

from datetime import datetime, timezone


class AppError(Exception):
    status_code: int = 500
    default_message: str = "Internal Server Error"

    def __init__(self, message: str | None = None, status_code: int | None = None, is_operational: bool = True):
        self.message = message or self.default_message
        super().__init__(self.message)
        if status_code is not None:
            self.status_code = status_code
        self.is_operational = is_operational
        self.timestamp = datetime.now(timezone.utc).isoformat()

    def to_dict(self) -> dict:
        return {
            "type": type(self).__name__,
            "statusCode": self.status_code,
            "isOperational": self.is_operational,
            "timestamp": self.timestamp,
        }


class ValidationFailed(AppError):
    status_code = 400
    default_message = "Validation failed"


class InvalidIdentifier(AppError):
    status_code = 400
    default_message = "Invalid ID format"


class Conflict(AppError):
    status_code = 400
    default_message = "Resource already exists"


class Unauthenticated(AppError):
    status_code = 401
    default_message = "Authentication required"


class NoToken(Unauthenticated):
    default_message = "No token provided"


class InvalidToken(Unauthenticated):
    default_message = "Invalid or expired token"


class Forbidden(AppError):
    status_code = 403
    default_message = "Forbidden"


class NotFound(AppError):
    status_code = 404
    default_message = "Resource not found"
