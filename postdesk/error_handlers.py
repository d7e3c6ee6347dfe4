"""Global error normalization.

Every exception that escapes a view ends up here and is turned into a
``{"success": false, "error": <message>}`` JSON response with a stable
status code.
"""
from __future__ import annotations

import re
import traceback

import jwt
import structlog
from flask import Flask, current_app, g, jsonify, request
from pydantic import ValidationError
from sqlalchemy.exc import DataError, IntegrityError
from werkzeug.exceptions import HTTPException, MethodNotAllowed

from postdesk.errors import AppError, Conflict, NotFound, ValidationFailed
from postdesk.extensions import db

log = structlog.get_logger(__name__)

# sqlite: "UNIQUE constraint failed: posts.slug"
_SQLITE_UNIQUE = re.compile(r"UNIQUE constraint failed: (?:\w+\.)?(\w+)")
# postgres: "Key (slug)=(my-post) already exists."
_PG_UNIQUE = re.compile(r"Key \((\w+)\)=\(.*\) already exists")
# mysql: "Duplicate entry 'x' for key 'posts.slug'"
_MYSQL_UNIQUE = re.compile(r"Duplicate entry .* for key '(?:\w+\.)?(?:ix_\w+?_)?(\w+)'")
# sqlite / postgres not-null violations
_NOT_NULL = re.compile(r'NOT NULL constraint failed: (?:\w+\.)?(\w+)|null value in column "(\w+)"')


def duplicate_field(exc: IntegrityError) -> str | None:
    """Return the column a unique-constraint violation was raised for, if any."""
    text = str(exc.orig)
    for pattern in (_SQLITE_UNIQUE, _PG_UNIQUE, _MYSQL_UNIQUE):
        match = pattern.search(text)
        if match:
            return match.group(1)
    return None


def validation_messages(exc: ValidationError) -> list[str]:
    messages = []
    for err in exc.errors():
        if err.get("type") == "value_error" and "error" in err.get("ctx", {}):
            messages.append(str(err["ctx"]["error"]))
            continue
        loc = ".".join(str(part) for part in err.get("loc", ()))
        messages.append(f"{loc}: {err['msg']}" if loc else err["msg"])
    return messages


def normalize_error(exc: Exception) -> AppError:
    """Map any exception to an AppError carrying the status and message to send."""
    if isinstance(exc, AppError):
        return exc

    if isinstance(exc, DataError):
        return NotFound("Resource not found")

    if isinstance(exc, IntegrityError):
        field = duplicate_field(exc)
        if field:
            return Conflict(f"{field} already exists")
        match = _NOT_NULL.search(str(exc.orig))
        if match:
            return ValidationFailed(f"Validation failed: {match.group(1) or match.group(2)} is required")
        return AppError("Internal Server Error", 500, is_operational=False)

    if isinstance(exc, ValidationError):
        return ValidationFailed(f"Validation failed: {', '.join(validation_messages(exc))}")

    if isinstance(exc, jwt.ExpiredSignatureError):
        return AppError("Token expired", 401)

    if isinstance(exc, jwt.InvalidTokenError):
        return AppError("Invalid token", 401)

    if isinstance(exc, HTTPException):
        return AppError(exc.name, exc.code or 500)

    return AppError("Internal Server Error", 500, is_operational=False)


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(Exception)
    def handle_exception(exc: Exception):
        # Leave the session usable for the rest of the request
        db.session.rollback()

        error = normalize_error(exc)
        user = getattr(g, "current_user", None) or {}
        log_method = log.error if error.status_code >= 500 else log.warning
        log_method(
            "request_failed",
            message=error.message,
            status_code=error.status_code,
            exception=type(exc).__name__,
            stack="".join(traceback.format_exception(type(exc), exc, exc.__traceback__)),
            path=request.path,
            method=request.method,
            ip=request.remote_addr,
            user=user.get("id"),
        )

        body = {"success": False, "error": error.message}
        if current_app.config.get("ENV") == "development":
            body["stack"] = traceback.format_exception(type(exc), exc, exc.__traceback__)
            body["details"] = error.to_dict()
        response = jsonify(body)
        response.status_code = error.status_code
        if isinstance(exc, MethodNotAllowed) and exc.valid_methods:
            response.headers["Allow"] = ", ".join(exc.valid_methods)
        return response
