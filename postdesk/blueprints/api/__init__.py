from __future__ import annotations

from typing import Any

from flask import request

from postdesk.errors import ValidationFailed


def json_body() -> dict[str, Any]:
    """The request's JSON object, or an empty dict when no JSON was sent."""
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValidationFailed("Request body must be a JSON object")
    return data
