from __future__ import annotations

import re
from typing import Any

EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
HEX_ID_RE = re.compile(r"^[0-9a-fA-F]{32}$")


def validate_email(value: Any) -> bool:
    """Return True if value looks like ``local@domain.tld``. Never raises."""
    if not value or not isinstance(value, str):
        return False
    return EMAIL_RE.fullmatch(value) is not None


def is_valid_hex_id(value: Any) -> bool:
    """Return True if value has the shape of a public record identifier."""
    if not isinstance(value, str):
        return False
    return HEX_ID_RE.fullmatch(value) is not None
