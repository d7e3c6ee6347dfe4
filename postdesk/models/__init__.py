from __future__ import annotations

import secrets


def generate_hex_id(length: int = 32) -> str:
    """Generate a secure random hex string of specified length."""
    return secrets.token_hex(length // 2)


from postdesk.models.user import User
from postdesk.models.post import Post, POST_STATUSES

__all__ = [
    "generate_hex_id",
    "User",
    "Post",
    "POST_STATUSES",
]
