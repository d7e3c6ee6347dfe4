from __future__ import annotations

# Re-export common schema classes for convenient imports
from .auth import LoginRequest, RegisterRequest  # noqa: F401
from .posts import PostCreate, PostUpdate  # noqa: F401

__all__ = [
    # auth
    "LoginRequest",
    "RegisterRequest",
    # posts
    "PostCreate",
    "PostUpdate",
]
