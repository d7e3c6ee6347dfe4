from __future__ import annotations

from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, field_validator, model_validator

from postdesk.utils.html_sanitizer import sanitize_input
from postdesk.utils.slug import generate_slug

TITLE_MAX_LENGTH = 200
SLUG_MAX_LENGTH = 220
CATEGORY_MAX_LENGTH = 64


def _clean_title(v: Optional[str]) -> str:
    title = sanitize_input(v)
    if not title:
        raise ValueError("Title is required")
    if len(title) > TITLE_MAX_LENGTH:
        raise ValueError(f"Title cannot exceed {TITLE_MAX_LENGTH} characters")
    return title


def _clean_content(v: Optional[str]) -> str:
    if v is None or not v.strip():
        raise ValueError("Content is required")
    return v


def _clean_slug(v: Optional[str]) -> Optional[str]:
    if v is None:
        return None
    slug = v.strip().lower()
    if len(slug) > SLUG_MAX_LENGTH:
        raise ValueError(f"Slug cannot exceed {SLUG_MAX_LENGTH} characters")
    return slug or None


def _clean_category(v: Optional[str]) -> Optional[str]:
    if v is None:
        return None
    category = v.strip()
    if len(category) > CATEGORY_MAX_LENGTH:
        raise ValueError(f"Category cannot exceed {CATEGORY_MAX_LENGTH} characters")
    return category or None


class PostCreate(BaseModel):
    # Unknown keys (author, views, timestamps...) are dropped, never assigned
    model_config = ConfigDict(extra="ignore")

    title: str
    content: str
    slug: Optional[str] = None
    category: Optional[str] = None
    status: Literal["draft", "published"] = "draft"

    @field_validator("title")
    @classmethod
    def title_present(cls, v: str) -> str:
        return _clean_title(v)

    @field_validator("content")
    @classmethod
    def content_present(cls, v: str) -> str:
        return _clean_content(v)

    @field_validator("slug")
    @classmethod
    def slug_lower(cls, v: Optional[str]) -> Optional[str]:
        return _clean_slug(v)

    @field_validator("category")
    @classmethod
    def category_trim(cls, v: Optional[str]) -> Optional[str]:
        return _clean_category(v)

    @model_validator(mode="after")
    def derive_slug(self) -> "PostCreate":
        if not self.slug:
            self.slug = generate_slug(self.title)
        if not self.slug:
            raise ValueError("Slug could not be derived from title")
        return self


class PostUpdate(BaseModel):
    """The complete set of fields a client may change on an existing post."""

    model_config = ConfigDict(extra="ignore")

    title: Optional[str] = None
    content: Optional[str] = None
    slug: Optional[str] = None
    category: Optional[str] = None
    status: Optional[Literal["draft", "published"]] = None

    @field_validator("title")
    @classmethod
    def title_present(cls, v: Optional[str]) -> str:
        return _clean_title(v)

    @field_validator("content")
    @classmethod
    def content_present(cls, v: Optional[str]) -> str:
        return _clean_content(v)

    @field_validator("slug")
    @classmethod
    def slug_lower(cls, v: Optional[str]) -> Optional[str]:
        slug = _clean_slug(v)
        if slug is None:
            raise ValueError("Slug cannot be empty")
        return slug

    @field_validator("category")
    @classmethod
    def category_trim(cls, v: Optional[str]) -> Optional[str]:
        return _clean_category(v)

    @field_validator("status")
    @classmethod
    def status_not_null(cls, v: Optional[str]) -> str:
        if v is None:
            raise ValueError("Status cannot be empty")
        return v

    def changes(self) -> dict:
        """Only the fields the client actually sent."""
        return self.model_dump(exclude_unset=True)
