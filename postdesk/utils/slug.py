"""Slug generation utilities."""
from __future__ import annotations

import re
import unicodedata


def generate_slug(title: str | None) -> str:
    """
    Convert a title to a URL-friendly slug.

    Args:
        title: The text to convert to a slug

    Returns:
        A lower-case slug containing only ``[a-z0-9-]``, or ``""`` for empty input
    """
    if not title:
        return ""

    # Decompose accented characters so their base letter survives
    text = unicodedata.normalize('NFKD', title)

    # Convert to lowercase and trim
    text = text.lower().strip()

    # Remove everything except word characters, whitespace and hyphens
    text = re.sub(r'[^a-z0-9_\s-]', '', text)

    # Replace whitespace runs and underscores with hyphens
    text = re.sub(r'[\s_]+', '-', text)

    # Remove multiple consecutive hyphens
    text = re.sub(r'-+', '-', text)

    # Strip leading and trailing hyphens
    return text.strip('-')
