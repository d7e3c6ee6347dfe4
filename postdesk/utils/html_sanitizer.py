"""
Plain-text sanitization using bleach.

Strips every bit of markup from user supplied text such as titles, leaving
only the readable text behind.
"""
from __future__ import annotations

import html
import re

import bleach

# Script blocks go entirely, content included; other tags keep their text
SCRIPT_BLOCK_RE = re.compile(r"<script\b[^<]*(?:(?!</script>)<[^<]*)*</script>", re.IGNORECASE)

# Nested entity encodings beyond this are not unwrapped, only escaped
MAX_PASSES = 5


def _strip_markup(text: str) -> str:
    without_scripts = SCRIPT_BLOCK_RE.sub("", text)
    return bleach.clean(
        without_scripts,
        tags=set(),
        attributes={},
        strip=True,  # Strip disallowed tags instead of escaping
        strip_comments=True,
    )


def sanitize_input(value: str | None) -> str:
    """
    Remove HTML markup from text and trim it.

    Entities are decoded before stripping, so ``&lt;script&gt;`` is removed
    just like ``<script>``. ``<script>`` blocks are removed with their
    content first, then any remaining tags are stripped while their inner
    text is kept. Stray ``<``, ``>`` and ``&`` that do not form markup come
    back as plain characters.

    Args:
        value: Raw user input

    Returns:
        The text without markup, or ``""`` for empty input
    """
    if not value:
        return ""

    text = value
    for _ in range(MAX_PASSES):
        cleaned = html.unescape(_strip_markup(html.unescape(text)))
        if cleaned == text:
            return text.strip()
        text = cleaned

    # Still changing: keep bleach's escaped output so nothing can decode to a tag
    return _strip_markup(text).strip()
