"""Starboard message detection and field extraction.

Starboard bots repost popular messages with content like ``⭐ **7** #channel``
and the original message rendered as embeds. Every helper here falls back to
a default instead of raising, so a malformed payload never stops a walk.
"""

from __future__ import annotations

import re
from typing import Any

STAR_GLYPH = "⭐"
STAR_COUNT_RE = re.compile(r"⭐ \*\*(\d+)\*\*")
TEXT_SEPARATOR = "\n\n"


def is_bot_author(message: dict[str, Any]) -> bool:
    author = message.get("author") or {}
    return bool(author.get("bot", False))


def is_starboard_message(message: dict[str, Any]) -> bool:
    """True iff the content opens with ``⭐ **<n>**`` and a bot posted it."""
    content = message.get("content") or ""
    return STAR_COUNT_RE.match(content) is not None and is_bot_author(message)


def extract_star_count(message: dict[str, Any]) -> int:
    """Star count from the content, or 0 when the pattern is missing."""
    match = STAR_COUNT_RE.search(message.get("content") or "")
    return int(match.group(1)) if match else 0


def extract_text_content(message: dict[str, Any]) -> str | None:
    """Embed descriptions joined by a blank line, or None when the join is empty."""
    descriptions = [
        embed.get("description") or "" for embed in message.get("embeds") or []
    ]
    text = TEXT_SEPARATOR.join(descriptions)
    return text or None
