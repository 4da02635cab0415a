"""Discord URL helpers: message permalinks and CDN detection."""

from __future__ import annotations

import re
from typing import Any

MESSAGE_LINK_PREFIX = "https://discord.com/channels"
CDN_PREFIXES = (
    "https://cdn.discordapp.com",
    "https://media.discordapp.net",
)

_MESSAGE_LINK_RE = re.compile(
    r"^https://discord\.com/channels/"
    r"(?P<guild_id>[^/]+)/(?P<channel_id>\d+)/(?P<message_id>\d+)"
    r"(?:[/?#].*)?$"
)


def is_message_link(url: str) -> bool:
    return url.startswith(MESSAGE_LINK_PREFIX)


def is_cdn_url(url: str) -> bool:
    return url.startswith(CDN_PREFIXES)


def parse_message_link(url: str) -> tuple[str, str] | None:
    """Return (channel_id, message_id) for a message permalink, else None."""
    match = _MESSAGE_LINK_RE.match(url)
    if not match:
        return None
    return match.group("channel_id"), match.group("message_id")


def message_permalink(message: dict[str, Any], guild_id: str | None = None) -> str:
    """Build the jump URL for a message.

    REST payloads only carry ``guild_id`` on some endpoints, so the caller may
    pass the channel's guild. Direct messages use ``@me``.
    """
    guild = message.get("guild_id") or guild_id or "@me"
    return f"{MESSAGE_LINK_PREFIX}/{guild}/{message['channel_id']}/{message['id']}"
