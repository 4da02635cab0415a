"""Payload factories shared by the test modules."""

from __future__ import annotations

from typing import Any

CHANNEL_ID = "800000000000000000"
GUILD_ID = "700000000000000000"


def make_message(
    message_id: str = "1100000000000000000",
    *,
    stars: int | None = 5,
    bot: bool = True,
    content: str | None = None,
    embeds: list[dict[str, Any]] | None = None,
    attachments: list[str] | None = None,
    buttons: list[str] | None = None,
    channel_id: str = CHANNEL_ID,
) -> dict[str, Any]:
    """Build a Discord API message payload shaped like a starboard repost."""
    if content is None:
        content = f"⭐ **{stars}** <#123>" if stars is not None else "hello"
    components: list[dict[str, Any]] = []
    if buttons:
        components.append(
            {
                "type": 1,
                "components": [
                    {"type": 2, "style": 5, "label": "Link", "url": url}
                    for url in buttons
                ],
            }
        )
    return {
        "id": message_id,
        "channel_id": channel_id,
        "author": {"id": "42", "username": "StarBot", "bot": bot},
        "content": content,
        "embeds": embeds or [],
        "attachments": [
            {"id": str(i), "filename": f"f{i}", "url": url}
            for i, url in enumerate(attachments or [])
        ],
        "components": components,
    }
