"""Attachment URL resolution for starboard messages.

A message's media is collected in a fixed tier order:

1. direct file attachments
2. embed images
3. embed videos
4. link buttons that point somewhere other than Discord
5. attachments of messages linked from buttons (second tier)

The second tier only runs when a link button points at Discord's CDN: some
starboard bots relay large media as a placeholder message whose buttons
link the CDN file and the original message. In that case the CDN buttons
are dropped and the linked messages' own tier 1-3 media is appended instead.
"""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING, Any

import httpx

from starboard_archive.archive.client import DiscordAPIError
from starboard_archive.archive.logger import logger
from starboard_archive.utils.links import (
    is_cdn_url,
    is_message_link,
    parse_message_link,
)

if TYPE_CHECKING:
    from starboard_archive.archive.client import DiscordClient

COMPONENT_ACTION_ROW = 1
COMPONENT_BUTTON = 2


def direct_attachment_urls(message: dict[str, Any]) -> list[str]:
    return [a["url"] for a in message.get("attachments") or [] if a.get("url")]


def _embed_media_urls(message: dict[str, Any], kind: str) -> list[str]:
    urls: list[str] = []
    for embed in message.get("embeds") or []:
        url = (embed.get(kind) or {}).get("url")
        if url:
            urls.append(url)
    return urls


def embed_image_urls(message: dict[str, Any]) -> list[str]:
    return _embed_media_urls(message, "image")


def embed_video_urls(message: dict[str, Any]) -> list[str]:
    return _embed_media_urls(message, "video")


def button_urls(message: dict[str, Any]) -> list[str]:
    """URLs of every link button, in row then column order."""
    urls: list[str] = []
    for row in message.get("components") or []:
        if row.get("type") != COMPONENT_ACTION_ROW:
            continue
        for component in row.get("components") or []:
            url = component.get("url")
            if component.get("type") == COMPONENT_BUTTON and isinstance(url, str):
                urls.append(url)
    return urls


def link_button_urls(message: dict[str, Any]) -> list[str]:
    """Tier 4: buttons linking outside Discord (no permalinks, no CDN)."""
    return [
        url
        for url in button_urls(message)
        if not is_message_link(url) and not is_cdn_url(url)
    ]


def message_link_urls(message: dict[str, Any]) -> list[str]:
    return [url for url in button_urls(message) if is_message_link(url)]


def uses_cdn_relay(message: dict[str, Any]) -> bool:
    """True when a button links a CDN file, signalling second-tier media."""
    return any(
        is_cdn_url(url) for url in button_urls(message) if not is_message_link(url)
    )


def inline_media_urls(message: dict[str, Any]) -> list[str]:
    """Tiers 1-3, the media carried by the message itself."""
    return [
        *direct_attachment_urls(message),
        *embed_image_urls(message),
        *embed_video_urls(message),
    ]


async def linked_message_urls(
    client: "DiscordClient", message: dict[str, Any]
) -> list[str]:
    """Second tier: inline media of every message linked from a button.

    Linked messages are fetched concurrently and reassembled in button order.
    Any failed fetch cancels the others and empties the whole tier rather
    than failing the message.
    """
    targets = [
        ref
        for ref in (parse_message_link(url) for url in message_link_urls(message))
        if ref is not None
    ]
    if not targets:
        return []

    logger.debug(f"[{message['id']}] Resolving {len(targets)} linked message(s)")
    failure: Exception | None = None
    try:
        async with asyncio.TaskGroup() as tg:
            tasks = [
                tg.create_task(client.get_message(channel_id, message_id))
                for channel_id, message_id in targets
            ]
    except* (DiscordAPIError, httpx.HTTPError) as group:
        failure = group.exceptions[0]

    if failure is not None:
        logger.cross_reference_failed(message["id"], failure)
        return []

    return [url for task in tasks for url in inline_media_urls(task.result())]


async def resolve_attachment_urls(
    client: "DiscordClient", message: dict[str, Any]
) -> list[str]:
    """All media URLs for a message, in tier order."""
    urls = [*inline_media_urls(message), *link_button_urls(message)]
    if uses_cdn_relay(message):
        urls.extend(await linked_message_urls(client, message))
    return urls
