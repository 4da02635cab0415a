"""Builds ArchiveRecords from starboard messages.

File naming:
    {archive_id}_{stars}-stars_textcontent.txt
    {archive_id}_{stars}-stars_{index}.{ext}

``index`` counts kept attachments only; URLs without a usable extension are
dropped before numbering.
"""

from __future__ import annotations

import uuid
from typing import TYPE_CHECKING, Any, Callable
from urllib.parse import urlsplit

from starboard_archive.archive.attachments import resolve_attachment_urls
from starboard_archive.archive.classifier import (
    extract_star_count,
    extract_text_content,
)
from starboard_archive.archive.logger import logger
from starboard_archive.archive.models import ArchivedAttachment, ArchiveRecord
from starboard_archive.utils.links import message_permalink

if TYPE_CHECKING:
    from starboard_archive.archive.client import DiscordClient
    from starboard_archive.archive.downloader import ContentDownloader
    from starboard_archive.utils.pipeline_logger import MessageBlock

# Twitter-style size suffix appended after the real extension
LARGE_SUFFIX = ":large"


def derive_extension(url: str) -> str | None:
    """File extension from the last path segment of ``url``, or None."""
    name = urlsplit(url).path.rsplit("/", 1)[-1]
    if "." not in name:
        return None
    ext = name.rsplit(".", 1)[-1]
    if ext.endswith(LARGE_SUFFIX):
        ext = ext[: -len(LARGE_SUFFIX)]
    if not ext or not ext.isalnum():
        return None
    return ext


def file_prefix(archive_id: str, star_count: int) -> str:
    return f"{archive_id}_{star_count}-stars"


def text_file_name(archive_id: str, star_count: int) -> str:
    return f"{file_prefix(archive_id, star_count)}_textcontent.txt"


def plan_attachments(
    message_id: str, archive_id: str, star_count: int, urls: list[str]
) -> list[ArchivedAttachment]:
    """Assign local file names to the URLs that have an extension."""
    attachments: list[ArchivedAttachment] = []
    for url in urls:
        ext = derive_extension(url)
        if ext is None:
            logger.attachment_skipped(message_id, url)
            continue
        index = len(attachments)
        attachments.append(
            ArchivedAttachment(
                source_url=url,
                local_file_name=f"{file_prefix(archive_id, star_count)}_{index}.{ext}",
            )
        )
    return attachments


async def build_record(
    client: "DiscordClient",
    downloader: "ContentDownloader",
    message: dict[str, Any],
    guild_id: str | None = None,
    block: "MessageBlock | None" = None,
    new_archive_id: Callable[[], str] = lambda: str(uuid.uuid4()),
) -> ArchiveRecord:
    """Archive one starboard message and return its record.

    Writes the text file before resolving and downloading attachments.
    Download errors propagate; the caller must not store a partial record.

    Args:
        client: Discord client, used for second-tier attachment resolution
        downloader: Writes text and attachment files
        message: Raw message object from the Discord API
        guild_id: Guild of the channel, for the permalink
        block: Optional log block for per-step output
        new_archive_id: Factory for fresh archive IDs

    Returns:
        The completed ArchiveRecord
    """
    message_id = message["id"]
    archive_id = new_archive_id()
    star_count = extract_star_count(message)
    text_content = extract_text_content(message)

    if block:
        block.field("stars", star_count, color="yellow")
        block.field("archive ID", archive_id)

    if text_content is not None:
        if block:
            block.progress("saving text content...")
        downloader.write_text(text_file_name(archive_id, star_count), text_content)

    urls = await resolve_attachment_urls(client, message)
    attachments = plan_attachments(message_id, archive_id, star_count, urls)

    def _progress(index: int, attachment: ArchivedAttachment) -> None:
        if block:
            block.progress(f"downloading attachment {index + 1}/{len(attachments)}...")

    await downloader.download_all(attachments, on_progress=_progress)

    return ArchiveRecord(
        source_id=message_id,
        archive_id=archive_id,
        source_url=message_permalink(message, guild_id),
        star_count=star_count,
        text_content=text_content,
        attachments=tuple(attachments),
    )
