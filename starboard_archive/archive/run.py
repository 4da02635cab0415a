"""Main orchestration for the starboard archiver.

Walks the configured channel, archives each new starboard message, and keeps
the collection snapshot in sync on completion, interruption or failure.
"""

from __future__ import annotations

import asyncio
from contextlib import AsyncExitStack, aclosing, suppress
from typing import Any

from starboard_archive.archive.classifier import is_starboard_message
from starboard_archive.archive.client import DiscordClient
from starboard_archive.archive.downloader import ContentDownloader
from starboard_archive.archive.history import HistoryWalker
from starboard_archive.archive.logger import logger
from starboard_archive.archive.models import ArchiveRecord
from starboard_archive.archive.record_builder import build_record
from starboard_archive.archive.store import CollectionStore
from starboard_archive.config.settings import ArchiveSettings, get_settings
from starboard_archive.core import BaseOrchestrator
from starboard_archive.utils.snowflake import is_newer


class ArchiveOrchestrator(BaseOrchestrator):
    """Orchestrates a single archive run over one starboard channel.

    Messages are archived strictly one at a time so the collection only ever
    holds finished records; a stop request abandons the in-flight message.
    """

    def __init__(
        self,
        settings: ArchiveSettings,
        client: DiscordClient | None = None,
        downloader: ContentDownloader | None = None,
        store: CollectionStore | None = None,
    ) -> None:
        super().__init__()
        self.settings = settings
        if client is None:
            client = DiscordClient(
                authorization=settings.authorization,
                user_agent=settings.user_agent,
            )
        if downloader is None:
            downloader = ContentDownloader(
                downloads_dir=settings.downloads_dir,
                delay_ms=settings.downloads_delay_ms,
                user_agent=settings.user_agent,
            )
        if store is None:
            store = CollectionStore(settings.output_dir, settings.downloads_subdir)
        self.client = client
        self.downloader = downloader
        self.store = store
        self._resources = AsyncExitStack()
        self._loaded = False
        self.guild_id: str | None = None
        self.channel_name: str = settings.channel_id
        self.walker: HistoryWalker | None = None
        # Stats
        self.messages_scanned = 0
        self.messages_archived = 0
        self.messages_skipped = 0
        self.attachments_downloaded = 0
        self.interrupted = False

    async def initialize(self) -> None:
        self.store.load()
        self._loaded = True

        await self._resources.enter_async_context(self.client)
        await self._resources.enter_async_context(self.downloader)

        channel = await self.client.get_channel(self.settings.channel_id)
        self.guild_id = channel.get("guild_id")
        self.channel_name = channel.get("name") or self.settings.channel_id

    def walk_start(self) -> str:
        """Snowflake to walk after: the configured start, or the newest record."""
        start = self.settings.starting_message_id
        latest = self.store.latest_source_id()
        if self.settings.resume_from_archive and latest and is_newer(latest, start):
            return latest
        return start

    async def _run_pipeline(self) -> None:
        walker = HistoryWalker(
            client=self.client,
            channel_id=self.settings.channel_id,
            after=self.walk_start(),
            page_size=self.settings.page_size,
        )
        self.walker = walker
        logger.run_start(self.channel_name, self.settings.channel_id, walker.after)

        async with aclosing(walker.messages()) as messages:
            async for message in messages:
                if self.stop_requested:
                    self.interrupted = True
                    break
                self.messages_scanned += 1

                if not is_starboard_message(message):
                    continue
                if self.store.has(message["id"]):
                    self.messages_skipped += 1
                    logger.message_skip(message["id"])
                    continue

                record = await self._archive_or_abandon(message)
                if record is None:
                    self.interrupted = True
                    break

                self.store.add(record)
                self.messages_archived += 1
                self.attachments_downloaded += len(record.attachments)
                logger.debug(
                    f"[{record.source_id}] Added to collection "
                    f"({len(self.store):,} total)"
                )

        logger.info(f"Last checkpoint: {walker.cursor}")

    async def _archive_or_abandon(
        self, message: dict[str, Any]
    ) -> ArchiveRecord | None:
        """Archive a message unless a stop request arrives first.

        Returns:
            The finished record, or None if the message was abandoned
        """
        task = asyncio.create_task(self._archive_message(message))
        stop = asyncio.create_task(self.stop_event.wait())
        done, _ = await asyncio.wait({task, stop}, return_when=asyncio.FIRST_COMPLETED)

        if task in done:
            stop.cancel()
            return task.result()

        task.cancel()
        with suppress(asyncio.CancelledError):
            await task
        logger.message_abandoned(message["id"])
        return None

    async def _archive_message(self, message: dict[str, Any]) -> ArchiveRecord:
        with logger.block(message["id"]) as block:
            record = await build_record(
                client=self.client,
                downloader=self.downloader,
                message=message,
                guild_id=self.guild_id,
                block=block,
            )
            block.result(f"archived {len(record.attachments)} attachment(s)")
        return record

    async def shutdown(self) -> None:
        """Flush the collection and close clients. Safe to call repeatedly."""
        try:
            if self._loaded:
                self.store.flush()
        finally:
            await self._resources.aclose()

    def _log_summary(self, elapsed: float) -> None:
        logger.summary(
            archived=self.messages_archived,
            skipped=self.messages_skipped,
            scanned=self.messages_scanned,
            pages=self.walker.pages_fetched if self.walker else 0,
            attachments=self.attachments_downloaded,
            total=len(self.store),
            elapsed=elapsed,
        )


async def run_archive(config_path: str | None = None) -> ArchiveOrchestrator:
    """Entry point for running the archiver."""
    settings = get_settings(config_path)
    orchestrator = ArchiveOrchestrator(settings)
    await orchestrator.run()
    return orchestrator
