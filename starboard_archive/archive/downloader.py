"""Content downloader: writes text files and fetches attachments to disk.

Attachments are fetched one at a time with a fixed pause between them.
Downloads use their own HTTP client, so the Discord authorization header
never leaves the API host.
"""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Any, Callable, Sequence

import httpx

from starboard_archive.archive.models import ArchivedAttachment


class DownloadError(Exception):
    """Raised when an attachment cannot be fetched."""

    def __init__(self, url: str, reason: str) -> None:
        self.url = url
        self.reason = reason
        super().__init__(f"Download failed for {url}: {reason}")


class ContentDownloader:
    """Writes archive content under ``downloads_dir``.

    Use as an async context manager; the HTTP client lives for the run.
    """

    def __init__(
        self,
        downloads_dir: Path,
        delay_ms: int = 10,
        user_agent: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.downloads_dir = downloads_dir
        self.delay_ms = delay_ms
        self.user_agent = user_agent
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def __aenter__(self) -> "ContentDownloader":
        headers = {"User-Agent": self.user_agent} if self.user_agent else None
        self._client = httpx.AsyncClient(
            headers=headers,
            timeout=60.0,
            follow_redirects=True,
            transport=self._transport,
        )
        return self

    async def __aexit__(self, *args: Any) -> None:
        if self._client:
            await self._client.aclose()
            self._client = None

    def write_text(self, file_name: str, text: str) -> Path:
        """Write text content synchronously and return its path."""
        path = self.downloads_dir / file_name
        path.write_text(text, encoding="utf-8")
        return path

    async def fetch(self, url: str) -> bytes:
        """GET ``url`` fully into memory."""
        if not self._client:
            raise RuntimeError("Downloader not initialized. Use async with.")
        try:
            response = await self._client.get(url)
        except httpx.HTTPError as e:
            raise DownloadError(url, str(e) or e.__class__.__name__) from e
        if not response.is_success:
            raise DownloadError(url, f"HTTP {response.status_code}")
        return response.content

    async def download_all(
        self,
        attachments: Sequence[ArchivedAttachment],
        on_progress: Callable[[int, ArchivedAttachment], None] | None = None,
    ) -> int:
        """Download attachments in order, pausing ``delay_ms`` after each.

        The first failure propagates; later attachments are not attempted.

        Returns:
            Number of attachments written
        """
        for index, attachment in enumerate(attachments):
            if on_progress:
                on_progress(index, attachment)
            data = await self.fetch(attachment.source_url)
            (self.downloads_dir / attachment.local_file_name).write_bytes(data)
            await asyncio.sleep(self.delay_ms / 1000)
        return len(attachments)
