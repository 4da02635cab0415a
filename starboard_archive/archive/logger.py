"""Rich-based logging for the starboard archiver.

Adds archive-specific output on top of BasePipelineLogger: run headers,
per-message skip notices, cross-reference warnings and the final summary.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from starboard_archive.utils.pipeline_logger import BasePipelineLogger


class ArchiveLogger(BasePipelineLogger):
    """Logger for starboard archive operations with rich output."""

    def __init__(self) -> None:
        super().__init__(__name__)

    # -------------------------------------------------------------------------
    # Rate Limiting & Retries
    # -------------------------------------------------------------------------

    def rate_limit(self, retry_after: float) -> None:
        self._logger.warning(f"Rate limited. Waiting {retry_after:.1f}s...")

    def retry(
        self, attempt: int, max_attempts: int, wait_time: float, reason: str = ""
    ) -> None:
        msg = f"Retry {attempt}/{max_attempts} in {wait_time:.1f}s"
        if reason:
            msg += f" ({reason})"
        self._logger.warning(msg)

    # -------------------------------------------------------------------------
    # Run lifecycle
    # -------------------------------------------------------------------------

    def run_start(self, channel_name: str, channel_id: str, after: str) -> None:
        """Print the header for a channel walk."""
        self.console.print()
        self.console.rule(f"[bold cyan]#{channel_name}[/bold cyan]", style="cyan")
        self.console.print(f"[dim]Channel ID: {channel_id}[/dim]")
        self.console.print(f"[dim]Walking history after {after}[/dim]")

    def collection_loaded(self, count: int, path: Path) -> None:
        self._logger.info(f"Loaded {count:,} records from {path}")

    def collection_reset(self, output_dir: Path) -> None:
        self._logger.info(f"No snapshot found, created fresh output at {output_dir}")

    def collection_saved(self, count: int, path: Path) -> None:
        self._logger.info(f"Saved {count:,} records to {path}")

    # -------------------------------------------------------------------------
    # Message processing
    # -------------------------------------------------------------------------

    def message_skip(self, message_id: str) -> None:
        """Log an already-archived message (debug only, reruns see many)."""
        self._logger.debug(f"[{message_id}] Already archived, skipping")

    def message_abandoned(self, message_id: str) -> None:
        self._clear_progress_line()
        self._logger.warning(f"[{message_id}] Interrupted, record not saved")

    def cross_reference_failed(self, message_id: str, error: Exception) -> None:
        self._logger.warning(
            f"[{message_id}] Could not fetch linked messages, "
            f"skipping their attachments: {error}"
        )

    def attachment_skipped(self, message_id: str, url: str) -> None:
        self._logger.debug(f"[{message_id}] No file extension in {url}, skipping")

    # -------------------------------------------------------------------------
    # Summary
    # -------------------------------------------------------------------------

    def summary(
        self,
        archived: int = 0,
        skipped: int = 0,
        scanned: int = 0,
        pages: int = 0,
        attachments: int = 0,
        total: int = 0,
        elapsed: float = 0.0,
        **kwargs: Any,
    ) -> None:
        """Print final archive summary."""
        self.print_summary(
            "Archive",
            elapsed=elapsed,
            stats={
                "Pages fetched": pages,
                "Messages scanned": scanned,
                "Records added": archived,
                "Already archived": skipped,
                "Attachments downloaded": attachments,
                "Records in collection": total,
            },
            style="cyan",
        )


# Global logger instance
logger = ArchiveLogger()
