"""Forward history walk for a channel.

Fetches pages with the ``after`` parameter starting at a checkpoint and
yields messages oldest-first. Discord returns every page newest-first, so
each page is reversed before it is emitted. The walk ends when a page comes
back empty.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, AsyncIterator

from starboard_archive.archive.logger import logger
from starboard_archive.utils.snowflake import snowflake_to_datetime

if TYPE_CHECKING:
    from starboard_archive.archive.client import DiscordClient


@dataclass
class HistoryWalker:
    """Lazy, resumable walk over a channel's history.

    ``cursor`` always holds the newest message ID fetched so far; it starts
    at ``after`` and only moves forward.
    """

    client: "DiscordClient"
    channel_id: str
    after: str
    page_size: int = 100
    cursor: str = field(init=False)
    pages_fetched: int = field(default=0, init=False)
    messages_seen: int = field(default=0, init=False)

    def __post_init__(self) -> None:
        self.cursor = self.after

    async def messages(self) -> AsyncIterator[dict[str, Any]]:
        """Yield every message newer than ``after`` in chronological order.

        API errors propagate to the caller.
        """
        while True:
            page = await self.client.get_messages(
                channel_id=self.channel_id,
                after=self.cursor,
                limit=self.page_size,
            )

            if not page:
                logger.debug(f"No messages after {self.cursor}, walk complete")
                return

            self.pages_fetched += 1
            page = list(reversed(page))

            for message in page:
                self.messages_seen += 1
                yield message

            last_id = page[-1].get("id")
            if not last_id:
                logger.warning(f"Page ended without a message ID after {self.cursor}")
                return
            self.cursor = last_id

            newest_date = snowflake_to_datetime(last_id).strftime("%Y-%m-%d")
            logger.page_progress(self.messages_seen, newest_date=newest_date)
