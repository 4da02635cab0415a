"""Discord REST API client with rate limit handling.

This module provides an async HTTP client for the handful of Discord REST
endpoints the archiver reads:
- Automatic rate limit handling (429 responses)
- Exponential backoff for server errors (5xx) and transport failures
- Bot or user token authorization
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Any

import httpx

from starboard_archive.archive.logger import logger


BASE_URL = "https://discord.com/api/v10"

# Retry configuration
MAX_RETRIES = 5
MAX_RATE_LIMIT_RETRIES = 30  # Cap on consecutive 429 retries
INITIAL_BACKOFF = 1.0  # seconds
MAX_BACKOFF = 64.0  # seconds
MAX_PAGE_SIZE = 100


class DiscordAPIError(Exception):
    """Raised when Discord API returns an error."""

    def __init__(self, status_code: int, message: str) -> None:
        self.status_code = status_code
        self.message = message
        super().__init__(f"Discord API error {status_code}: {message}")


@dataclass
class DiscordClient:
    """Async Discord REST API client.

    ``authorization`` is the full header value ("Bot <token>" for bots).
    Handles rate limits and retries automatically.
    """

    authorization: str
    user_agent: str

    def __post_init__(self) -> None:
        self._client: httpx.AsyncClient | None = None

    @property
    def headers(self) -> dict[str, str]:
        return {
            "Authorization": self.authorization,
            "User-Agent": self.user_agent,
            "Content-Type": "application/json",
        }

    async def __aenter__(self) -> "DiscordClient":
        self._client = httpx.AsyncClient(
            base_url=BASE_URL,
            headers=self.headers,
            timeout=30.0,
        )
        return self

    async def __aexit__(self, *args: Any) -> None:
        if self._client:
            await self._client.aclose()
            self._client = None

    async def _request(
        self,
        method: str,
        path: str,
        params: dict[str, Any] | None = None,
    ) -> Any:
        """Make a request with rate limit and retry handling."""
        if not self._client:
            raise RuntimeError("Client not initialized. Use async with.")

        backoff = INITIAL_BACKOFF
        attempt = 0
        rate_limit_retries = 0

        while True:
            try:
                response = await self._client.request(method, path, params=params)

                if response.status_code == 200:
                    try:
                        return response.json()
                    except ValueError as e:
                        raise DiscordAPIError(200, f"Invalid JSON body: {e}") from e

                # Rate limited - wait and retry (doesn't count as attempt)
                if response.status_code == 429:
                    rate_limit_retries += 1
                    if rate_limit_retries > MAX_RATE_LIMIT_RETRIES:
                        raise DiscordAPIError(429, "Max rate limit retries exceeded")
                    retry_after = float(response.headers.get("Retry-After", 1.0))
                    logger.rate_limit(retry_after)
                    await asyncio.sleep(retry_after)
                    continue

                # Client errors - fail immediately
                if response.status_code in (401, 403, 404):
                    error_msg = response.text
                    try:
                        error_msg = response.json().get("message", response.text)
                    except Exception:
                        pass
                    raise DiscordAPIError(response.status_code, error_msg)

                # Server errors - retry with backoff
                if response.status_code >= 500 and attempt < MAX_RETRIES:
                    reason = f"HTTP {response.status_code}"
                else:
                    raise DiscordAPIError(response.status_code, response.text)

            except httpx.TimeoutException:
                if attempt >= MAX_RETRIES:
                    raise
                reason = "timeout"

            except httpx.TransportError as e:
                if attempt >= MAX_RETRIES:
                    raise
                reason = str(e)

            attempt += 1
            logger.retry(attempt, MAX_RETRIES, backoff, reason)
            await asyncio.sleep(backoff)
            backoff = min(backoff * 2, MAX_BACKOFF)

    # -------------------------------------------------------------------------
    # Channel endpoints
    # -------------------------------------------------------------------------

    async def get_channel(self, channel_id: str) -> dict[str, Any]:
        """Fetch channel information (includes ``guild_id`` for guild channels)."""
        return await self._request("GET", f"/channels/{channel_id}")

    # -------------------------------------------------------------------------
    # Message endpoints
    # -------------------------------------------------------------------------

    async def get_messages(
        self,
        channel_id: str,
        after: str | None = None,
        limit: int = MAX_PAGE_SIZE,
    ) -> list[dict[str, Any]]:
        """Fetch a page of messages newer than ``after``.

        Args:
            channel_id: The channel to fetch from
            after: Only return messages with a larger snowflake
            limit: Max messages to return (1-100)

        Returns:
            List of message objects, ordered by ID descending (newest first)
        """
        params: dict[str, Any] = {"limit": min(limit, MAX_PAGE_SIZE)}
        if after:
            params["after"] = after
        return await self._request(
            "GET", f"/channels/{channel_id}/messages", params=params
        )

    async def get_message(self, channel_id: str, message_id: str) -> dict[str, Any]:
        """Fetch a single message by ID."""
        return await self._request(
            "GET", f"/channels/{channel_id}/messages/{message_id}"
        )
