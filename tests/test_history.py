"""Unit tests for starboard_archive.archive.history."""

from __future__ import annotations

from unittest.mock import AsyncMock, patch

import pytest

from starboard_archive.archive.client import DiscordAPIError
from starboard_archive.archive.history import HistoryWalker

PATCH_BASE = "starboard_archive.archive.history"


def _page(*ids: int) -> list[dict]:
    """A page as Discord returns it: newest first."""
    return [{"id": str(i)} for i in sorted(ids, reverse=True)]


@pytest.fixture
def mock_client():
    return AsyncMock()


@pytest.fixture(autouse=True)
def mock_logger():
    with patch(f"{PATCH_BASE}.logger") as m:
        yield m


async def _collect(walker: HistoryWalker) -> list[str]:
    return [m["id"] async for m in walker.messages()]


# ---------------------------------------------------------------------------
# TestHistoryWalker
# ---------------------------------------------------------------------------


class TestHistoryWalker:
    """Tests for HistoryWalker.messages."""

    @pytest.mark.asyncio
    async def test_empty_history(self, mock_client):
        mock_client.get_messages.return_value = []
        walker = HistoryWalker(mock_client, "800", after="100")

        assert await _collect(walker) == []
        assert walker.cursor == "100"
        assert walker.pages_fetched == 0

    @pytest.mark.asyncio
    async def test_emits_chronologically_across_pages(self, mock_client):
        mock_client.get_messages.side_effect = [
            _page(101, 102, 103),
            _page(104, 105),
            [],
        ]
        walker = HistoryWalker(mock_client, "800", after="100", page_size=3)

        assert await _collect(walker) == ["101", "102", "103", "104", "105"]
        assert walker.cursor == "105"
        assert walker.pages_fetched == 2
        assert walker.messages_seen == 5

    @pytest.mark.asyncio
    async def test_after_advances_to_newest_of_page(self, mock_client):
        mock_client.get_messages.side_effect = [_page(101, 102), _page(103), []]
        walker = HistoryWalker(mock_client, "800", after="100", page_size=2)

        await _collect(walker)

        afters = [c.kwargs["after"] for c in mock_client.get_messages.call_args_list]
        assert afters == ["100", "102", "103"]
        limits = {c.kwargs["limit"] for c in mock_client.get_messages.call_args_list}
        assert limits == {2}

    @pytest.mark.asyncio
    async def test_missing_terminal_id_stops_walk(self, mock_client):
        mock_client.get_messages.side_effect = [[{"content": "no id"}, {"id": "101"}]]
        walker = HistoryWalker(mock_client, "800", after="100")

        messages = [m async for m in walker.messages()]

        assert len(messages) == 2
        assert mock_client.get_messages.await_count == 1
        assert walker.cursor == "100"

    @pytest.mark.asyncio
    async def test_fetch_error_propagates(self, mock_client):
        mock_client.get_messages.side_effect = [
            _page(101),
            DiscordAPIError(403, "Missing Access"),
        ]
        walker = HistoryWalker(mock_client, "800", after="100")

        with pytest.raises(DiscordAPIError):
            await _collect(walker)
        assert walker.cursor == "101"

    @pytest.mark.asyncio
    async def test_is_lazy(self, mock_client):
        mock_client.get_messages.side_effect = [_page(101, 102), _page(103), []]
        walker = HistoryWalker(mock_client, "800", after="100")

        messages = walker.messages()
        first = await messages.__anext__()
        await messages.aclose()

        assert first == {"id": "101"}
        assert mock_client.get_messages.await_count == 1
