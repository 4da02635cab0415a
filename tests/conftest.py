"""Shared fixtures for starboard-archive tests."""

from __future__ import annotations

import pytest

from factories import CHANNEL_ID
from starboard_archive.config.settings import ArchiveSettings


@pytest.fixture
def settings(tmp_path) -> ArchiveSettings:
    return ArchiveSettings(
        channel_id=CHANNEL_ID,
        starting_message_id="1000000000000000000",
        discord_token="test-token",
        output_dir=tmp_path / "output",
        downloads_delay_ms=0,
    )
