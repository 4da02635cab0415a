# starboard_archive/utils/snowflake.py
from __future__ import annotations

from datetime import datetime, timezone
from typing import Iterable

DISCORD_EPOCH = 1420070400000  # 2015-01-01 UTC (ms)


def snowflake_key(snowflake: str | int) -> int:
    """Ordering key for snowflakes carried as decimal strings."""
    if isinstance(snowflake, int):
        return snowflake
    if not snowflake.isdigit():
        raise ValueError(f"not a snowflake: {snowflake!r}")
    return int(snowflake)


def is_newer(a: str | int, b: str | int) -> bool:
    return snowflake_key(a) > snowflake_key(b)


def newest(snowflakes: Iterable[str]) -> str | None:
    return max(snowflakes, key=snowflake_key, default=None)


def snowflake_to_datetime(snowflake: str | int) -> datetime:
    ms = (snowflake_key(snowflake) >> 22) + DISCORD_EPOCH
    return datetime.fromtimestamp(ms / 1000, tz=timezone.utc)
