"""
Wall-clock helpers: epoch milliseconds and local calendar day ids.
"""

from __future__ import annotations

import time
from datetime import datetime, timezone, tzinfo
from typing import Callable, Optional

MILLIS_PER_DAY = 86_400_000

Clock = Callable[[], int]


def now_millis() -> int:
    return time.time_ns() // 1_000_000


def utc_offset_millis(epoch_millis: int, tz: Optional[tzinfo] = None) -> int:
    """
    Offset from UTC in force at ``epoch_millis`` for ``tz`` (system zone when None).

    The offset is taken at the instant itself, so a day id computed across a DST
    change still flips at wall-clock midnight.
    """
    instant = datetime.fromtimestamp(epoch_millis / 1000, tz=timezone.utc)
    local = instant.astimezone(tz) if tz is not None else instant.astimezone()
    offset = local.utcoffset()
    if offset is None:
        return 0
    return int(offset.total_seconds() * 1000)


def day_id(epoch_millis: int, tz: Optional[tzinfo] = None) -> int:
    """Count of local calendar days since the epoch for the given instant."""
    return (epoch_millis + utc_offset_millis(epoch_millis, tz)) // MILLIS_PER_DAY


__all__ = ["Clock", "MILLIS_PER_DAY", "day_id", "now_millis", "utc_offset_millis"]
