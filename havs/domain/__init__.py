"""
Domain package for the HAVS tracker.

Exports the persisted document models and the exposure scoring rules.
Keep this package free of I/O; stores live in `havs.infrastructure`.
"""

from havs.domain.models import DailyLedger, HistoryRecord, LedgerEntry, Tool, ToolList
from havs.domain.scoring import (
    CAUTION_POINTS,
    LIMIT_POINTS,
    ExposureBand,
    band_for,
    points_for_minutes,
    points_per_minute,
)

__all__ = [
    "DailyLedger",
    "HistoryRecord",
    "LedgerEntry",
    "Tool",
    "ToolList",
    "CAUTION_POINTS",
    "LIMIT_POINTS",
    "ExposureBand",
    "band_for",
    "points_for_minutes",
    "points_per_minute",
]
