"""
Utilities package for the HAVS tracker.

Exports shared helpers for logging, wall-clock day ids and value broadcasting.
Keep this package lightweight and free of domain-specific logic.
"""

from havs.utils.clock import day_id, now_millis
from havs.utils.logging import configure_logging, get_logger
from havs.utils.stream import LatestValue

__all__ = [
    "configure_logging",
    "get_logger",
    "day_id",
    "now_millis",
    "LatestValue",
]
