"""
HAVS tracker - hand-arm vibration exposure tracking for power-tool operators.

Scores each tool-use session in HSE exposure points and keeps a daily running
total against the 100-point action value and the 350-point limit value:

- Tool catalog kept as a JSON document, seeded from a bundled template
- Daily ledger of per-tool minutes and exposure history, reset at local midnight
- A single tracker object that owns both stores and serializes every change
- A command line front end built on typer and rich
"""

from __future__ import annotations

__version__ = "0.1.0"
__license__ = "MIT"

# Public API exports
from havs.config import Settings, get_settings
from havs.domain.models import DailyLedger, HistoryRecord, LedgerEntry, Tool
from havs.domain.scoring import ExposureBand, band_for, points_for_minutes, points_per_minute
from havs.errors import (
    CatalogImportError,
    ConfigError,
    HavsError,
    InvalidToolInput,
    StorageWriteError,
    UnknownToolError,
)
from havs.tracker import ExposureTracker, TrackerState, build_tracker
from havs.utils.logging import configure_logging, get_logger
from havs.validation import ToolDraft, parse_tool_input

__all__ = [
    # Version info
    "__version__",
    "__license__",
    # Configuration
    "Settings",
    "get_settings",
    # Domain
    "DailyLedger",
    "HistoryRecord",
    "LedgerEntry",
    "Tool",
    "ExposureBand",
    "band_for",
    "points_for_minutes",
    "points_per_minute",
    # Errors
    "HavsError",
    "ConfigError",
    "InvalidToolInput",
    "UnknownToolError",
    "CatalogImportError",
    "StorageWriteError",
    # Tracking
    "ExposureTracker",
    "TrackerState",
    "build_tracker",
    "ToolDraft",
    "parse_tool_input",
    # Logging
    "configure_logging",
    "get_logger",
]
