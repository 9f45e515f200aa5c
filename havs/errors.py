"""
Error types raised by the HAVS tracker.

Reads of persisted documents never raise; they degrade to defaults inside the
stores. Everything below is raised to the caller and is expected to be shown
to the user.
"""

from __future__ import annotations


class HavsError(Exception):
    """Base class for errors surfaced to the caller."""


class ConfigError(HavsError):
    """Raised when configuration values cannot be resolved."""


class InvalidToolInput(HavsError, ValueError):
    """
    Raised when tool form input is rejected before any store mutation.

    ``str(exc)`` is the human-readable reason.
    """

    def __init__(self, reason: str) -> None:
        super().__init__(reason)
        self.reason = reason


class UnknownToolError(HavsError, LookupError):
    """Raised when an edit or delete targets a tool id missing from the catalog."""

    def __init__(self, tool_id: str) -> None:
        super().__init__(f"No tool with id '{tool_id}'")
        self.tool_id = tool_id


class CatalogImportError(HavsError):
    """Raised when an imported catalog document fails validation."""


class StorageWriteError(HavsError):
    """Raised when a durable write fails; the previous document may be stale."""


__all__ = [
    "HavsError",
    "ConfigError",
    "InvalidToolInput",
    "UnknownToolError",
    "CatalogImportError",
    "StorageWriteError",
]
