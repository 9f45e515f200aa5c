"""
Infrastructure package for the HAVS tracker.

Centralizes persistence: the tool catalog file, the key-value backing for the
ledger, and the ledger store with its day rollover. Keep this layer focused on
I/O, decoupled from presentation.
"""

from havs.infrastructure.kv_store import (
    InMemoryKeyValueStore,
    KeyValueStore,
    SqliteKeyValueStore,
)
from havs.infrastructure.ledger_store import LedgerStore
from havs.infrastructure.tool_catalog import ToolCatalogStore

__all__ = [
    "InMemoryKeyValueStore",
    "KeyValueStore",
    "SqliteKeyValueStore",
    "LedgerStore",
    "ToolCatalogStore",
]
