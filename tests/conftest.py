"""
Pytest configuration for the HAVS tracker.

Provides fixtures for:
- A controllable millisecond clock
- Tool catalog stores backed by temporary files
- Ledger stores backed by an in-memory key-value store
- A fully wired tracker
"""

from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path
from typing import Callable, Generator

import pytest

from havs.config import get_settings
from havs.domain.models import Tool
from havs.infrastructure.kv_store import InMemoryKeyValueStore
from havs.infrastructure.ledger_store import LedgerStore
from havs.infrastructure.tool_catalog import ToolCatalogStore
from havs.tracker import ExposureTracker

MILLIS_PER_MINUTE = 60_000
MILLIS_PER_DAY = 86_400_000

# 2026-10-19 10:00 UTC
START_MILLIS = int(datetime(2026, 10, 19, 10, 0, tzinfo=timezone.utc).timestamp() * 1000)


class FakeClock:
    """Callable clock returning a fixed epoch-millisecond value until advanced."""

    def __init__(self, millis: int) -> None:
        self.millis = millis

    def __call__(self) -> int:
        return self.millis

    def advance(self, minutes: int = 0, days: int = 0) -> None:
        self.millis += minutes * MILLIS_PER_MINUTE + days * MILLIS_PER_DAY


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock(START_MILLIS)


@pytest.fixture
def empty_seed(tmp_path: Path) -> Path:
    seed = tmp_path / "seed.json"
    seed.write_text("[]", encoding="utf-8")
    return seed


@pytest.fixture
def catalog(tmp_path: Path, empty_seed: Path) -> ToolCatalogStore:
    return ToolCatalogStore(tmp_path / "data" / "tools.json", seed_path=empty_seed)


@pytest.fixture
def kv() -> InMemoryKeyValueStore:
    return InMemoryKeyValueStore()


@pytest.fixture
def ledger(kv: InMemoryKeyValueStore, catalog: ToolCatalogStore, clock: FakeClock) -> LedgerStore:
    return LedgerStore(kv, catalog, clock=clock, tz=timezone.utc)


@pytest.fixture
def tracker(catalog: ToolCatalogStore, ledger: LedgerStore, clock: FakeClock) -> ExposureTracker:
    return ExposureTracker(catalog, ledger, clock=clock)


@pytest.fixture
def make_tool() -> Callable[..., Tool]:
    """Factory for catalog tools with sensible defaults."""

    def _make(
        tool_id: str = "tool-1",
        maker: str = "Makita",
        model: str = "HR2470",
        vibration: float = 5.0,
        created: int = START_MILLIS,
        **overrides,
    ) -> Tool:
        return Tool(
            id=tool_id,
            maker=maker,
            model=model,
            vibration_ms2=vibration,
            created_at_epoch_millis=created,
            updated_at_epoch_millis=overrides.pop("updated", created),
            **overrides,
        )

    return _make


@pytest.fixture
def clear_settings_cache() -> Generator[None, None, None]:
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
