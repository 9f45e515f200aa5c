"""
Exposure tracker: the single owner of the tool catalog and the daily ledger.

All mutations go through one `ExposureTracker`, which holds both stores and
serializes callers with a lock. After every change a fresh `TrackerState` is
built from both stores and published on `states`; observers only ever see the
newest state.

Usage:
    from havs.tracker import build_tracker
    from havs.validation import parse_tool_input

    tracker = build_tracker()
    tool = tracker.add_tool(parse_tool_input("Makita", "HR2470", "5.0"))
    tracker.add_exposure(tool.id, 30)
    print(tracker.snapshot().today_points)
"""

from __future__ import annotations

import threading
import uuid
from dataclasses import dataclass, field
from typing import List, Optional

from havs.config import Settings, get_settings
from havs.domain.models import DailyLedger, HistoryRecord, LedgerEntry, Tool
from havs.domain.scoring import ExposureBand, band_for
from havs.errors import UnknownToolError
from havs.infrastructure.kv_store import SqliteKeyValueStore
from havs.infrastructure.ledger_store import LedgerStore
from havs.infrastructure.tool_catalog import ToolCatalogStore
from havs.utils.clock import Clock, now_millis
from havs.utils.logging import get_logger
from havs.utils.stream import LatestValue
from havs.validation import ToolDraft

log = get_logger(__name__)


@dataclass(frozen=True)
class TrackerState:
    """
    What a presentation layer renders: the catalog, newest-touched first, and
    today's entries and history, newest first.
    """

    day_id: int
    tools: List[Tool] = field(default_factory=list)
    entries: List[LedgerEntry] = field(default_factory=list)
    history: List[HistoryRecord] = field(default_factory=list)

    @property
    def today_points(self) -> float:
        return sum(record.points for record in self.history)

    @property
    def band(self) -> ExposureBand:
        return band_for(self.today_points)

    def minutes_for(self, tool_id: str) -> int:
        for entry in self.entries:
            if entry.tool_id == tool_id:
                return entry.minutes
        return 0

    def tool(self, tool_id: str) -> Optional[Tool]:
        return next((t for t in self.tools if t.id == tool_id), None)


class ExposureTracker:
    """
    Owns a `ToolCatalogStore` and a `LedgerStore` and applies every mutation
    one at a time.
    """

    def __init__(
        self,
        catalog: ToolCatalogStore,
        ledger: LedgerStore,
        clock: Clock = now_millis,
    ) -> None:
        self._catalog = catalog
        self._ledger = ledger
        self._clock = clock
        self._lock = threading.RLock()
        self.states: LatestValue[TrackerState] = LatestValue()
        self._ledger.stream.subscribe(self._on_ledger)

    @property
    def catalog(self) -> ToolCatalogStore:
        return self._catalog

    @property
    def ledger(self) -> LedgerStore:
        return self._ledger

    def _build_state(self, ledger: DailyLedger) -> TrackerState:
        tools = sorted(self._catalog.read_all(), key=lambda t: t.last_touched_millis, reverse=True)
        history = sorted(ledger.history, key=lambda h: h.epoch_millis, reverse=True)
        return TrackerState(
            day_id=ledger.day_id,
            tools=tools,
            entries=list(ledger.entries),
            history=history,
        )

    def _on_ledger(self, ledger: DailyLedger) -> None:
        self._publish(self._build_state(ledger))

    def _publish(self, state: TrackerState) -> None:
        if self.states.value != state:
            self.states.publish(state)

    def snapshot(self) -> TrackerState:
        """Read both stores (rolling the ledger over if the day changed)."""
        with self._lock:
            state = self._build_state(self._ledger.read())
            self._publish(state)
            return state

    def _require_tool(self, tools: List[Tool], tool_id: str) -> Tool:
        for tool in tools:
            if tool.id == tool_id:
                return tool
        raise UnknownToolError(tool_id)

    def add_tool(self, draft: ToolDraft) -> Tool:
        with self._lock:
            now = self._clock()
            tool = Tool(
                id=str(uuid.uuid4()),
                maker=draft.maker.strip(),
                model=draft.model.strip(),
                vibration_ms2=draft.vibration_ms2,
                created_at_epoch_millis=now,
                max_minutes_to_350=max(draft.max_minutes_to_350, 0),
                noise_db=max(draft.noise_db, 0.0),
                updated_at_epoch_millis=now,
            )
            self._catalog.write_all([*self._catalog.read_all(), tool])
            log.info("Tool added", extra={"tool_id": tool.id, "tool": tool.label})
            self.snapshot()
            return tool

    def update_tool(self, tool_id: str, draft: ToolDraft) -> Tool:
        with self._lock:
            tools = self._catalog.read_all()
            current = self._require_tool(tools, tool_id)
            updated = current.model_copy(
                update={
                    "maker": draft.maker.strip(),
                    "model": draft.model.strip(),
                    "vibration_ms2": draft.vibration_ms2,
                    "max_minutes_to_350": max(draft.max_minutes_to_350, 0),
                    "noise_db": max(draft.noise_db, 0.0),
                    "updated_at_epoch_millis": self._clock(),
                }
            )
            self._catalog.write_all([updated if t.id == tool_id else t for t in tools])
            log.info("Tool updated", extra={"tool_id": tool_id, "tool": updated.label})
            self.snapshot()
            return updated

    def remove_tool(self, tool_id: str) -> None:
        """Delete a tool and drop today's entries and history that reference it."""
        with self._lock:
            tools = self._catalog.read_all()
            self._require_tool(tools, tool_id)
            self._catalog.write_all([t for t in tools if t.id != tool_id])
            self._ledger.remove_tool(tool_id)
            log.info("Tool removed", extra={"tool_id": tool_id})
            self.snapshot()

    def add_exposure(self, tool_id: str, minutes: int) -> Optional[HistoryRecord]:
        with self._lock:
            record = self._ledger.add_exposure(tool_id, minutes)
            if record is not None:
                log.info(
                    "Exposure recorded",
                    extra={"tool_id": tool_id, "minutes": record.minutes, "points": record.points},
                )
            return record

    def clear_today(self) -> None:
        with self._lock:
            self._ledger.clear_today()
            log.info("Today's history cleared")

    def export_tools_json(self) -> str:
        with self._lock:
            return self._catalog.export_snapshot()

    def import_tools_json(self, raw: str | bytes) -> List[Tool]:
        with self._lock:
            tools = self._catalog.import_snapshot(raw)
            self.snapshot()
            return tools


def build_tracker(settings: Optional[Settings] = None, clock: Clock = now_millis) -> ExposureTracker:
    """Wire the stores from settings: catalog file plus SQLite-backed ledger."""
    settings = settings or get_settings()
    catalog = ToolCatalogStore(settings.tools_path, seed_path=settings.seed_path)
    ledger = LedgerStore(
        SqliteKeyValueStore(settings.state_db_path),
        catalog,
        clock=clock,
        tz=settings.resolve_timezone(),
    )
    return ExposureTracker(catalog, ledger, clock=clock)


__all__ = ["ExposureTracker", "TrackerState", "build_tracker"]
