"""
Daily ledger store: today's per-tool minutes and exposure history.

The ledger is one JSON document under a single key of a `KeyValueStore`.
Every read compares the stored day id with the current local day; on a
mismatch the ledger is emptied for the new day and that rolled-over value is
written back once, so later reads on the same day find it already current.

Each successful write is followed by a fresh read, and any new value is
broadcast on `stream` (latest value only, see `havs.utils.stream`).
"""

from __future__ import annotations

import uuid
from datetime import tzinfo
from typing import Optional, Protocol

from pydantic import ValidationError

from havs.domain.models import DailyLedger, HistoryRecord, Tool
from havs.domain.scoring import points_for_minutes
from havs.infrastructure.kv_store import KeyValueStore
from havs.utils.clock import Clock, day_id, now_millis
from havs.utils.logging import get_logger
from havs.utils.stream import LatestValue

log = get_logger(__name__)

STATE_KEY = "state_json"


class ToolLookup(Protocol):
    def find(self, tool_id: str) -> Optional[Tool]:
        ...


class LedgerStore:
    """
    Durable state for "today".

    Parameters
    ----------
    kv : KeyValueStore
        Backing store for the ledger document.
    tools : ToolLookup
        Source of current tool definitions (normally the `ToolCatalogStore`).
    clock : Callable[[], int]
        Epoch-millisecond clock; injectable for tests.
    tz : tzinfo | None
        Zone whose midnight ends the day. None uses the system local zone.
    """

    def __init__(
        self,
        kv: KeyValueStore,
        tools: ToolLookup,
        clock: Clock = now_millis,
        tz: Optional[tzinfo] = None,
        key: str = STATE_KEY,
    ) -> None:
        self._kv = kv
        self._tools = tools
        self._clock = clock
        self._tz = tz
        self._key = key
        self.stream: LatestValue[DailyLedger] = LatestValue()

    def today_id(self) -> int:
        return day_id(self._clock(), self._tz)

    def _load(self) -> Optional[DailyLedger]:
        raw = self._kv.get(self._key)
        if raw is None or not raw.strip():
            return None
        try:
            return DailyLedger.model_validate_json(raw)
        except ValidationError as exc:
            log.warning(
                "Stored ledger is malformed; starting today from empty",
                extra={"key": self._key, "errors": exc.error_count()},
            )
            return None

    def _write(self, ledger: DailyLedger) -> None:
        self._kv.put(self._key, ledger.model_copy(update={"tools": []}).to_json())

    def read(self) -> DailyLedger:
        """
        Return today's ledger, rolling it over (and persisting once) if the
        stored one belongs to another day.
        """
        today = self.today_id()
        loaded = self._load()

        if loaded is not None and loaded.day_id == today:
            ledger = loaded
        else:
            ledger = DailyLedger(day_id=today)
            log.info(
                "New day; ledger reset",
                extra={"stored_day_id": loaded.day_id if loaded else None, "day_id": today},
            )
            self._write(ledger)

        if self.stream.value != ledger:
            self.stream.publish(ledger)
        return ledger

    def save(self, ledger: DailyLedger) -> DailyLedger:
        """Replace the stored ledger and return the value read back after the write."""
        self._write(ledger)
        return self.read()

    def add_exposure(self, tool_id: str, minutes_to_add: int) -> Optional[HistoryRecord]:
        """
        Record ``minutes_to_add`` of use for a catalog tool.

        Returns the new history record, or None when nothing was recorded
        (zero or negative minutes, or a tool id missing from the catalog).
        """
        minutes = max(minutes_to_add, 0)
        if minutes == 0:
            return None

        tool = self._tools.find(tool_id)
        if tool is None:
            log.info("Exposure dropped for unknown tool", extra={"tool_id": tool_id})
            return None

        record = HistoryRecord(
            id=str(uuid.uuid4()),
            epoch_millis=self._clock(),
            tool_id=tool.id,
            maker=tool.maker,
            model=tool.model,
            vibration_ms2=tool.vibration_ms2,
            minutes=minutes,
            points=points_for_minutes(tool.vibration_ms2, minutes),
        )
        self.save(self.read().with_exposure(record))
        return record

    def remove_tool(self, tool_id: str) -> DailyLedger:
        return self.save(self.read().without_tool(tool_id))

    def clear_today(self) -> DailyLedger:
        return self.save(self.read().cleared())


__all__ = ["LedgerStore", "ToolLookup", "STATE_KEY"]
