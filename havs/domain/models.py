"""
Domain models for the HAVS tracker.

Field aliases match the persisted JSON documents (camelCase), so the same
models parse the catalog file, the ledger document and older snapshots of
both. Unknown keys are ignored and optional fields fall back to their "unset"
values, which keeps documents written by earlier versions readable.
"""
from __future__ import annotations

from typing import Dict, List

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, field_validator

_DOCUMENT_CONFIG = ConfigDict(
    frozen=True,
    populate_by_name=True,
    extra="ignore",
)


class Tool(BaseModel):
    """
    A power tool definition from the catalog.
    """

    id: str = Field(..., description="Opaque unique id, fixed at creation.")
    maker: str = Field(..., description="Manufacturer name.")
    model: str = Field(..., description="Model name or number.")
    vibration_ms2: float = Field(
        ..., alias="vibrationMs2", description="Vibration magnitude in m/s²."
    )
    created_at_epoch_millis: int = Field(..., alias="createdAtEpochMillis")
    max_minutes_to_350: int = Field(
        0, alias="maxMinutesTo350", description="Minutes to reach 350 points; 0 = unset."
    )
    noise_db: float = Field(0.0, alias="noiseDb", description="Noise level in dB; 0 = unset.")
    updated_at_epoch_millis: int = Field(0, alias="updatedAtEpochMillis")

    model_config = _DOCUMENT_CONFIG

    @property
    def label(self) -> str:
        return f"{self.maker} {self.model}"

    @property
    def last_touched_millis(self) -> int:
        return max(self.updated_at_epoch_millis, self.created_at_epoch_millis)


class LedgerEntry(BaseModel):
    """Minutes accumulated today for one tool."""

    tool_id: str = Field(..., alias="toolId")
    minutes: int = Field(..., description="Accumulated minutes for the day.")

    model_config = _DOCUMENT_CONFIG


class HistoryRecord(BaseModel):
    """
    One recorded exposure. Tool fields are copied at recording time and points
    are never recomputed, so a record keeps its meaning after the tool changes.
    """

    id: str
    epoch_millis: int = Field(..., alias="epochMillis")
    tool_id: str = Field(..., alias="toolId")
    maker: str
    model: str
    vibration_ms2: float = Field(..., alias="vibrationMs2")
    minutes: int
    points: float

    model_config = _DOCUMENT_CONFIG


class DailyLedger(BaseModel):
    """
    Accumulated minutes and exposure history for one local calendar day.

    ``tools`` is no longer used (the catalog lives in its own document) but
    is always written, empty, so older readers still accept the document.
    """

    day_id: int = Field(0, alias="dayId")
    tools: List[Tool] = Field(default_factory=list)
    entries: List[LedgerEntry] = Field(default_factory=list)
    history: List[HistoryRecord] = Field(default_factory=list)

    model_config = _DOCUMENT_CONFIG

    @field_validator("entries")
    @classmethod
    def _merge_duplicate_entries(cls, entries: List[LedgerEntry]) -> List[LedgerEntry]:
        merged: Dict[str, int] = {}
        for entry in entries:
            merged[entry.tool_id] = merged.get(entry.tool_id, 0) + entry.minutes
        if len(merged) == len(entries):
            return entries
        return [LedgerEntry(tool_id=tool_id, minutes=minutes) for tool_id, minutes in merged.items()]

    def minutes_for(self, tool_id: str) -> int:
        for entry in self.entries:
            if entry.tool_id == tool_id:
                return entry.minutes
        return 0

    @property
    def total_points(self) -> float:
        return sum(record.points for record in self.history)

    def with_exposure(self, record: HistoryRecord) -> "DailyLedger":
        """Append ``record`` and move its tool's entry to the end with the new total."""
        existing = self.minutes_for(record.tool_id)
        entries = [e for e in self.entries if e.tool_id != record.tool_id]
        entries.append(LedgerEntry(tool_id=record.tool_id, minutes=existing + record.minutes))
        return self.model_copy(
            update={"tools": [], "entries": entries, "history": [*self.history, record]}
        )

    def without_tool(self, tool_id: str) -> "DailyLedger":
        return self.model_copy(
            update={
                "tools": [],
                "entries": [e for e in self.entries if e.tool_id != tool_id],
                "history": [h for h in self.history if h.tool_id != tool_id],
            }
        )

    def cleared(self) -> "DailyLedger":
        return DailyLedger(day_id=self.day_id)

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True)


ToolList = TypeAdapter(List[Tool])


__all__ = ["Tool", "LedgerEntry", "HistoryRecord", "DailyLedger", "ToolList"]
