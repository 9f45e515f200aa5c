from __future__ import annotations

import json

import pytest
from pydantic import ValidationError

from havs.domain.models import DailyLedger, HistoryRecord, LedgerEntry, Tool, ToolList


def _record(record_id: str, tool_id: str, minutes: int, points: float, at: int = 1) -> HistoryRecord:
    return HistoryRecord(
        id=record_id,
        epoch_millis=at,
        tool_id=tool_id,
        maker="Makita",
        model="HR2470",
        vibration_ms2=5.0,
        minutes=minutes,
        points=points,
    )


def test_tool_parses_camel_case_and_fills_unset_fields() -> None:
    tool = Tool.model_validate(
        {
            "id": "a",
            "maker": "Bosch",
            "model": "GSB",
            "vibrationMs2": 3,
            "createdAtEpochMillis": 10,
            "colour": "blue",
        }
    )
    assert tool.vibration_ms2 == 3.0
    assert tool.max_minutes_to_350 == 0
    assert tool.noise_db == 0.0
    assert tool.updated_at_epoch_millis == 0
    assert tool.last_touched_millis == 10


def test_tool_dumps_document_keys(make_tool) -> None:
    payload = json.loads(ToolList.dump_json([make_tool()], by_alias=True))
    assert set(payload[0]) == {
        "id",
        "maker",
        "model",
        "vibrationMs2",
        "createdAtEpochMillis",
        "maxMinutesTo350",
        "noiseDb",
        "updatedAtEpochMillis",
    }


def test_tool_requires_core_fields() -> None:
    with pytest.raises(ValidationError):
        Tool.model_validate({"id": "a", "maker": "Bosch"})


def test_ledger_document_keeps_vestigial_tools_key() -> None:
    payload = json.loads(DailyLedger(day_id=5).to_json())
    assert payload == {"dayId": 5, "tools": [], "entries": [], "history": []}


def test_ledger_merges_duplicate_entries() -> None:
    ledger = DailyLedger.model_validate(
        {
            "dayId": 1,
            "entries": [
                {"toolId": "a", "minutes": 10},
                {"toolId": "b", "minutes": 5},
                {"toolId": "a", "minutes": 15},
            ],
        }
    )
    assert ledger.entries == [
        LedgerEntry(tool_id="a", minutes=25),
        LedgerEntry(tool_id="b", minutes=5),
    ]


def test_with_exposure_accumulates_and_moves_entry_last() -> None:
    ledger = DailyLedger(
        day_id=1,
        entries=[LedgerEntry(tool_id="a", minutes=10), LedgerEntry(tool_id="b", minutes=5)],
    )
    updated = ledger.with_exposure(_record("r1", "a", 20, 1.0))

    assert [(e.tool_id, e.minutes) for e in updated.entries] == [("b", 5), ("a", 30)]
    assert [h.id for h in updated.history] == ["r1"]
    # original untouched
    assert ledger.minutes_for("a") == 10
    assert ledger.history == []


def test_without_tool_drops_entries_and_history() -> None:
    ledger = (
        DailyLedger(day_id=1)
        .with_exposure(_record("r1", "a", 10, 1.0))
        .with_exposure(_record("r2", "b", 10, 2.0))
    )
    pruned = ledger.without_tool("a")

    assert [e.tool_id for e in pruned.entries] == ["b"]
    assert [h.id for h in pruned.history] == ["r2"]
    assert pruned.total_points == pytest.approx(2.0)


def test_cleared_keeps_day_id() -> None:
    ledger = DailyLedger(day_id=42).with_exposure(_record("r1", "a", 10, 1.0))
    assert ledger.cleared() == DailyLedger(day_id=42)
