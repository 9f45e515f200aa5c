from __future__ import annotations

import json
from pathlib import Path

import pytest

from havs.domain.models import ToolList
from havs.errors import CatalogImportError, StorageWriteError
from havs.infrastructure import tool_catalog
from havs.infrastructure.tool_catalog import ToolCatalogStore

SEED_DOCUMENT = json.dumps(
    [
        {
            "id": "seed-1",
            "maker": "Hilti",
            "model": "TE 3000",
            "vibrationMs2": 6.5,
            "createdAtEpochMillis": 1,
        }
    ]
)


def test_ensure_initialized_copies_seed(tmp_path: Path) -> None:
    seed = tmp_path / "seed.json"
    seed.write_text(SEED_DOCUMENT, encoding="utf-8")
    store = ToolCatalogStore(tmp_path / "data" / "tools.json", seed_path=seed)

    store.ensure_initialized()

    assert store.path.read_text(encoding="utf-8") == SEED_DOCUMENT
    assert [t.id for t in store.read_all()] == ["seed-1"]


def test_ensure_initialized_does_not_overwrite_existing(tmp_path: Path) -> None:
    seed = tmp_path / "seed.json"
    seed.write_text(SEED_DOCUMENT, encoding="utf-8")
    path = tmp_path / "tools.json"
    path.write_text("[]", encoding="utf-8")

    store = ToolCatalogStore(path, seed_path=seed)
    store.ensure_initialized()
    store.ensure_initialized()

    assert store.read_all() == []


@pytest.mark.parametrize("seed_text", [None, "{not json", '{"id": "x"}'])
def test_missing_or_malformed_seed_gives_empty_catalog(tmp_path: Path, seed_text) -> None:
    seed = tmp_path / "seed.json"
    if seed_text is not None:
        seed.write_text(seed_text, encoding="utf-8")
    store = ToolCatalogStore(tmp_path / "tools.json", seed_path=seed)

    assert store.read_all() == []
    assert store.path.read_text(encoding="utf-8") == "[]"


def test_bundled_seed_is_valid(tmp_path: Path) -> None:
    tools = ToolCatalogStore(tmp_path / "tools.json").read_all()

    assert tools
    assert all(t.vibration_ms2 > 0 for t in tools)


@pytest.mark.parametrize("contents", ["", "   \n", "[{broken", '[{"id": "a"}]'])
def test_read_all_degrades_to_empty(catalog: ToolCatalogStore, contents: str) -> None:
    catalog.ensure_initialized()
    catalog.path.write_text(contents, encoding="utf-8")

    assert catalog.read_all() == []


def test_write_all_replaces_document(catalog: ToolCatalogStore, make_tool) -> None:
    first = make_tool("a")
    second = make_tool("b", maker="DeWalt", noise_db=89.0, max_minutes_to_350=300)

    catalog.write_all([first, second])
    assert catalog.read_all() == [first, second]

    catalog.write_all([second])
    assert catalog.read_all() == [second]
    assert catalog.find("a") is None
    assert catalog.find("b") == second


def test_export_returns_document_verbatim(catalog: ToolCatalogStore) -> None:
    catalog.ensure_initialized()
    raw = '[ {"id":"a","maker":"M","model":"X","vibrationMs2":4,"createdAtEpochMillis":1} ]'
    catalog.path.write_text(raw, encoding="utf-8")

    assert catalog.export_snapshot() == raw


def test_import_of_export_leaves_catalog_unchanged(catalog: ToolCatalogStore, make_tool) -> None:
    catalog.write_all([make_tool("a"), make_tool("b", vibration=2.5, noise_db=80.0)])
    before = catalog.read_all()

    catalog.import_snapshot(catalog.export_snapshot())

    assert catalog.read_all() == before


def test_import_normalizes_older_documents(catalog: ToolCatalogStore) -> None:
    raw = json.dumps(
        [{"id": "a", "maker": "M", "model": "X", "vibrationMs2": 4, "createdAtEpochMillis": 1, "legacy": True}]
    )

    imported = catalog.import_snapshot(raw)

    assert imported[0].noise_db == 0.0
    stored = json.loads(catalog.path.read_text(encoding="utf-8"))
    assert "legacy" not in stored[0]
    assert stored[0]["maxMinutesTo350"] == 0
    assert ToolList.validate_json(catalog.export_snapshot()) == imported


@pytest.mark.parametrize(
    "payload",
    [
        "not json at all",
        '{"id": "a"}',
        '[{"maker": "M"}]',
        '[{"id": "a", "maker": "M", "model": "X", "vibrationMs2": "fast", "createdAtEpochMillis": 1}]',
    ],
)
def test_malformed_import_fails_and_keeps_document(
    catalog: ToolCatalogStore, make_tool, payload: str
) -> None:
    catalog.write_all([make_tool("a")])
    before = catalog.path.read_text(encoding="utf-8")

    with pytest.raises(CatalogImportError):
        catalog.import_snapshot(payload)

    assert catalog.path.read_text(encoding="utf-8") == before


def test_read_all_degrades_on_non_utf8_file(catalog: ToolCatalogStore) -> None:
    catalog.ensure_initialized()
    catalog.path.write_bytes(b'[{"id": "\xff\xfe"}]')

    assert catalog.read_all() == []


def test_non_utf8_seed_gives_empty_catalog(tmp_path: Path) -> None:
    seed = tmp_path / "seed.json"
    seed.write_bytes(b"\xff\xfe[]")
    store = ToolCatalogStore(tmp_path / "tools.json", seed_path=seed)

    assert store.read_all() == []
    assert store.path.read_text(encoding="utf-8") == "[]"


def test_import_accepts_utf8_bytes(catalog: ToolCatalogStore, make_tool) -> None:
    catalog.write_all([make_tool("a"), make_tool("b")])
    before = catalog.read_all()

    catalog.import_snapshot(catalog.export_snapshot().encode("utf-8"))

    assert catalog.read_all() == before


def test_non_utf8_import_fails_and_keeps_document(catalog: ToolCatalogStore, make_tool) -> None:
    catalog.write_all([make_tool("a")])
    before = catalog.path.read_text(encoding="utf-8")

    with pytest.raises(CatalogImportError):
        catalog.import_snapshot(b"\xff[]")

    assert catalog.path.read_text(encoding="utf-8") == before


def test_failed_write_leaves_previous_document(catalog: ToolCatalogStore, make_tool, monkeypatch) -> None:
    catalog.write_all([make_tool("a")])
    before = catalog.path.read_text(encoding="utf-8")

    def fail_replace(src, dst) -> None:
        raise OSError("disk full")

    monkeypatch.setattr(tool_catalog.os, "replace", fail_replace)

    with pytest.raises(StorageWriteError):
        catalog.import_snapshot(catalog.export_snapshot())

    assert catalog.path.read_text(encoding="utf-8") == before
    assert list(catalog.path.parent.iterdir()) == [catalog.path]
