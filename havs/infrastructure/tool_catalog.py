"""
Tool catalog store: the full list of tools kept as one JSON array file.

Every write replaces the whole document. On first use the file is seeded from
a template (the bundled `havs/data/tools_seed.json` unless another path is
given). Passive reads tolerate a corrupt file and return an empty catalog;
imports are user-initiated and fail loudly instead.
"""

from __future__ import annotations

import os
from importlib import resources
from pathlib import Path
from typing import List, Optional, Sequence

from pydantic import ValidationError

from havs.domain.models import Tool, ToolList
from havs.errors import CatalogImportError, StorageWriteError
from havs.utils.logging import get_logger

log = get_logger(__name__)

EMPTY_DOCUMENT = "[]"


def _bundled_seed_text() -> str:
    return resources.files("havs").joinpath("data").joinpath("tools_seed.json").read_text(encoding="utf-8")


class ToolCatalogStore:
    """
    CRUD over the tool catalog document.

    Parameters
    ----------
    path : Path | str
        Location of the catalog JSON file.
    seed_path : Path | str | None
        Template copied in when the catalog file does not exist yet. None uses
        the bundled seed.
    """

    def __init__(self, path: Path | str, seed_path: Optional[Path | str] = None) -> None:
        self._path = Path(path)
        self._seed_path = Path(seed_path) if seed_path is not None else None

    @property
    def path(self) -> Path:
        return self._path

    def _seed_text(self) -> str:
        try:
            if self._seed_path is not None:
                raw = self._seed_path.read_text(encoding="utf-8")
            else:
                raw = _bundled_seed_text()
            ToolList.validate_json(raw)
        except (OSError, UnicodeDecodeError, ValidationError) as exc:
            log.warning(
                "Seed catalog unavailable; starting with an empty catalog",
                extra={"seed_path": str(self._seed_path or "bundled"), "error": str(exc)},
            )
            return EMPTY_DOCUMENT
        return raw

    def _write_text(self, text: str) -> None:
        # Written beside the target and swapped in, so a failed write leaves the old file intact.
        tmp_path = self._path.with_name(self._path.name + ".tmp")
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path.write_text(text, encoding="utf-8")
            os.replace(tmp_path, self._path)
        except OSError as exc:
            tmp_path.unlink(missing_ok=True)
            raise StorageWriteError(f"Failed to write tool catalog {self._path}: {exc}") from exc

    def ensure_initialized(self) -> None:
        if self._path.exists():
            return
        self._write_text(self._seed_text())
        log.info("Tool catalog seeded", extra={"path": str(self._path)})

    def read_all(self) -> List[Tool]:
        self.ensure_initialized()
        try:
            raw = self._path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            log.warning("Tool catalog unreadable", extra={"path": str(self._path), "error": str(exc)})
            return []
        if not raw.strip():
            return []
        try:
            return ToolList.validate_json(raw)
        except ValidationError as exc:
            log.warning(
                "Tool catalog is malformed; using an empty catalog",
                extra={"path": str(self._path), "errors": exc.error_count()},
            )
            return []

    def find(self, tool_id: str) -> Optional[Tool]:
        for tool in self.read_all():
            if tool.id == tool_id:
                return tool
        return None

    def write_all(self, tools: Sequence[Tool]) -> None:
        self.ensure_initialized()
        self._write_text(ToolList.dump_json(list(tools), by_alias=True, indent=2).decode("utf-8"))

    def export_snapshot(self) -> str:
        """Return the catalog document exactly as stored."""
        self.ensure_initialized()
        return self._path.read_text(encoding="utf-8")

    def import_snapshot(self, raw: str | bytes) -> List[Tool]:
        """
        Replace the catalog with ``raw`` after validating it as a tool list.

        Raises
        ------
        CatalogImportError
            ``raw`` is not UTF-8 or not a JSON array of tools. The stored
            catalog is untouched.
        """
        if isinstance(raw, bytes):
            try:
                raw = raw.decode("utf-8")
            except UnicodeDecodeError as exc:
                log.warning("Rejected catalog import", extra={"error": str(exc)})
                raise CatalogImportError(f"Invalid tools JSON: not UTF-8 ({exc.reason})") from exc
        try:
            tools = ToolList.validate_json(raw)
        except ValidationError as exc:
            log.warning("Rejected catalog import", extra={"errors": exc.error_count()})
            raise CatalogImportError(f"Invalid tools JSON: {exc.error_count()} error(s)") from exc

        self.write_all(tools)
        log.info("Tool catalog imported", extra={"tools": len(tools)})
        return tools


__all__ = ["ToolCatalogStore"]
