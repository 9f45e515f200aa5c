"""
Tool form validation.

Raw text from the user is checked and normalised here before any store is
touched. Rejections raise `InvalidToolInput` carrying a short reason meant to
be shown as-is.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional

from havs.errors import InvalidToolInput


@dataclass(frozen=True)
class ToolDraft:
    """Validated tool attributes, ready to be added or applied to a tool."""

    maker: str
    model: str
    vibration_ms2: float
    max_minutes_to_350: int = 0
    noise_db: float = 0.0


def _parse_decimal(text: Optional[str]) -> Optional[float]:
    if text is None:
        return None
    try:
        value = float(text.strip().replace(",", "."))
    except ValueError:
        return None
    return value if math.isfinite(value) else None


def parse_tool_input(
    maker: str,
    model: str,
    vibration: str,
    max_minutes_to_350: str = "",
    noise_db: str = "",
) -> ToolDraft:
    """
    Validate tool form fields.

    Maker, model and a positive vibration magnitude are required. Both decimal
    fields accept a comma separator. Max minutes keeps its digits only and
    noise falls back to 0 when unparseable; 0 means "not set" for both.
    """
    maker = (maker or "").strip()
    model = (model or "").strip()
    vib = _parse_decimal(vibration)

    if not maker:
        raise InvalidToolInput("Maker required")
    if not model:
        raise InvalidToolInput("Model required")
    if vib is None or vib <= 0.0:
        raise InvalidToolInput("Vibration must be > 0")

    digits = "".join(ch for ch in (max_minutes_to_350 or "") if ch in "0123456789")
    noise = _parse_decimal(noise_db) or 0.0

    return ToolDraft(
        maker=maker,
        model=model,
        vibration_ms2=vib,
        max_minutes_to_350=int(digits) if digits else 0,
        noise_db=max(noise, 0.0),
    )


__all__ = ["ToolDraft", "parse_tool_input"]
