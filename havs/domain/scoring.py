"""
Hand-arm vibration exposure scoring.

Exposure points follow the HSE points scheme: a tool with a frequency-weighted
vibration magnitude ``a`` (m/s²) used for ``t`` hours scores ``2 * a² * t``
points. 100 points is the daily exposure action value, 350 the limit value.
"""

from __future__ import annotations

from enum import Enum

CAUTION_POINTS = 100.0
LIMIT_POINTS = 350.0


def points_for_minutes(vibration_ms2: float, minutes: int) -> float:
    # points = 2 * a^2 * (minutes / 60)
    hours = max(minutes, 0) / 60.0
    return 2.0 * vibration_ms2 * vibration_ms2 * hours


def points_per_minute(vibration_ms2: float) -> float:
    if vibration_ms2 <= 0:
        return 0.0
    return (vibration_ms2 * vibration_ms2) / 30.0


class ExposureBand(str, Enum):
    """Where a daily points total sits relative to the action and limit values."""

    BELOW_CAUTION = "Below 100 points"
    CAUTION = "Between 100 and 350 points"
    LIMIT = "350+ points"

    @property
    def style(self) -> str:
        """Rich colour used when rendering totals in this band."""
        return _BAND_STYLES[self]


_BAND_STYLES = {
    ExposureBand.BELOW_CAUTION: "green",
    ExposureBand.CAUTION: "dark_orange",
    ExposureBand.LIMIT: "red",
}


def band_for(points: float) -> ExposureBand:
    if points < CAUTION_POINTS:
        return ExposureBand.BELOW_CAUTION
    if points < LIMIT_POINTS:
        return ExposureBand.CAUTION
    return ExposureBand.LIMIT


__all__ = [
    "CAUTION_POINTS",
    "LIMIT_POINTS",
    "ExposureBand",
    "band_for",
    "points_for_minutes",
    "points_per_minute",
]
