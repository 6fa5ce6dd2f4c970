from __future__ import annotations

from enum import Enum
from typing import Sequence

from models.records import Reading

DEAD_BAND = 1.0


class Trend(str, Enum):
    """Short-term direction of a measurement."""

    up = "up"
    down = "down"
    stable = "stable"


def trend(field: str, readings: Sequence[Reading]) -> Trend:
    """Compare the two newest readings of an already descending sequence."""
    if len(readings) < 2:
        return Trend.stable

    latest = readings[0].get(field)
    previous = readings[1].get(field)
    if latest is None or previous is None:
        return Trend.stable

    if latest > previous + DEAD_BAND:
        return Trend.up
    if latest < previous - DEAD_BAND:
        return Trend.down
    return Trend.stable
