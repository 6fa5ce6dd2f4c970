"""Summary statistics over a measurement field."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterable

from models.records import MEASUREMENT_FIELDS, Reading


@dataclass(frozen=True)
class FieldStats:
    """Min, max and mean of one field; all zero when no value was present."""

    min: float = 0.0
    max: float = 0.0
    avg: float = 0.0
    count: int = 0

    def rounded(self, digits: int = 1) -> "FieldStats":
        return FieldStats(
            min=round(self.min, digits),
            max=round(self.max, digits),
            avg=round(self.avg, digits),
            count=self.count,
        )


def compute_stats(field: str, readings: Iterable[Reading]) -> FieldStats:
    """Full-precision statistics, skipping readings where ``field`` is absent."""
    if field not in MEASUREMENT_FIELDS:
        raise ValueError(f"Unknown measurement field {field!r}.")

    values = [value for value in (getattr(reading, field) for reading in readings) if value is not None]
    if not values:
        return FieldStats()

    low = min(values)
    high = max(values)
    # fsum can still land one ulp outside the range for repeated values
    avg = min(max(math.fsum(values) / len(values), low), high)
    return FieldStats(min=low, max=high, avg=avg, count=len(values))


def stats(field: str, readings: Iterable[Reading]) -> FieldStats:
    """Statistics rounded to one decimal place for display."""
    return compute_stats(field, readings).rounded(1)
