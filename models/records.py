"""Domain models shared across services."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Mapping, Optional

MEASUREMENT_FIELDS = ("soil_moisture", "temperature", "humidity", "light_lux")


def _coerce_float(value: Any) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        parsed = float(value)
    elif isinstance(value, str):
        try:
            parsed = float(value.strip())
        except ValueError:
            return None
    else:
        return None
    return parsed if math.isfinite(parsed) else None


@dataclass(frozen=True, slots=True)
class Reading:
    """A single timestamped sample from the plant sensor feed."""

    timestamp: int
    device_id: Optional[str] = None
    soil_moisture: Optional[float] = None
    temperature: Optional[float] = None
    humidity: Optional[float] = None
    light_lux: Optional[float] = None

    @classmethod
    def from_mapping(cls, item: Mapping[str, Any]) -> "Reading":
        """Build a reading from a decoded JSON object.

        Unknown keys are ignored and unusable measurement values become
        ``None``. Raises ``ValueError`` when the timestamp is missing or not
        numeric, since it is the only ordering key.
        """
        timestamp = _coerce_float(item.get("timestamp"))
        if timestamp is None:
            raise ValueError("missing or invalid timestamp")

        device_id = item.get("device_id")
        return cls(
            timestamp=int(timestamp),
            device_id=None if device_id is None else str(device_id),
            **{name: _coerce_float(item.get(name)) for name in MEASUREMENT_FIELDS},
        )

    def get(self, field: str) -> Optional[float]:
        if field not in MEASUREMENT_FIELDS:
            raise ValueError(f"Unknown measurement field {field!r}.")
        return getattr(self, field)
