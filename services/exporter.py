"""CSV export of a reading set."""

from __future__ import annotations

import csv
import io
from datetime import date, datetime
from typing import Iterable, Optional

from models.records import MEASUREMENT_FIELDS, Reading

CSV_HEADERS = (
    "Timestamp",
    "Device ID",
    "Soil Moisture (%)",
    "Temperature (°C)",
    "Humidity (%)",
    "Light (lux)",
)
CSV_MEDIA_TYPE = "text/csv"


def format_timestamp(timestamp_ms: int) -> str:
    """Local date and time in the current locale's representation.

    Timestamps the platform cannot represent are returned as raw milliseconds.
    """
    try:
        return datetime.fromtimestamp(timestamp_ms / 1000).strftime("%c")
    except (OverflowError, OSError, ValueError):
        return str(timestamp_ms)


def format_value(value: Optional[float]) -> str:
    """Measurement as sent by the sensor: ``25`` rather than ``25.0``, empty when absent."""
    if value is None:
        return ""
    if value.is_integer():
        return str(int(value))
    return str(value)


def serialize(readings: Iterable[Reading]) -> str:
    """Render readings as CSV, one row each, in the order given."""
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(CSV_HEADERS)
    for reading in readings:
        writer.writerow(
            [
                format_timestamp(reading.timestamp),
                reading.device_id or "",
                *(format_value(getattr(reading, name)) for name in MEASUREMENT_FIELDS),
            ]
        )
    return buffer.getvalue()


def export_filename(day: Optional[date] = None) -> str:
    day = day or date.today()
    return f"plant-data-{day.isoformat()}.csv"
