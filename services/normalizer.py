"""Turn raw data-source payloads into ordered readings."""

from __future__ import annotations

import json
import logging
from typing import Any, Iterable, List, Mapping

from models.records import Reading
from services.source import DecodeError

logger = logging.getLogger(__name__)


class NormalizationError(DecodeError):
    """Raised when a wrapped ``body`` string is not valid JSON."""


def _unwrap(payload: Any) -> List[Any]:
    if isinstance(payload, list):
        return payload
    if isinstance(payload, Mapping):
        body = payload.get("body")
        if isinstance(body, str):
            try:
                decoded = json.loads(body)
            except json.JSONDecodeError as exc:
                raise NormalizationError(f"Invalid JSON in response body field: {exc}") from exc
            if isinstance(decoded, list):
                return decoded
    return []


def _build_readings(candidates: Iterable[Any]) -> List[Reading]:
    readings: List[Reading] = []
    for index, candidate in enumerate(candidates):
        if not isinstance(candidate, Mapping):
            logger.warning(
                "Skipping candidate %d: not an object", index, extra={"reason": "not an object"}
            )
            continue
        try:
            readings.append(Reading.from_mapping(candidate))
        except ValueError as exc:
            logger.warning("Skipping candidate %d: %s", index, exc, extra={"reason": str(exc)})
    return readings


def normalize(payload: Any) -> List[Reading]:
    """Extract readings from a decoded payload, newest first.

    Accepts either a bare JSON array of readings or an object whose ``body``
    string holds such an array. Any other shape yields an empty list, which
    callers treat as "no data yet".
    """
    readings = _build_readings(_unwrap(payload))
    # sorted() is stable, so equal timestamps keep their input order.
    return sorted(readings, key=lambda reading: reading.timestamp, reverse=True)
