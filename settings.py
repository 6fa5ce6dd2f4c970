from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Optional


_ENDPOINT_URL_ENV = "TELEMETRY_ENDPOINT_URL"
_POLL_INTERVAL_ENV = "TELEMETRY_POLL_INTERVAL"
_FETCH_TIMEOUT_ENV = "TELEMETRY_FETCH_TIMEOUT"
_MAX_READINGS_ENV = "TELEMETRY_MAX_READINGS"
_LOG_LEVEL_ENV = "LOG_LEVEL"

DEFAULT_ENDPOINT_URL = "http://localhost:8000/readings"
DEFAULT_POLL_INTERVAL = 5.0
DEFAULT_FETCH_TIMEOUT = 4.0


@dataclass(frozen=True)
class Settings:
    endpoint_url: str
    poll_interval: float
    fetch_timeout: float
    max_readings: Optional[int]
    log_level: str


def _read_str_env(name: str, default: str) -> str:
    value = os.getenv(name)
    if value is None:
        return default
    candidate = value.strip()
    return candidate or default


def _read_float_env(name: str, default: float) -> float:
    value = os.getenv(name)
    if value is None:
        return default
    candidate = value.strip()
    if not candidate:
        return default
    try:
        parsed = float(candidate)
    except ValueError:
        return default
    return parsed if parsed > 0 else default


def _read_max_readings() -> Optional[int]:
    value = os.getenv(_MAX_READINGS_ENV)
    if value is None:
        return None
    candidate = value.strip()
    if not candidate:
        return None
    try:
        parsed = int(candidate)
    except ValueError:
        return None
    return parsed if parsed > 0 else None


def _read_log_level(default: str) -> str:
    value = os.getenv(_LOG_LEVEL_ENV)
    if value is None:
        return default
    candidate = value.strip()
    if not candidate:
        return default
    return candidate.upper()


@lru_cache
def get_settings() -> Settings:
    return Settings(
        endpoint_url=_read_str_env(_ENDPOINT_URL_ENV, DEFAULT_ENDPOINT_URL),
        poll_interval=_read_float_env(_POLL_INTERVAL_ENV, DEFAULT_POLL_INTERVAL),
        fetch_timeout=_read_float_env(_FETCH_TIMEOUT_ENV, DEFAULT_FETCH_TIMEOUT),
        max_readings=_read_max_readings(),
        log_level=_read_log_level("INFO"),
    )
