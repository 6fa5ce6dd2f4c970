from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from settings import (
    DEFAULT_ENDPOINT_URL,
    DEFAULT_FETCH_TIMEOUT,
    DEFAULT_POLL_INTERVAL,
    get_settings,
)


@dataclass(frozen=True)
class CLIConfig:
    endpoint_url: str = DEFAULT_ENDPOINT_URL
    poll_interval: float = DEFAULT_POLL_INTERVAL
    fetch_timeout: float = DEFAULT_FETCH_TIMEOUT
    max_readings: Optional[int] = None


def _positive(value: Optional[float], default: float) -> float:
    if value is None or value <= 0:
        return default
    return value


def load_config(
    endpoint_url: Optional[str] = None,
    poll_interval: Optional[float] = None,
    fetch_timeout: Optional[float] = None,
) -> CLIConfig:
    """Command-line options win over environment settings."""
    settings = get_settings()
    return CLIConfig(
        endpoint_url=(endpoint_url or settings.endpoint_url).strip(),
        poll_interval=_positive(poll_interval, settings.poll_interval),
        fetch_timeout=_positive(fetch_timeout, settings.fetch_timeout),
        max_readings=settings.max_readings,
    )
