"""Refresh-cycle orchestration for the telemetry feed."""

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass
from datetime import datetime, timezone
from functools import lru_cache
from types import MappingProxyType
from typing import Any, Mapping, Optional, Protocol, Set, Tuple, Union

from models.records import MEASUREMENT_FIELDS, Reading
from services.alerts import AlertState, evaluate, humidity_status, moisture_level, temperature_status
from services.normalizer import normalize
from services.source import FetchError, ProtocolError, TelemetryClient
from services.stats import FieldStats, stats
from services.trend import Trend, trend
from settings import get_settings

logger = logging.getLogger(__name__)


class TelemetrySource(Protocol):
    async def fetch(self) -> Any: ...


@dataclass(frozen=True)
class FetchSuccess:
    sequence: int
    readings: Tuple[Reading, ...]


@dataclass(frozen=True)
class FetchFailure:
    sequence: int
    message: str
    status_code: Optional[int] = None


FetchOutcome = Union[FetchSuccess, FetchFailure]


@dataclass(frozen=True)
class TelemetrySnapshot:
    """Read-only view of the poller state after the latest applied cycle."""

    readings: Tuple[Reading, ...]
    stats: Mapping[str, FieldStats]
    trends: Mapping[str, Trend]
    alerts: Tuple[str, ...]
    alert_text: Optional[str]
    moisture_level: Optional[str]
    temperature_status: Optional[str]
    humidity_status: Optional[str]
    last_update: Optional[datetime]
    last_error: Optional[str]
    loading: bool
    fetching: bool

    @property
    def latest(self) -> Optional[Reading]:
        return self.readings[0] if self.readings else None

    @property
    def reading_count(self) -> int:
        return len(self.readings)


class Poller:
    """Owns the working reading set and keeps it fresh.

    Every ``refresh()`` is tagged with a sequence number when dispatched and
    its outcome is applied only if no later-dispatched refresh has already
    been applied, so overlapping fetches cannot roll the state back.
    """

    def __init__(
        self,
        source: TelemetrySource,
        interval: float = 5.0,
        max_readings: Optional[int] = None,
    ) -> None:
        if max_readings is not None and max_readings < 1:
            raise ValueError(f"max_readings must be at least 1, got {max_readings}.")
        self.source = source
        self.interval = interval
        self.max_readings = max_readings
        self._readings: Tuple[Reading, ...] = ()
        self._last_update: Optional[datetime] = None
        self._last_error: Optional[str] = None
        self._alert = AlertState()
        self._loading = True
        self._dispatched = 0
        self._applied = 0
        self._in_flight = 0
        self._timer_task: Optional[asyncio.Task[None]] = None
        self._pending: Set[asyncio.Task[Optional[FetchOutcome]]] = set()

    @property
    def running(self) -> bool:
        return self._timer_task is not None and not self._timer_task.done()

    @property
    def fetching(self) -> bool:
        return self._in_flight > 0

    async def refresh(self) -> Optional[FetchOutcome]:
        """Run one fetch cycle; returns ``None`` if the result was stale."""
        self._dispatched += 1
        sequence = self._dispatched
        self._in_flight += 1
        start_time = time.perf_counter()
        try:
            outcome = await self._fetch(sequence)
        finally:
            self._in_flight -= 1
        elapsed_ms = int((time.perf_counter() - start_time) * 1000)
        return self._apply(outcome, elapsed_ms)

    def dismiss_alert(self) -> None:
        self._alert.dismiss()

    def snapshot(self) -> TelemetrySnapshot:
        readings = self._readings
        latest = readings[0] if readings else None
        return TelemetrySnapshot(
            readings=readings,
            stats=MappingProxyType({name: stats(name, readings) for name in MEASUREMENT_FIELDS}),
            trends=MappingProxyType({name: trend(name, readings) for name in MEASUREMENT_FIELDS}),
            alerts=self._alert.messages if self._alert.visible else (),
            alert_text=self._alert.text,
            moisture_level=moisture_level(latest.soil_moisture if latest else None),
            temperature_status=temperature_status(latest.temperature if latest else None),
            humidity_status=humidity_status(latest.humidity if latest else None),
            last_update=self._last_update,
            last_error=self._last_error,
            loading=self._loading,
            fetching=self.fetching,
        )

    def start(self) -> None:
        """Refresh now and then every ``interval`` seconds until ``stop()``."""
        if self.running:
            return
        self._timer_task = asyncio.create_task(self._run())

    async def stop(self) -> None:
        tasks = [task for task in (self._timer_task, *self._pending) if task is not None]
        self._timer_task = None
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        self._pending.clear()

    async def _run(self) -> None:
        while True:
            self._spawn_refresh()
            await asyncio.sleep(self.interval)

    def _spawn_refresh(self) -> None:
        # A slow fetch must not hold up the timer; the sequence gate orders results.
        task = asyncio.create_task(self.refresh())
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def _fetch(self, sequence: int) -> FetchOutcome:
        try:
            payload = await self.source.fetch()
            readings = normalize(payload)
        except ProtocolError as exc:
            return FetchFailure(sequence=sequence, message=str(exc), status_code=exc.status_code)
        except FetchError as exc:
            return FetchFailure(sequence=sequence, message=str(exc))
        except Exception as exc:  # noqa: BLE001 - a bad cycle must not kill the loop
            logger.exception("Unexpected error during refresh", extra={"sequence": sequence})
            return FetchFailure(sequence=sequence, message=str(exc) or exc.__class__.__name__)
        return FetchSuccess(sequence=sequence, readings=tuple(readings))

    def _apply(self, outcome: FetchOutcome, elapsed_ms: int) -> Optional[FetchOutcome]:
        if outcome.sequence <= self._applied:
            logger.debug(
                "Discarding stale refresh result",
                extra={"sequence": outcome.sequence, "elapsed_ms": elapsed_ms},
            )
            return None
        self._applied = outcome.sequence
        self._loading = False

        if isinstance(outcome, FetchFailure):
            self._last_error = outcome.message
            logger.warning(
                "Refresh failed: %s",
                outcome.message,
                extra={
                    "sequence": outcome.sequence,
                    "status_code": outcome.status_code,
                    "elapsed_ms": elapsed_ms,
                },
            )
            return outcome

        if not outcome.readings:
            logger.debug("Refresh returned no readings", extra={"sequence": outcome.sequence})
            return outcome

        readings = outcome.readings
        if self.max_readings is not None:
            readings = readings[: self.max_readings]
        self._readings = readings
        self._last_error = None
        self._last_update = datetime.now(timezone.utc)
        self._alert.apply(evaluate(readings[0]))
        logger.info(
            "Applied refresh",
            extra={
                "sequence": outcome.sequence,
                "reading_count": len(readings),
                "elapsed_ms": elapsed_ms,
            },
        )
        return outcome


@lru_cache
def build_default_poller() -> Poller:
    """Factory that wires the poller to the configured endpoint."""
    settings = get_settings()
    client = TelemetryClient(settings.endpoint_url, timeout=settings.fetch_timeout)
    return Poller(
        source=client,
        interval=settings.poll_interval,
        max_readings=settings.max_readings,
    )
