"""Pydantic schemas for the HTTP API layer."""

from __future__ import annotations

from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from services.poller import TelemetrySnapshot
from services.trend import Trend


class ReadingModel(BaseModel):
    """One sensor sample as exposed to consumers."""

    timestamp: int = Field(..., description="Milliseconds since the Unix epoch.")
    device_id: Optional[str] = None
    soil_moisture: Optional[float] = None
    temperature: Optional[float] = None
    humidity: Optional[float] = None
    light_lux: Optional[float] = None


class FieldStatsModel(BaseModel):
    min: float
    max: float
    avg: float
    count: int = Field(..., ge=0, description="Readings where the field was present.")


class SnapshotResponse(BaseModel):
    """State of the feed after the most recent applied refresh."""

    readings: List[ReadingModel] = Field(default_factory=list)
    reading_count: int = Field(..., ge=0)
    latest: Optional[ReadingModel] = None
    stats: Dict[str, FieldStatsModel] = Field(default_factory=dict)
    trends: Dict[str, Trend] = Field(default_factory=dict)
    alerts: List[str] = Field(default_factory=list)
    alert_text: Optional[str] = None
    moisture_level: Optional[str] = None
    temperature_status: Optional[str] = None
    humidity_status: Optional[str] = None
    last_update: Optional[datetime] = None
    last_error: Optional[str] = None
    loading: bool
    fetching: bool

    @classmethod
    def from_snapshot(cls, snapshot: TelemetrySnapshot) -> "SnapshotResponse":
        readings = [ReadingModel.model_validate(reading, from_attributes=True) for reading in snapshot.readings]
        return cls(
            readings=readings,
            reading_count=snapshot.reading_count,
            latest=readings[0] if readings else None,
            stats={
                name: FieldStatsModel.model_validate(value, from_attributes=True)
                for name, value in snapshot.stats.items()
            },
            trends=dict(snapshot.trends),
            alerts=list(snapshot.alerts),
            alert_text=snapshot.alert_text,
            moisture_level=snapshot.moisture_level,
            temperature_status=snapshot.temperature_status,
            humidity_status=snapshot.humidity_status,
            last_update=snapshot.last_update,
            last_error=snapshot.last_error,
            loading=snapshot.loading,
            fetching=snapshot.fetching,
        )
