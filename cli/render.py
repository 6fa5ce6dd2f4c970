from __future__ import annotations

from typing import Any, Iterable

import typer

from models.records import MEASUREMENT_FIELDS
from services.exporter import format_timestamp, format_value
from services.poller import TelemetrySnapshot
from services.trend import Trend

_LABELS = {
    "soil_moisture": "Soil moisture (%)",
    "temperature": "Temperature (°C)",
    "humidity": "Humidity (%)",
    "light_lux": "Light (lux)",
}

_TREND_MARKS = {Trend.up: "↑", Trend.down: "↓", Trend.stable: "-"}


def echo_heading(text: str) -> None:
    typer.secho(text, bold=True)


def echo_key_values(pairs: Iterable[tuple[str, Any]]) -> None:
    for key, value in pairs:
        typer.echo(f"{key}: {value}")


def _display(value: Any) -> str:
    return "n/a" if value is None else format_value(value)


def render_snapshot(snapshot: TelemetrySnapshot) -> None:
    if snapshot.alert_text:
        typer.secho(f"ALERT: {snapshot.alert_text}", fg=typer.colors.RED, bold=True)
        typer.echo()

    if snapshot.last_error:
        typer.secho(f"Connection error: {snapshot.last_error}", fg=typer.colors.RED, err=True)

    latest = snapshot.latest
    if latest is None:
        echo_heading("No Data Available")
        typer.echo("Waiting for sensor readings...")
        return

    echo_heading("Latest Reading")
    echo_key_values(
        [
            ("device_id", latest.device_id),
            ("time", format_timestamp(latest.timestamp)),
            ("moisture_level", snapshot.moisture_level),
            ("temperature_status", snapshot.temperature_status),
            ("humidity_status", snapshot.humidity_status),
        ]
    )
    for name in MEASUREMENT_FIELDS:
        mark = _TREND_MARKS[snapshot.trends[name]]
        typer.echo(f"{_LABELS[name]}: {_display(latest.get(name))} {mark}")

    typer.echo()
    echo_heading("Statistics")
    for name in MEASUREMENT_FIELDS:
        field_stats = snapshot.stats[name]
        typer.echo(
            f"{_LABELS[name]}: min {field_stats.min} | avg {field_stats.avg} | max {field_stats.max}"
        )

    typer.echo()
    last_update = snapshot.last_update.astimezone().strftime("%X") if snapshot.last_update else "never"
    typer.echo(f"Last update: {last_update} | Total readings: {snapshot.reading_count}")
