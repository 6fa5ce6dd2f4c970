from __future__ import annotations

import asyncio
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import typer

from cli.config import CLIConfig, load_config
from cli.render import render_snapshot
from services.exporter import export_filename, serialize
from services.poller import Poller, TelemetrySnapshot
from services.source import TelemetryClient


@dataclass
class CLIState:
    config: CLIConfig


app = typer.Typer(
    help="Monitor a plant sensor feed from the terminal.",
    context_settings={"help_option_names": ["-h", "--help"]},
)


def _get_state(ctx: typer.Context) -> CLIState:
    state = ctx.obj
    if not isinstance(state, CLIState):
        typer.secho("CLI state is uninitialized.", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)
    return state


def _build_poller(config: CLIConfig) -> Poller:
    client = TelemetryClient(config.endpoint_url, timeout=config.fetch_timeout)
    return Poller(source=client, interval=config.poll_interval, max_readings=config.max_readings)


async def _close(poller: Poller) -> None:
    aclose = getattr(poller.source, "aclose", None)
    if aclose is not None:
        await aclose()


async def _refresh_once(config: CLIConfig) -> TelemetrySnapshot:
    poller = _build_poller(config)
    try:
        await poller.refresh()
        return poller.snapshot()
    finally:
        await _close(poller)


async def _watch(config: CLIConfig, count: Optional[int]) -> None:
    poller = _build_poller(config)
    cycles = 0
    try:
        while count is None or cycles < count:
            if cycles:
                await asyncio.sleep(config.poll_interval)
                typer.echo("-" * 40)
            await poller.refresh()
            render_snapshot(poller.snapshot())
            cycles += 1
    finally:
        await _close(poller)


@app.callback()
def main(
    ctx: typer.Context,
    endpoint: Optional[str] = typer.Option(
        None,
        "--endpoint",
        "-e",
        help="Readings endpoint URL (defaults to TELEMETRY_ENDPOINT_URL env).",
    ),
    poll_interval: Optional[float] = typer.Option(
        None,
        "--poll-interval",
        help="Seconds between refresh cycles.",
    ),
    timeout: Optional[float] = typer.Option(
        None,
        "--timeout",
        help="Maximum seconds to wait for one fetch.",
    ),
) -> None:
    """Entry point for the CLI."""
    config = load_config(
        endpoint_url=endpoint,
        poll_interval=poll_interval,
        fetch_timeout=timeout,
    )
    ctx.obj = CLIState(config=config)


@app.command("summary")
def summary_command(ctx: typer.Context) -> None:
    """Fetch once and print the latest reading, trends and statistics."""
    state = _get_state(ctx)
    snapshot = asyncio.run(_refresh_once(state.config))
    render_snapshot(snapshot)
    if snapshot.last_error:
        raise typer.Exit(code=1)


@app.command("watch")
def watch_command(
    ctx: typer.Context,
    count: Optional[int] = typer.Option(
        None,
        "--count",
        "-n",
        min=1,
        help="Stop after this many refresh cycles (default: run until interrupted).",
    ),
) -> None:
    """Refresh on the poll interval and re-render after every cycle."""
    state = _get_state(ctx)
    typer.echo(
        f"Watching {state.config.endpoint_url} (interval={state.config.poll_interval}s). Ctrl-C to stop."
    )
    try:
        asyncio.run(_watch(state.config, count))
    except KeyboardInterrupt:
        typer.echo("Stopped.")


@app.command("export")
def export_command(
    ctx: typer.Context,
    output: Path = typer.Option(
        Path("."),
        "--output",
        "-o",
        file_okay=False,
        dir_okay=True,
        help="Directory to write the dated CSV file into.",
    ),
) -> None:
    """Fetch once and save the readings as plant-data-YYYY-MM-DD.csv."""
    state = _get_state(ctx)
    snapshot = asyncio.run(_refresh_once(state.config))
    if snapshot.last_error:
        typer.secho(f"Fetch failed: {snapshot.last_error}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)
    if not snapshot.readings:
        typer.secho("No readings available to export.", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)

    output.mkdir(parents=True, exist_ok=True)
    path = output / export_filename()
    path.write_text(serialize(snapshot.readings), encoding="utf-8")
    typer.secho(f"Exported {snapshot.reading_count} readings to {path}", fg=typer.colors.GREEN)
