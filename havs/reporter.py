from __future__ import annotations

from datetime import datetime
from typing import Optional

from rich import box
from rich.console import Console
from rich.table import Table

from havs.domain.models import HistoryRecord, Tool
from havs.domain.scoring import band_for, points_per_minute
from havs.tracker import TrackerState


def _points_text(points: float) -> str:
    return f"[{band_for(points).style}]{points:.1f}[/]"


def _optional(value: float, fmt: str) -> str:
    return format(value, fmt) if value > 0 else "-"


def _time_text(epoch_millis: int) -> str:
    return datetime.fromtimestamp(epoch_millis / 1000).strftime("%H:%M")


def print_tools(state: TrackerState, console: Optional[Console] = None) -> None:
    """
    Render the catalog as a rich table, most recently touched tools first.
    """
    console = console or Console()

    if not state.tools:
        console.print("[yellow]No tools in the catalog.[/yellow]")
        return

    table = Table(title="Tool catalog", box=box.ROUNDED)
    table.add_column("ID", style="dim", no_wrap=True)
    table.add_column("Maker", style="cyan")
    table.add_column("Model", style="cyan")
    table.add_column("Vibration (m/s²)", justify="right", style="magenta")
    table.add_column("Points/min", justify="right")
    table.add_column("Max min to 350", justify="right")
    table.add_column("Noise (dB)", justify="right")
    table.add_column("Used today (min)", justify="right", style="green")

    for tool in state.tools:
        table.add_row(
            tool.id,
            tool.maker,
            tool.model,
            f"{tool.vibration_ms2:.2f}",
            f"{points_per_minute(tool.vibration_ms2):.3f}",
            str(tool.max_minutes_to_350) if tool.max_minutes_to_350 > 0 else "-",
            _optional(tool.noise_db, ".1f"),
            str(state.minutes_for(tool.id)),
        )

    console.print(table)


def print_exposure(record: HistoryRecord, console: Optional[Console] = None) -> None:
    console = console or Console()
    console.print(
        f"{record.maker} {record.model}: {record.minutes} min → "
        f"Points: {_points_text(record.points)} "
        f"(points per minute: {points_per_minute(record.vibration_ms2):.3f})"
    )


def print_tool(tool: Tool, console: Optional[Console] = None) -> None:
    console = console or Console()
    console.print(
        f"[cyan]{tool.label}[/cyan] id={tool.id} vibration={tool.vibration_ms2:.2f} m/s²"
    )


def print_history(state: TrackerState, console: Optional[Console] = None) -> None:
    """
    Render today's exposure history (newest first) with the running total and
    its band: green below 100 points, orange up to 350, red beyond.
    """
    console = console or Console()
    total = state.today_points
    band = state.band

    console.print(f"Today total points: [{band.style}]{total:.1f}[/] ({band.value})")

    if not state.history:
        console.print("[yellow]No exposure recorded today.[/yellow]")
        return

    table = Table(title="Today's history", box=box.ROUNDED, caption="Newest first")
    table.add_column("Time", style="dim", no_wrap=True)
    table.add_column("Tool", style="cyan")
    table.add_column("Vibration (m/s²)", justify="right", style="magenta")
    table.add_column("Minutes", justify="right")
    table.add_column("Points", justify="right")

    for record in state.history:
        table.add_row(
            _time_text(record.epoch_millis),
            f"{record.maker} {record.model}",
            f"{record.vibration_ms2:.2f}",
            str(record.minutes),
            _points_text(record.points),
        )

    console.print(table)
